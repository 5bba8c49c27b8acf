"""
Bulk menu import from CSV.

One row per category or item; items attach to the closest category row
above them. Header:

    type,categoryTitle,categoryActive,categoryPosition,itemTitle,itemDescription,itemPrice,itemActive,itemPosition
"""
import csv
import io
import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from menuboard.core.errors import ApiError
from menuboard.crud.menu import get_menu
from menuboard.models.menu.category import Category
from menuboard.models.menu.item import Item
from menuboard.schemas.menu import MenuImportError, MenuImportSummary
from menuboard.services.positions.service import category_positions, item_positions
from menuboard.services.positions.space import sanitize_position
from menuboard.utils.security import validate_and_read_csv

log = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "si", "sí"}
FALSE_VALUES = {"0", "false", "no"}


@dataclass
class ParsedRow:
    row_number: int
    type: str
    title: str = ""
    active: bool = True
    position: Optional[float] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None


def normalize_key(value: str) -> str:
    return " ".join(value.lower().split())


def parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return default


def parse_number(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_price(value: Optional[str]) -> Optional[Decimal]:
    number = parse_number(value)
    if number is None or number < 0:
        return None
    try:
        return Decimal(value.strip()).quantize(Decimal("0.01"))
    except InvalidOperation:
        return None


def parse_csv(text: str) -> List[ParsedRow]:
    reader = csv.DictReader(io.StringIO(text))
    rows: List[ParsedRow] = []
    for index, raw in enumerate(reader):
        row_number = index + 2  # 1-based + header
        if not any((v or "").strip() for v in raw.values() if isinstance(v, str)):
            continue

        row_type = (raw.get("type") or "").strip().lower()
        if row_type not in ("category", "item"):
            raise ApiError(
                "The 'type' column can only be 'category' or 'item'.",
                400,
                {"row": row_number, "value": raw.get("type") or ""},
            )

        if row_type == "category":
            rows.append(ParsedRow(
                row_number=row_number,
                type=row_type,
                title=(raw.get("categoryTitle") or "").strip(),
                active=parse_bool(raw.get("categoryActive"), True),
                position=parse_number(raw.get("categoryPosition")),
            ))
        else:
            rows.append(ParsedRow(
                row_number=row_number,
                type=row_type,
                title=(raw.get("itemTitle") or "").strip(),
                active=parse_bool(raw.get("itemActive"), True),
                position=parse_number(raw.get("itemPosition")),
                description=(raw.get("itemDescription") or "").strip() or None,
                price=parse_price(raw.get("itemPrice")),
            ))
    return rows


async def import_menu_from_csv(
    db: AsyncSession,
    user_id: int,
    menu_id: int,
    file: Optional[UploadFile],
) -> MenuImportSummary:
    contents = await validate_and_read_csv(file)
    menu = await get_menu(db, user_id, menu_id)
    if not menu.active:
        raise ApiError("Menu not found or without permission.", 404, {"menu_id": menu_id})

    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ApiError("Could not read the CSV: it must be UTF-8.", 400, cause=e)

    try:
        rows = parse_csv(text)
    except csv.Error as e:
        raise ApiError("Could not read the CSV.", 400, {"message": str(e)}, e)
    if not rows:
        raise ApiError("The CSV is empty.", 400)

    summary = MenuImportSummary()

    result = await db.execute(select(Category).where(Category.menu_id == menu_id))
    categories_by_key: Dict[str, Category] = {}
    for category in result.scalars().all():
        categories_by_key.setdefault(normalize_key(category.title), category)

    last_category: Optional[Category] = None

    for row in rows:
        if row.type == "category":
            if not row.title:
                summary.errors.append(MenuImportError(row=row.row_number, message="The category needs a title."))
                last_category = None
                continue

            key = normalize_key(row.title)
            if key in categories_by_key:
                last_category = categories_by_key[key]
                summary.reused_categories += 1
                continue

            if row.position is not None:
                position = sanitize_position(row.position)
            else:
                position = await category_positions.assign_initial_position(db, menu_id)

            category = Category(menu_id=menu_id, title=row.title[:120], active=row.active, position=position)
            db.add(category)
            await db.flush()

            categories_by_key[key] = category
            last_category = category
            summary.created_categories += 1
            continue

        if last_category is None:
            summary.errors.append(MenuImportError(row=row.row_number, message="Declare a category before its items."))
            continue

        if not row.title:
            summary.errors.append(MenuImportError(row=row.row_number, message="The item needs a title."))
            continue

        if row.position is not None:
            position = sanitize_position(row.position)
        else:
            position = await item_positions.assign_initial_position(db, last_category.id)

        db.add(Item(
            category_id=last_category.id,
            title=row.title[:160],
            description=row.description[:500] if row.description else None,
            price=row.price,
            active=row.active,
            position=position,
        ))
        await db.flush()
        summary.created_items += 1

    await db.commit()
    log.info(
        "Imported menu %s: %d categories created, %d reused, %d items, %d row errors",
        menu_id, summary.created_categories, summary.reused_categories,
        summary.created_items, len(summary.errors),
    )
    return summary
