import logging
from typing import Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from menuboard.core.errors import ApiError
from menuboard.crud.item import get_item
from menuboard.models.menu.category import Category
from menuboard.models.menu.item import Item
from menuboard.models.menu.item_image import ItemImage
from menuboard.models.menu.menu import Menu
from menuboard.schemas.image import ItemImageUpsert
from menuboard.utils import spaces
from menuboard.utils.security import image_extension, validate_and_read_image

log = logging.getLogger(__name__)


async def _upload_image(file: UploadFile, user_id: int, item_id: int) -> str:
    body = await validate_and_read_image(file)
    key = spaces.build_key(user_id, f"items/{item_id}", image_extension(file))
    await spaces.put_public_object(key=key, body=body, content_type=file.content_type)
    return spaces.public_url(key)


def _pick_file(files: Dict[str, UploadFile], field: Optional[str]) -> Optional[UploadFile]:
    if not field:
        return None
    file = files.get(field)
    # empty file parts count as absent
    if file is None or not file.filename or file.size == 0:
        return None
    return file


async def _resolve_url(entry: ItemImageUpsert, files: Dict[str, UploadFile], user_id: int, item_id: int) -> Optional[str]:
    file = _pick_file(files, entry.file_field)
    if file is not None:
        return await _upload_image(file, user_id, item_id)
    return entry.url


async def get_item_images(db: AsyncSession, user_id: int, item_id: int) -> List[ItemImage]:
    item = await get_item(db, user_id, item_id)
    return list(item.images)


async def upsert_item_images(
    db: AsyncSession,
    user_id: int,
    item_id: int,
    entries: List[ItemImageUpsert],
    files: Dict[str, UploadFile],
) -> List[ItemImage]:
    """
    Apply an image set to one item: entries with an id update or delete that
    image, the others create a new one from an uploaded file or a URL.
    New images without an explicit sort_order go after the last one.
    """
    item = await get_item(db, user_id, item_id, active_only=True)
    existing = {image.id: image for image in item.images}
    next_sort = max((image.sort_order for image in item.images), default=-1) + 1

    # reject the request before anything reaches storage
    for entry in entries:
        if entry.id is not None and entry.id not in existing:
            raise ApiError("Image not found for this item", 404, {"image_id": entry.id})
        if entry.id is None and not entry.url and _pick_file(files, entry.file_field) is None:
            raise ApiError("Either url or an uploaded file is required", 400, {"file_field": entry.file_field})

    removed_urls = []
    for entry in entries:
        if entry.id is not None:
            image = existing[entry.id]

            if entry.delete:
                removed_urls.append(image.url)
                await db.delete(image)
                continue

            new_url = await _resolve_url(entry, files, user_id, item_id)
            if new_url and new_url != image.url:
                removed_urls.append(image.url)
                image.url = new_url
            if "alt" in entry.model_fields_set:
                image.alt = entry.alt
            if entry.sort_order is not None:
                image.sort_order = entry.sort_order
            if entry.active is not None:
                image.active = entry.active
            continue

        url = await _resolve_url(entry, files, user_id, item_id)
        sort_order = entry.sort_order if entry.sort_order is not None else next_sort
        next_sort = max(next_sort, sort_order + 1)
        db.add(ItemImage(
            item_id=item.id,
            url=url,
            alt=entry.alt,
            sort_order=sort_order,
            active=True if entry.active is None else entry.active,
        ))

    await db.commit()

    if removed_urls:
        log.info("Item %s: releasing %d replaced or deleted images", item.id, len(removed_urls))
    for url in removed_urls:
        await spaces.delete_by_url(url)

    result = await db.execute(
        select(ItemImage)
        .where(ItemImage.item_id == item.id)
        .order_by(ItemImage.sort_order.asc(), ItemImage.id.asc())
    )
    return result.scalars().all()


async def delete_item_image(db: AsyncSession, user_id: int, image_id: int) -> None:
    result = await db.execute(
        select(ItemImage)
        .join(Item, ItemImage.item_id == Item.id)
        .join(Category, Item.category_id == Category.id)
        .join(Menu, Category.menu_id == Menu.id)
        .where(ItemImage.id == image_id, Menu.user_id == user_id)
    )
    image = result.scalar_one_or_none()
    if not image:
        raise ApiError("Image not found", 404, {"image_id": image_id})

    url = image.url
    await db.delete(image)
    await db.commit()
    await spaces.delete_by_url(url)
