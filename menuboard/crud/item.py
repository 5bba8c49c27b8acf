from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from menuboard.core.errors import ApiError
from menuboard.crud.category import assert_category_belongs_to_user
from menuboard.crud.patch import ItemPatch
from menuboard.models.menu.category import Category
from menuboard.models.menu.item import Item
from menuboard.models.menu.menu import Menu
from menuboard.schemas.item import ItemCreate, ItemUpdate
from menuboard.services.positions.service import item_positions
from menuboard.utils import spaces


def _owned_items(user_id: int):
    # Item -> Category -> Menu.user_id
    return (
        select(Item)
        .join(Category, Item.category_id == Category.id)
        .join(Menu, Category.menu_id == Menu.id)
        .where(Menu.user_id == user_id)
    )


async def get_items(db: AsyncSession, user_id: int) -> List[Item]:
    result = await db.execute(
        _owned_items(user_id)
        .where(Item.active == True, Menu.active == True)
        .options(selectinload(Item.images))
        .order_by(Item.category_id.asc(), Item.position.asc(), Item.id.asc())
    )
    return result.scalars().all()


async def get_item(db: AsyncSession, user_id: int, item_id: int, active_only: bool = False) -> Item:
    query = _owned_items(user_id).where(Item.id == item_id).options(selectinload(Item.images))
    if active_only:
        query = query.where(Item.active == True, Menu.active == True)

    result = await db.execute(query)
    item = result.scalar_one_or_none()
    if not item:
        raise ApiError("Item not found", 404, {"item_id": item_id})
    return item


async def create_item(db: AsyncSession, user_id: int, data: ItemCreate) -> Item:
    await assert_category_belongs_to_user(db, data.category_id, user_id)

    position = await item_positions.assign_initial_position(db, data.category_id)
    item = Item(
        category_id=data.category_id,
        title=data.title,
        description=data.description,
        price=data.price,
        active=data.active,
        position=position,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def update_item(db: AsyncSession, user_id: int, item_id: int, updates: ItemUpdate) -> Item:
    item = await get_item(db, user_id, item_id)

    if updates.category_id is not None and updates.category_id != item.category_id:
        raise ApiError(
            "Items can't be moved to another category",
            400,
            {"current_category_id": item.category_id, "requested_category_id": updates.category_id},
        )

    patch = ItemPatch.from_update(updates)
    if updates.new_position is not None:
        patch.position = await item_positions.resolve_position_with_gaps(
            db, item.category_id, updates.new_position, exclude_id=item.id
        )

    if patch.is_empty():
        return item

    patch.apply_to(item)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, user_id: int, item_id: int) -> None:
    item = await get_item(db, user_id, item_id)

    urls = [image.url for image in item.images]

    await db.delete(item)
    await db.commit()

    for url in urls:
        await spaces.delete_by_url(url)
