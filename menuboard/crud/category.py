from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from menuboard.core.errors import ApiError
from menuboard.crud.menu import assert_menu_belongs_to_user
from menuboard.crud.patch import CategoryPatch
from menuboard.models.menu.category import Category
from menuboard.models.menu.item import Item
from menuboard.models.menu.menu import Menu
from menuboard.schemas.category import CategoryCreate, CategoryUpdate
from menuboard.services.positions.service import category_positions
from menuboard.utils import spaces


async def assert_category_belongs_to_user(db: AsyncSession, category_id: int, user_id: int) -> Category:
    """Ownership guard: active category inside an active menu of the tenant."""
    result = await db.execute(
        select(Category)
        .join(Menu, Category.menu_id == Menu.id)
        .where(
            Category.id == category_id,
            Category.active == True,
            Menu.user_id == user_id,
            Menu.active == True,
        )
    )
    category = result.scalar_one_or_none()
    if not category:
        raise ApiError("You don't have permission to use this category", 403, {"category_id": category_id})
    return category


async def get_categories(db: AsyncSession, user_id: int) -> List[Category]:
    result = await db.execute(
        select(Category)
        .join(Menu, Category.menu_id == Menu.id)
        .where(Menu.user_id == user_id, Category.active == True)
        .order_by(Category.menu_id.asc(), Category.position.asc(), Category.id.asc())
    )
    return result.scalars().all()


async def get_category(
    db: AsyncSession,
    user_id: int,
    category_id: int,
    active_only: bool = False,
    with_items: bool = False,
) -> Category:
    query = (
        select(Category)
        .join(Menu, Category.menu_id == Menu.id)
        .where(Category.id == category_id, Menu.user_id == user_id)
    )
    if active_only:
        query = query.where(Category.active == True)
    if with_items:
        query = query.options(selectinload(Category.items).selectinload(Item.images))

    result = await db.execute(query)
    category = result.scalar_one_or_none()
    if not category:
        raise ApiError("Category not found", 404, {"category_id": category_id})
    return category


async def create_category(db: AsyncSession, user_id: int, data: CategoryCreate) -> Category:
    await assert_menu_belongs_to_user(db, data.menu_id, user_id)

    position = await category_positions.assign_initial_position(db, data.menu_id)
    category = Category(
        menu_id=data.menu_id,
        title=data.title,
        active=data.active,
        position=position,
    )
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


async def update_category(db: AsyncSession, user_id: int, category_id: int, updates: CategoryUpdate) -> Category:
    category = await get_category(db, user_id, category_id)

    patch = CategoryPatch.from_update(updates)
    if updates.new_position is not None:
        patch.position = await category_positions.resolve_position_with_gaps(
            db, category.menu_id, updates.new_position, exclude_id=category.id
        )

    if patch.is_empty():
        return category

    patch.apply_to(category)
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, user_id: int, category_id: int) -> None:
    """Delete a category with its items and their images. Siblings keep their positions."""
    category = await get_category(db, user_id, category_id, with_items=True)

    urls = [image.url for item in category.items for image in item.images]

    await db.delete(category)
    await db.commit()

    for url in urls:
        await spaces.delete_by_url(url)
