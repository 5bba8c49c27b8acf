import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from menuboard.core.config import settings
from menuboard.core.errors import ApiError
from menuboard.models.menu.category import Category
from menuboard.models.menu.item import Item
from menuboard.models.menu.menu import Menu
from menuboard.models.menu.item_image import ItemImage
from menuboard.schemas.menu import MenuCreate, MenuUpdate
from menuboard.utils import spaces

log = logging.getLogger(__name__)


async def assert_menu_belongs_to_user(db: AsyncSession, menu_id: int, user_id: int) -> Menu:
    """Ownership guard: the menu must exist, be active and belong to the tenant."""
    result = await db.execute(
        select(Menu).where(Menu.id == menu_id, Menu.user_id == user_id, Menu.active == True)
    )
    menu = result.scalar_one_or_none()
    if not menu:
        raise ApiError("You don't have permission to use this menu", 403, {"menu_id": menu_id})
    return menu


def _tree_options(active_only: bool):
    if active_only:
        categories = Menu.categories.and_(Category.active == True)
        items = Category.items.and_(Item.active == True)
        images = Item.images.and_(ItemImage.active == True)
    else:
        categories, items, images = Menu.categories, Category.items, Item.images
    return selectinload(categories).selectinload(items).selectinload(images)


async def get_menus(db: AsyncSession, user_id: int) -> List[Menu]:
    """Active menus of a tenant"""
    result = await db.execute(
        select(Menu).where(Menu.user_id == user_id, Menu.active == True).order_by(Menu.id.asc())
    )
    return result.scalars().all()


async def get_menu(db: AsyncSession, user_id: int, menu_id: int) -> Menu:
    result = await db.execute(
        select(Menu).where(Menu.id == menu_id, Menu.user_id == user_id)
    )
    menu = result.scalar_one_or_none()
    if not menu:
        raise ApiError("Menu not found", 404, {"menu_id": menu_id})
    return menu


async def get_menu_tree(db: AsyncSession, user_id: int, menu_id: int, active_only: bool = False) -> Menu:
    """Menu with categories -> items -> images, each level in display order"""
    query = select(Menu).where(Menu.id == menu_id, Menu.user_id == user_id)
    if active_only:
        query = query.where(Menu.active == True)

    result = await db.execute(query.options(_tree_options(active_only)))
    menu = result.scalar_one_or_none()
    if not menu:
        raise ApiError("Menu not found", 404, {"menu_id": menu_id})
    return menu


async def create_menu(db: AsyncSession, user_id: int, data: MenuCreate) -> Menu:
    menu = Menu(
        user_id=user_id,
        title=data.title.strip(),
        active=data.active,
        logo=data.logo or settings.default_menu_logo_url,
        background_image=data.background_image,
        color=data.color.model_dump() if data.color else None,
        pos=(data.pos or "").strip() or None,
    )
    db.add(menu)
    await db.commit()
    await db.refresh(menu)
    return menu


async def update_menu(db: AsyncSession, user_id: int, menu_id: int, updates: MenuUpdate) -> Menu:
    menu = await get_menu(db, user_id, menu_id)

    update_data = updates.model_dump(exclude_unset=True)
    if update_data.get("title") is None:
        update_data.pop("title", None)
    if update_data.get("active") is None:
        update_data.pop("active", None)
    if "pos" in update_data:
        update_data["pos"] = (update_data["pos"] or "").strip() or None

    if not update_data:
        return menu

    for key, value in update_data.items():
        setattr(menu, key, value)

    await db.commit()
    await db.refresh(menu)
    return menu


async def delete_menu(db: AsyncSession, user_id: int, menu_id: int) -> None:
    """Delete a menu with its categories, items and item images (storage included)"""
    menu = await get_menu_tree(db, user_id, menu_id)

    urls = [menu.logo, menu.background_image]
    for category in menu.categories:
        for item in category.items:
            urls.extend(image.url for image in item.images)

    await db.delete(menu)
    await db.commit()
    log.info("Deleted menu %s of tenant %s", menu_id, user_id)

    # storage goes only once the rows are gone
    for url in urls:
        if url and url != settings.default_menu_logo_url:
            await spaces.delete_by_url(url)
