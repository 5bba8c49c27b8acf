# scripts/rebalance_positions.py
"""
Maintenance: renumber the categories of a menu, and the items of each of
those categories, to canonical 10000-spaced positions. Moves already do
this on demand; this is for groups imported with hand-written positions.

Usage:
  python -m scripts.rebalance_positions --menu 12
  python -m scripts.rebalance_positions --menu 12 --dry-run
"""
import argparse
import asyncio

from sqlalchemy.future import select

from menuboard.db import async_session
from menuboard.models.menu.category import Category
from menuboard.models.menu.menu import Menu
from menuboard.services.positions.service import category_positions, item_positions


async def rebalance_menu(menu_id: int, dry_run: bool = False) -> None:
    async with async_session() as session:
        menu = await session.get(Menu, menu_id)
        if not menu:
            print(f"⚠️  Menu {menu_id} not found")
            return

        written = await category_positions.rebalance_group(session, menu_id)
        print(f"📋 Menu {menu_id}: {written} categories renumbered")

        result = await session.execute(select(Category.id).where(Category.menu_id == menu_id))
        for category_id in result.scalars().all():
            count = await item_positions.rebalance_group(session, category_id)
            print(f"   • Category {category_id}: {count} items renumbered")

        if dry_run:
            await session.rollback()
            print("🧪 Dry run, nothing committed.")
        else:
            await session.commit()
            print("✅ Done.")


def main():
    parser = argparse.ArgumentParser(description="Rebalance menu positions")
    parser.add_argument("--menu", type=int, required=True)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    asyncio.run(rebalance_menu(args.menu, args.dry_run))


if __name__ == "__main__":
    main()
