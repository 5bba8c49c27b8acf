import logging

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from menuboard.models import Category, Item
from menuboard.services.positions.repository import Neighbors, SiblingRepository
from menuboard.services.positions.service import PositionService, category_positions, item_positions
from menuboard.services.positions.space import MAX_POSITION, POSITION_GAP
from tests.conftest import make_category, make_item, make_menu


async def positions_of(db, model, parent_attr, parent_id):
    result = await db.execute(
        select(model.title, model.position)
        .where(getattr(model, parent_attr) == parent_id)
        .order_by(model.position.asc(), model.id.asc())
    )
    return [tuple(row) for row in result.all()]


@pytest.fixture()
async def menu(db, tenant):
    return await make_menu(db, tenant, "Carta")


@pytest.fixture()
async def pizzas(db, menu):
    return await make_category(db, menu, "Pizzas", POSITION_GAP)


async def test_append_to_empty_group_is_gap_spaced(db, pizzas):
    for title in ("Muzzarella", "Napolitana", "Fugazzeta"):
        position = await item_positions.assign_initial_position(db, pizzas.id)
        db.add(Item(category_id=pizzas.id, title=title, position=position))
        await db.flush()
    await db.commit()

    assert await positions_of(db, Item, "category_id", pizzas.id) == [
        ("Muzzarella", 10000),
        ("Napolitana", 20000),
        ("Fugazzeta", 30000),
    ]


async def test_append_follows_current_max(db, pizzas):
    await make_item(db, pizzas, "Especial", 12345)

    assert await item_positions.assign_initial_position(db, pizzas.id) == 12345 + POSITION_GAP


async def test_move_between_two_siblings_takes_the_midpoint(db, pizzas):
    first = await make_item(db, pizzas, "Muzzarella", 10000)
    second = await make_item(db, pizzas, "Napolitana", 20000)
    third = await make_item(db, pizzas, "Fugazzeta", 30000)

    position = await item_positions.resolve_position_with_gaps(db, pizzas.id, 15000, exclude_id=third.id)
    third.position = position
    await db.commit()

    assert position == 15000
    assert await positions_of(db, Item, "category_id", pizzas.id) == [
        (first.title, 10000),
        (third.title, 15000),
        (second.title, 20000),
    ]


async def test_move_onto_own_position_keeps_order(db, pizzas):
    await make_item(db, pizzas, "Muzzarella", 10000)
    middle = await make_item(db, pizzas, "Napolitana", 20000)
    await make_item(db, pizzas, "Fugazzeta", 30000)

    position = await item_positions.resolve_position_with_gaps(db, pizzas.id, middle.position, exclude_id=middle.id)

    assert 10000 < position < 30000


async def test_move_to_tail_and_head(db, pizzas):
    first = await make_item(db, pizzas, "Muzzarella", 10000)
    await make_item(db, pizzas, "Napolitana", 20000)
    last = await make_item(db, pizzas, "Fugazzeta", 30000)

    to_tail = await item_positions.resolve_position_with_gaps(db, pizzas.id, 10 ** 9, exclude_id=first.id)
    to_head = await item_positions.resolve_position_with_gaps(db, pizzas.id, 0, exclude_id=last.id)

    assert to_tail == 30000 + POSITION_GAP
    assert to_head == 5000


async def test_garbage_requested_position_is_clamped(db, pizzas):
    await make_item(db, pizzas, "Muzzarella", 10000)

    assert await item_positions.resolve_position_with_gaps(db, pizzas.id, float("nan")) == 5000
    assert await item_positions.resolve_position_with_gaps(db, pizzas.id, -300) == 5000


async def test_exhausted_gap_rebalances_and_places_between(db, menu):
    starters = await make_category(db, menu, "Entradas", 100)
    mains = await make_category(db, menu, "Principales", 101)

    position = await category_positions.resolve_position_with_gaps(db, menu.id, 100)
    db.add(Category(menu_id=menu.id, title="Ensaladas", position=position))
    await db.commit()

    assert position == 15000
    assert await positions_of(db, Category, "menu_id", menu.id) == [
        (starters.title, 10000),
        ("Ensaladas", 15000),
        (mains.title, 20000),
    ]


async def test_head_insert_without_room_rebalances(db, menu):
    await make_category(db, menu, "Entradas", 1)
    await make_category(db, menu, "Principales", 20000)

    position = await category_positions.resolve_position_with_gaps(db, menu.id, 0)

    assert position == 5000
    assert await positions_of(db, Category, "menu_id", menu.id) == [
        ("Entradas", 10000),
        ("Principales", 20000),
    ]


async def test_rebalance_is_idempotent(db, menu):
    await make_category(db, menu, "Entradas", 7)
    await make_category(db, menu, "Principales", 8)
    await make_category(db, menu, "Postres", 900)

    first = await category_positions.rebalance_group(db, menu.id)
    await db.commit()
    second = await category_positions.rebalance_group(db, menu.id)

    assert first == 3
    assert second == 0
    assert await positions_of(db, Category, "menu_id", menu.id) == [
        ("Entradas", 10000),
        ("Principales", 20000),
        ("Postres", 30000),
    ]


async def test_rebalance_only_writes_rows_out_of_place(db, menu):
    await make_category(db, menu, "Entradas", 10000)
    await make_category(db, menu, "Principales", 20000)
    await make_category(db, menu, "Postres", 20001)

    assert await category_positions.rebalance_group(db, menu.id) == 1


async def test_groups_do_not_touch_each_other(db, tenant):
    menu_x = await make_menu(db, tenant, "Almuerzo")
    menu_y = await make_menu(db, tenant, "Cena")
    for title, position in (("A", 100), ("B", 101)):
        await make_category(db, menu_x, title, position)
    for title, position in (("C", 100), ("D", 101), ("E", 150)):
        await make_category(db, menu_y, title, position)

    position = await category_positions.resolve_position_with_gaps(db, menu_x.id, 100)
    await db.commit()

    assert position == 15000
    assert await positions_of(db, Category, "menu_id", menu_x.id) == [("A", 10000), ("B", 20000)]
    assert await positions_of(db, Category, "menu_id", menu_y.id) == [("C", 100), ("D", 101), ("E", 150)]
    assert await category_positions.assign_initial_position(db, menu_y.id) == 150 + POSITION_GAP


async def test_rollback_discards_rebalance(db, menu):
    menu_id = menu.id
    await make_category(db, menu, "Entradas", 100)
    await make_category(db, menu, "Principales", 101)

    await category_positions.resolve_position_with_gaps(db, menu_id, 100)
    await db.rollback()

    assert await positions_of(db, Category, "menu_id", menu_id) == [("Entradas", 100), ("Principales", 101)]


class _NoRoomRepository(SiblingRepository):
    """Neighbours are always adjacent, even after a rebalance."""

    async def find_neighbors(self, db, parent_id, target, exclude_id=None, lock=False):
        class _Row:
            def __init__(self, position):
                self.position = position
        return Neighbors(previous=_Row(5), next=_Row(6))

    async def list_ordered(self, db, parent_id, lock=False):
        return []


async def test_fallback_when_rebalance_cannot_make_room(db, caplog):
    service = PositionService(_NoRoomRepository(Category, "menu_id"))

    with caplog.at_level(logging.WARNING, logger="menuboard.positions"):
        position = await service.resolve_position_with_gaps(db, 1, 5)

    assert position == POSITION_GAP
    assert "falling back" in caplog.text


async def test_oversized_target_is_clamped_to_the_tail(db, menu):
    await make_category(db, menu, "Entradas", 10000)
    await make_category(db, menu, "Principales", 20000)

    assert await category_positions.resolve_position_with_gaps(db, menu.id, 1e300) == 30000
    assert await category_positions.resolve_position_with_gaps(db, menu.id, 10 ** 20) == 30000


async def test_tail_insert_next_to_column_max_rebalances(db, menu):
    await make_category(db, menu, "Entradas", 10000)
    await make_category(db, menu, "Principales", MAX_POSITION)

    position = await category_positions.resolve_position_with_gaps(db, menu.id, 1e12)
    db.add(Category(menu_id=menu.id, title="Postres", position=position))
    await db.commit()

    assert position == 30000
    assert await positions_of(db, Category, "menu_id", menu.id) == [
        ("Entradas", 10000),
        ("Principales", 20000),
        ("Postres", 30000),
    ]


async def test_append_after_sibling_at_column_max_rebalances(db, menu):
    await make_category(db, menu, "Entradas", 10000)
    await make_category(db, menu, "Principales", MAX_POSITION - 5)

    position = await category_positions.assign_initial_position(db, menu.id)

    assert position == 30000
    assert await positions_of(db, Category, "menu_id", menu.id) == [("Entradas", 10000), ("Principales", 20000)]


class TestLockedReads:
    """SQLite drops FOR UPDATE, so the statements are compiled for PostgreSQL."""

    @pytest.fixture()
    def statements(self, monkeypatch):
        issued = []
        execute = AsyncSession.execute

        async def recording_execute(self, statement, *args, **kwargs):
            issued.append(statement)
            return await execute(self, statement, *args, **kwargs)

        monkeypatch.setattr(AsyncSession, "execute", recording_execute)
        return issued

    @staticmethod
    def rendered(statements):
        return [str(s.compile(dialect=postgresql.dialect())) for s in statements]

    async def test_max_position_locks_the_group_rows(self, db, menu, statements):
        await category_positions.repository.max_position(db, menu.id, lock=True)

        sql = self.rendered(statements)
        assert "FOR UPDATE" in sql[0]
        assert "categories.menu_id" in sql[0]
        assert "max(categories.position)" in sql[-1]

    async def test_neighbor_lookups_are_locked(self, db, menu, statements):
        await category_positions.repository.find_neighbors(db, menu.id, 15000, exclude_id=3, lock=True)

        sql = self.rendered(statements)
        assert len(sql) == 2
        assert all("FOR UPDATE" in s for s in sql)

    async def test_ordered_listing_is_locked(self, db, menu, statements):
        await item_positions.repository.list_ordered(db, menu.id, lock=True)

        assert "FOR UPDATE" in self.rendered(statements)[0]

    async def test_unlocked_reads_stay_plain(self, db, menu, statements):
        repository = category_positions.repository
        await repository.max_position(db, menu.id)
        await repository.find_neighbors(db, menu.id, 15000)
        await repository.list_ordered(db, menu.id)

        assert not any("FOR UPDATE" in s for s in self.rendered(statements))

    async def test_move_takes_locks_before_writing(self, db, menu, statements):
        await make_category(db, menu, "Entradas", 100)
        await make_category(db, menu, "Principales", 101)
        statements.clear()

        await category_positions.resolve_position_with_gaps(db, menu.id, 100)

        selects = [s for s in self.rendered(statements) if s.lstrip().startswith("SELECT")]
        assert selects
        assert all("FOR UPDATE" in s for s in selects)
