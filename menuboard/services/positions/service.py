import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from menuboard.models.menu.category import Category
from menuboard.models.menu.item import Item
from menuboard.services.positions.repository import SiblingRepository
from menuboard.services.positions.space import (
    MAX_POSITION,
    POSITION_GAP,
    compute_position_between,
    sanitize_position,
)

log = logging.getLogger("menuboard.positions")


class PositionService:
    """
    Assigns and moves positions inside one sibling family.

    Every method runs on the caller's session and transaction: rows are
    flushed, never committed. Ownership of the parent must already have
    been checked by the caller.
    """

    def __init__(self, repository: SiblingRepository):
        self.repository = repository

    async def assign_initial_position(self, db: AsyncSession, parent_id: Any) -> int:
        """Position for a brand new sibling: appended after the current last one."""
        max_position = await self.repository.max_position(db, parent_id, lock=True)
        if max_position is None:
            return POSITION_GAP
        if int(max_position) + POSITION_GAP > MAX_POSITION:
            # a sibling was parked at the top of the range
            await self.rebalance_group(db, parent_id)
            max_position = await self.repository.max_position(db, parent_id)
        return int(max_position) + POSITION_GAP

    async def resolve_position_with_gaps(
        self,
        db: AsyncSession,
        parent_id: Any,
        requested_position: Any,
        exclude_id: Optional[Any] = None,
    ) -> int:
        """
        Position for a sibling moved to `requested_position`.

        The sibling being moved is passed as `exclude_id` so it is never its
        own neighbour. When the neighbours are adjacent the whole group is
        rebalanced and the slot is recomputed once, next to the same
        previous neighbour at its new position.
        """
        target = sanitize_position(requested_position)
        neighbors = await self.repository.find_neighbors(db, parent_id, target, exclude_id, lock=True)
        final_position = compute_position_between(neighbors.previous, neighbors.next)

        if final_position is None:
            await self.rebalance_group(db, parent_id)
            # rebalance updated the loaded rows in place
            retry_target = neighbors.previous.position if neighbors.previous is not None else 0
            retry = await self.repository.find_neighbors(db, parent_id, retry_target, exclude_id, lock=True)
            final_position = compute_position_between(retry.previous, retry.next)

        if final_position is None:
            log.warning(
                "No room left for %s in group %s after rebalance, falling back to %s",
                self.repository.model.__name__, parent_id, POSITION_GAP,
            )
            return POSITION_GAP
        return final_position

    async def rebalance_group(self, db: AsyncSession, parent_id: Any) -> int:
        """
        Renumber the group to POSITION_GAP, 2*POSITION_GAP, ... keeping the
        current order. Only rows whose position changes are written.
        Returns the number of rows rewritten.
        """
        siblings = await self.repository.list_ordered(db, parent_id, lock=True)
        written = 0
        next_position = POSITION_GAP
        for sibling in siblings:
            if sibling.position != next_position:
                await self.repository.update_position(db, sibling, next_position)
                written += 1
            next_position += POSITION_GAP

        if written:
            log.info(
                "Rebalanced %s group %s: %d of %d rows renumbered",
                self.repository.model.__name__, parent_id, written, len(siblings),
            )
        return written


category_positions = PositionService(SiblingRepository(Category, "menu_id"))
item_positions = PositionService(SiblingRepository(Item, "category_id"))
