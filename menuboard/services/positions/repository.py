from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

T = TypeVar("T")


@dataclass
class Neighbors(Generic[T]):
    previous: Optional[T] = None
    next: Optional[T] = None


class SiblingRepository(Generic[T]):
    """
    Position queries over one sibling family, e.g. categories grouped by
    menu_id. Every statement is filtered by the parent id so two groups
    never see each other's rows.

    With `lock=True` reads render SELECT ... FOR UPDATE so concurrent moves
    inside the same group serialize on the caller's transaction.
    """

    def __init__(self, model: Type[T], parent_attr: str):
        self.model = model
        self.parent_attr = parent_attr

    @property
    def parent_column(self):
        return getattr(self.model, self.parent_attr)

    def _siblings(self, parent_id: Any):
        return select(self.model).where(self.parent_column == parent_id)

    async def max_position(self, db: AsyncSession, parent_id: Any, lock: bool = False) -> Optional[int]:
        if lock:
            # aggregates can't carry FOR UPDATE, lock the rows they read instead
            await db.execute(
                select(self.model.id).where(self.parent_column == parent_id).with_for_update()
            )
        result = await db.execute(
            select(func.max(self.model.position)).where(self.parent_column == parent_id)
        )
        return result.scalar_one_or_none()

    async def find_neighbors(
        self,
        db: AsyncSession,
        parent_id: Any,
        target: int,
        exclude_id: Optional[Any] = None,
        lock: bool = False,
    ) -> Neighbors[T]:
        """
        Closest sibling at or below `target` and closest sibling above it.

        A sibling sitting exactly on `target` counts as the previous one, so
        the slot returned by compute_position_between never ties with it.
        """
        base = self._siblings(parent_id)
        if exclude_id is not None:
            base = base.where(self.model.id != exclude_id)

        previous_q = (
            base.where(self.model.position <= target)
            .order_by(self.model.position.desc(), self.model.id.desc())
            .limit(1)
        )
        next_q = (
            base.where(self.model.position > target)
            .order_by(self.model.position.asc(), self.model.id.asc())
            .limit(1)
        )
        if lock:
            previous_q = previous_q.with_for_update()
            next_q = next_q.with_for_update()

        # an AsyncSession runs one statement at a time
        previous = (await db.execute(previous_q)).scalars().first()
        next_ = (await db.execute(next_q)).scalars().first()
        return Neighbors(previous=previous, next=next_)

    async def list_ordered(self, db: AsyncSession, parent_id: Any, lock: bool = False) -> List[T]:
        query = self._siblings(parent_id).order_by(self.model.position.asc(), self.model.id.asc())
        if lock:
            query = query.with_for_update()
        result = await db.execute(query)
        return list(result.scalars().all())

    async def update_position(self, db: AsyncSession, sibling: T, new_position: int) -> None:
        sibling.position = new_position
        await db.flush()
