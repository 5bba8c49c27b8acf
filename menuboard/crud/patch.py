"""
Partial updates for categories and items.

A patch holds one member per mutable column. Members left at UNSET are
not part of the update, so a column can still be cleared by patching it
with None.
"""
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from menuboard.schemas.category import CategoryUpdate
from menuboard.schemas.item import ItemUpdate


class _Unset:
    def __repr__(self):
        return "UNSET"


UNSET: Any = _Unset()


@dataclass
class FieldPatch:

    def changes(self) -> Dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {name: value for name, value in values.items() if value is not UNSET}

    def is_empty(self) -> bool:
        return not self.changes()

    def apply_to(self, target) -> None:
        for name, value in self.changes().items():
            setattr(target, name, value)


@dataclass
class CategoryPatch(FieldPatch):
    title: Union[str, _Unset] = UNSET
    active: Union[bool, _Unset] = UNSET
    position: Union[int, _Unset] = UNSET

    @classmethod
    def from_update(cls, updates: CategoryUpdate) -> "CategoryPatch":
        # position is resolved against the siblings by the caller
        patch = cls()
        if updates.title is not None:
            patch.title = updates.title
        if updates.active is not None:
            patch.active = updates.active
        return patch


@dataclass
class ItemPatch(FieldPatch):
    title: Union[str, _Unset] = UNSET
    description: Union[Optional[str], _Unset] = UNSET
    price: Union[Optional[Decimal], _Unset] = UNSET
    active: Union[bool, _Unset] = UNSET
    position: Union[int, _Unset] = UNSET

    @classmethod
    def from_update(cls, updates: ItemUpdate) -> "ItemPatch":
        """description and price are cleared when sent as null, the rest ignore null."""
        sent = updates.model_fields_set
        patch = cls()
        if updates.title is not None:
            patch.title = updates.title
        if "description" in sent:
            patch.description = updates.description
        if "price" in sent:
            patch.price = updates.price
        if updates.active is not None:
            patch.active = updates.active
        return patch
