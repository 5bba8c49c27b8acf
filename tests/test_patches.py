from decimal import Decimal
from types import SimpleNamespace

from menuboard.crud.patch import UNSET, CategoryPatch, ItemPatch
from menuboard.schemas.category import CategoryUpdate
from menuboard.schemas.item import ItemUpdate


class TestCategoryPatch:

    def test_empty_body_is_an_empty_patch(self):
        patch = CategoryPatch.from_update(CategoryUpdate())

        assert patch.is_empty()
        assert patch.changes() == {}

    def test_null_title_is_ignored(self):
        patch = CategoryPatch.from_update(CategoryUpdate(title=None, active=False))

        assert patch.title is UNSET
        assert patch.changes() == {"active": False}

    def test_new_position_is_left_to_the_caller(self):
        patch = CategoryPatch.from_update(CategoryUpdate(new_position=15000))

        assert patch.is_empty()
        patch.position = 15000
        assert patch.changes() == {"position": 15000}

    def test_apply_only_touches_patched_columns(self):
        category = SimpleNamespace(title="Entradas", active=True, position=10000)

        CategoryPatch(title="Postres").apply_to(category)

        assert (category.title, category.active, category.position) == ("Postres", True, 10000)


class TestItemPatch:

    def test_description_and_price_can_be_cleared(self):
        patch = ItemPatch.from_update(ItemUpdate(description=None, price=None))

        assert not patch.is_empty()
        assert patch.changes() == {"description": None, "price": None}

    def test_fields_not_sent_stay_unset(self):
        patch = ItemPatch.from_update(ItemUpdate(price=Decimal("4500.50")))

        assert patch.changes() == {"price": Decimal("4500.50")}
        assert patch.description is UNSET

    def test_category_id_is_never_patched(self):
        patch = ItemPatch.from_update(ItemUpdate(category_id=3))

        assert patch.is_empty()
