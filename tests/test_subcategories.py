"""Tests for the subcategory store and its one-level hierarchy."""

import pytest

from catalog_admin.core.errors import DuplicateSlug, InvalidParent, NotFound
from catalog_admin.services import categories as category_store
from catalog_admin.services import subcategories as subcategory_store


@pytest.fixture
def pumps(db):
    return category_store.create_category(db, {"name": "Pumps"})


@pytest.fixture
def filters(db):
    return category_store.create_category(db, {"name": "Filters"})


def _create(db, category, name, **extra):
    return subcategory_store.create_subcategory(db, {"category_id": category.id, "name": name, **extra})


class TestCreateSubcategory:
    def test_derives_slug(self, db, pumps):
        subcategory = _create(db, pumps, "Variable Speed!")
        assert subcategory.slug == "variable-speed"
        assert subcategory.category_id == pumps.id
        assert subcategory.parent_subcategory_id is None
        assert subcategory.status == "Active"

    def test_duplicate_in_same_category_rejected(self, db, pumps):
        _create(db, pumps, "Accessories")
        with pytest.raises(DuplicateSlug) as exc_info:
            _create(db, pumps, "accessories")
        assert exc_info.value.scope == "subcategory"

    def test_same_slug_in_other_category_allowed(self, db, pumps, filters):
        first = _create(db, pumps, "Accessories")
        second = _create(db, filters, "Accessories")
        assert first.slug == second.slug == "accessories"
        assert first.category_id != second.category_id

    def test_unknown_category(self, db):
        with pytest.raises(NotFound):
            subcategory_store.create_subcategory(db, {"category_id": 999, "name": "Orphan"})

    def test_child_of_parent(self, db, pumps):
        parent = _create(db, pumps, "Single Speed")
        child = _create(db, pumps, "Compact", parent_subcategory_id=parent.id)
        assert child.parent_subcategory_id == parent.id
        assert [row.id for row in subcategory_store.get_child_subcategories(db, parent.id)] == [child.id]

    def test_grandchild_rejected(self, db, pumps):
        parent = _create(db, pumps, "Single Speed")
        child = _create(db, pumps, "Compact", parent_subcategory_id=parent.id)
        with pytest.raises(InvalidParent):
            _create(db, pumps, "Mini", parent_subcategory_id=child.id)

    def test_parent_from_other_category_rejected(self, db, pumps, filters):
        parent = _create(db, filters, "Sand")
        with pytest.raises(InvalidParent):
            _create(db, pumps, "Compact", parent_subcategory_id=parent.id)

    def test_unknown_parent_rejected(self, db, pumps):
        with pytest.raises(InvalidParent):
            _create(db, pumps, "Compact", parent_subcategory_id=12345)

    def test_unique_constraint_reported_as_duplicate(self, db, pumps, monkeypatch):
        _create(db, pumps, "Accessories")
        monkeypatch.setattr(subcategory_store, "get_subcategory_by_slug", lambda db, category_id, slug: None)
        with pytest.raises(DuplicateSlug) as exc_info:
            _create(db, pumps, "Accessories")
        assert exc_info.value.scope == "subcategory"

        assert [row.slug for row in subcategory_store.get_subcategories_by_category(db, pumps.id)] == ["accessories"]
        assert _create(db, pumps, "Seals").slug == "seals"


class TestReadSubcategories:
    def test_listed_by_category_in_name_order(self, db, pumps, filters):
        _create(db, pumps, "Variable Speed")
        _create(db, pumps, "Booster")
        _create(db, filters, "Sand")
        names = [row.name for row in subcategory_store.get_subcategories_by_category(db, pumps.id)]
        assert names == ["Booster", "Variable Speed"]

    def test_lookup_by_slug_is_scoped(self, db, pumps, filters):
        created = _create(db, pumps, "Booster")
        assert subcategory_store.get_subcategory_by_slug(db, pumps.id, "booster").id == created.id
        assert subcategory_store.get_subcategory_by_slug(db, filters.id, "booster") is None


class TestUpdateSubcategory:
    def test_name_change_rederives_slug(self, db, pumps):
        subcategory = _create(db, pumps, "Booster")
        updated = subcategory_store.update_subcategory(db, subcategory.id, {"name": "Pressure Booster"})
        assert updated.slug == "pressure-booster"

    def test_slug_collision_in_category_rejected(self, db, pumps):
        _create(db, pumps, "Booster")
        other = _create(db, pumps, "Compact")
        with pytest.raises(DuplicateSlug):
            subcategory_store.update_subcategory(db, other.id, {"slug": "booster"})

    def test_set_and_clear_parent(self, db, pumps):
        parent = _create(db, pumps, "Single Speed")
        subcategory = _create(db, pumps, "Compact")

        updated = subcategory_store.update_subcategory(db, subcategory.id, {"parent_subcategory_id": parent.id})
        assert updated.parent_subcategory_id == parent.id

        cleared = subcategory_store.update_subcategory(db, subcategory.id, {"parent_subcategory_id": None})
        assert cleared.parent_subcategory_id is None

    def test_self_parent_rejected(self, db, pumps):
        subcategory = _create(db, pumps, "Compact")
        with pytest.raises(InvalidParent):
            subcategory_store.update_subcategory(db, subcategory.id, {"parent_subcategory_id": subcategory.id})

    def test_parent_with_children_cannot_be_nested(self, db, pumps):
        parent = _create(db, pumps, "Single Speed")
        _create(db, pumps, "Compact", parent_subcategory_id=parent.id)
        other = _create(db, pumps, "Variable Speed")
        with pytest.raises(InvalidParent):
            subcategory_store.update_subcategory(db, parent.id, {"parent_subcategory_id": other.id})

    def test_move_to_other_category_checks_slug_there(self, db, pumps, filters):
        _create(db, filters, "Accessories")
        subcategory = _create(db, pumps, "Accessories")
        with pytest.raises(DuplicateSlug):
            subcategory_store.update_subcategory(db, subcategory.id, {"category_id": filters.id})

    def test_missing_subcategory(self, db):
        with pytest.raises(NotFound):
            subcategory_store.update_subcategory(db, 404, {"name": "Nope"})

    def test_unique_constraint_reported_as_duplicate(self, db, pumps, monkeypatch):
        _create(db, pumps, "Booster")
        other = _create(db, pumps, "Compact")
        monkeypatch.setattr(subcategory_store, "get_subcategory_by_slug", lambda db, category_id, slug: None)
        with pytest.raises(DuplicateSlug):
            subcategory_store.update_subcategory(db, other.id, {"slug": "booster"})

        assert subcategory_store.get_subcategory(db, other.id).slug == "compact"
        renamed = subcategory_store.update_subcategory(db, other.id, {"name": "Compact Line"})
        assert renamed.slug == "compact-line"


class TestDeleteSubcategory:
    def test_children_are_detached(self, db, pumps):
        parent = _create(db, pumps, "Single Speed")
        child = _create(db, pumps, "Compact", parent_subcategory_id=parent.id)

        subcategory_store.delete_subcategory(db, parent.id)

        assert subcategory_store.get_subcategory(db, parent.id) is None
        remaining = subcategory_store.get_subcategory(db, child.id)
        assert remaining is not None
        assert remaining.parent_subcategory_id is None

    def test_missing_subcategory(self, db):
        with pytest.raises(NotFound):
            subcategory_store.delete_subcategory(db, 404)
