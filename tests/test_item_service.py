"""Tests for the generic CRUD engine, exercised through the item service."""
import pytest

from inventory_api.app.core.errors import NotFoundError, ValidationError


@pytest.fixture
def widget(item_service):
    return item_service.create({"name": "Widget"})


class TestCreate:
    """Test record creation."""

    def test_create_assigns_id_and_defaults(self, item_service, clock):
        item = item_service.create({"name": "  Widget "})
        assert item.id == 1
        assert item.name == "Widget"
        assert item.status == "active"
        assert item.created_at == clock.now
        assert item.updated_at == item.created_at

    def test_create_with_explicit_status(self, item_service):
        item = item_service.create({"name": "Old", "status": "archived"})
        assert item.status == "archived"

    def test_duplicate_name_rejected(self, item_service, widget):
        with pytest.raises(ValidationError, match='Item with name "widget" already exists'):
            item_service.create({"name": "widget"})
        assert len(item_service.get_all()) == 1

    def test_invalid_status_rejected(self, item_service):
        with pytest.raises(ValidationError, match="Invalid status"):
            item_service.create({"name": "Widget", "status": "bogus"})
        assert item_service.get_all() == []

    def test_missing_name(self, item_service):
        with pytest.raises(ValidationError, match="name is required"):
            item_service.create({})

    def test_ids_are_never_reused(self, item_service, widget):
        item_service.delete(widget.id)
        again = item_service.create({"name": "Widget"})
        assert again.id == 2

    def test_failed_create_does_not_consume_id(self, item_service, widget):
        with pytest.raises(ValidationError):
            item_service.create({"name": ""})
        assert item_service.create({"name": "Gadget"}).id == 2

    def test_create_is_audited(self, services, item_service, widget):
        logs = services.audit.list_logs(object_type="item")
        assert [(log.action, log.object_id) for log in logs] == [("create", widget.id)]


class TestReadUpdateDelete:
    """Test fetching, updating and deleting single records."""

    def test_get_by_id_accepts_numeric_strings(self, item_service, widget):
        assert item_service.get_by_id(str(widget.id)) == widget

    def test_get_by_id_invalid(self, item_service):
        with pytest.raises(ValidationError, match="Invalid id: abc"):
            item_service.get_by_id("abc")

    def test_get_by_id_missing(self, item_service):
        with pytest.raises(NotFoundError, match="Item with id 42 not found"):
            item_service.get_by_id(42)

    def test_update_changes_only_given_fields(self, item_service, widget, clock):
        clock.advance(hours=1)
        updated = item_service.update(widget.id, {"status": "archived"})
        assert updated.name == "Widget"
        assert updated.status == "archived"
        assert updated.created_at == widget.created_at
        assert updated.updated_at == clock.now

    def test_returned_records_are_snapshots(self, item_service, widget):
        item_service.update(widget.id, {"name": "Renamed"})
        assert widget.name == "Widget"
        assert item_service.get_by_id(widget.id).name == "Renamed"

    def test_invalid_update_leaves_record_unchanged(self, item_service, widget):
        with pytest.raises(ValidationError, match="Invalid status"):
            item_service.update(widget.id, {"status": "bogus"})
        assert item_service.get_by_id(widget.id) == widget

    def test_update_may_keep_own_name(self, item_service, widget):
        assert item_service.update(widget.id, {"name": "WIDGET"}).name == "WIDGET"

    def test_update_rejects_name_of_another_item(self, item_service, widget):
        other = item_service.create({"name": "Gadget"})
        with pytest.raises(ValidationError, match="already exists"):
            item_service.update(other.id, {"name": "Widget"})

    def test_update_missing_record(self, item_service):
        with pytest.raises(NotFoundError):
            item_service.update(5, {"name": "x"})

    def test_delete(self, item_service, widget):
        assert item_service.delete(widget.id) == {"success": True, "deletedId": widget.id}
        assert item_service.get_all() == []

    def test_delete_missing(self, item_service):
        with pytest.raises(NotFoundError, match="not found"):
            item_service.delete(999)


class TestQueries:
    """Test filtering, search, sorting and pagination."""

    def test_get_all_filters_by_status(self, item_service):
        item_service.create({"name": "A"})
        item_service.create({"name": "B", "status": "archived"})
        assert [i.name for i in item_service.get_all({"status": "archived"})] == ["B"]

    def test_unknown_filter(self, item_service):
        with pytest.raises(ValidationError, match="Unknown filter: colour"):
            item_service.get_all({"colour": "red"})

    def test_search_is_case_insensitive(self, item_service):
        item_service.create({"name": "Blue Widget"})
        item_service.create({"name": "Gadget"})
        assert [i.name for i in item_service.search("widg")] == ["Blue Widget"]

    @pytest.mark.parametrize("query", ["", None, 5])
    def test_search_without_query(self, item_service, widget, query):
        assert item_service.search(query) == []

    def test_stats(self, item_service):
        item_service.create({"name": "A"})
        item_service.create({"name": "B", "status": "deleted"})
        assert item_service.get_stats() == {"total": 2, "active": 1, "archived": 0, "deleted": 1}

    def test_sorted_by_name_desc(self, item_service):
        for name in ("beta", "Alpha", "gamma"):
            item_service.create({"name": name})
        names = [i.name for i in item_service.get_sorted("name", "desc")]
        assert names == ["gamma", "beta", "Alpha"]

    def test_sort_rejects_unknown_field(self, item_service):
        with pytest.raises(ValidationError, match="Invalid sort field: colour"):
            item_service.get_sorted("colour")

    def test_sort_rejects_bad_order(self, item_service):
        with pytest.raises(ValidationError, match="Invalid sort order"):
            item_service.get_sorted("name", "sideways")

    def test_multi_sort(self, item_service):
        item_service.create({"name": "b", "status": "archived"})
        item_service.create({"name": "a", "status": "archived"})
        item_service.create({"name": "c"})
        result = item_service.get_sorted_by_multiple(["status", {"field": "name", "order": "desc"}])
        assert [i.name for i in result] == ["c", "b", "a"]

    def test_multi_sort_requires_fields(self, item_service):
        with pytest.raises(ValidationError, match="non-empty array"):
            item_service.get_sorted_by_multiple([])
        with pytest.raises(ValidationError, match="'field' and 'order'"):
            item_service.get_sorted_by_multiple([{"order": "asc"}])

    def test_pagination(self, item_service):
        for n in range(25):
            item_service.create({"name": f"Item {n}"})
        page = item_service.get_paginated(page=3, limit=10)
        assert len(page["items"]) == 5
        assert page["pagination"] == {
            "page": 3,
            "limit": 10,
            "total": 25,
            "totalPages": 3,
            "hasNext": False,
            "hasPrev": True,
        }

    def test_pagination_clamps_limit(self, item_service, widget):
        assert item_service.get_paginated(limit=1000)["pagination"]["limit"] == 100
        assert item_service.get_paginated(page=0, limit=0)["pagination"]["page"] == 1

    @pytest.mark.parametrize("limit", [0, "0", None, "", "abc", -3])
    def test_pagination_limit_falls_back_to_default(self, item_service, widget, limit):
        assert item_service.get_paginated(limit=limit)["pagination"]["limit"] == 10

    def test_get_by_ids(self, item_service, widget):
        result = item_service.get_by_ids([widget.id, 99, "abc"])
        assert result["items"] == [widget]
        assert result["notFound"] == [99, "abc"]
        assert (result["foundCount"], result["notFoundCount"]) == (1, 2)

    def test_get_by_ids_limit(self, item_service):
        with pytest.raises(ValidationError, match="Cannot fetch more than 100 items at once"):
            item_service.get_by_ids(list(range(101)))

    def test_pattern(self, item_service):
        item_service.create({"name": "Red Widget"})
        item_service.create({"name": "Red Gadget"})
        item_service.create({"name": "Blue Widget"})
        assert [i.name for i in item_service.get_by_pattern("red*")] == ["Red Widget", "Red Gadget"]
        assert [i.name for i in item_service.get_by_pattern("r?d w*")] == ["Red Widget"]

    def test_pattern_required(self, item_service):
        with pytest.raises(ValidationError, match="Pattern must be a non-empty string"):
            item_service.get_by_pattern("")


class TestDateQueries:
    """Test created/updated date range and recency queries."""

    def test_created_range(self, item_service, clock):
        item_service.create({"name": "A"})
        clock.advance(days=10)
        later = item_service.create({"name": "B"})
        assert item_service.get_by_created_range("2024-01-05", "2024-01-31") == [later]

    def test_range_requires_both_dates(self, item_service):
        with pytest.raises(ValidationError, match="Both startDate and endDate are required"):
            item_service.get_by_created_range("2024-01-01", None)

    def test_range_order(self, item_service):
        with pytest.raises(ValidationError, match="Start date cannot be after end date"):
            item_service.get_by_created_range("2024-02-01", "2024-01-01")

    def test_recently_created(self, item_service, clock):
        item_service.create({"name": "A"})
        clock.advance(days=10)
        later = item_service.create({"name": "B"})
        assert item_service.get_recently_created(5) == [later]

    def test_recently_updated(self, item_service, clock):
        first = item_service.create({"name": "A"})
        item_service.create({"name": "B"})
        clock.advance(days=10)
        item_service.update(first.id, {"status": "archived"})
        assert [i.name for i in item_service.get_recently_updated(1)] == ["A"]

    def test_recent_rejects_negative_days(self, item_service):
        with pytest.raises(ValidationError, match="Days must be non-negative"):
            item_service.get_recent(-1)
        with pytest.raises(ValidationError, match="Days must be a number"):
            item_service.get_recent("soon")

    def test_recent_with_huge_window_returns_everything(self, item_service, clock):
        item_service.create({"name": "A"})
        clock.advance(days=400)
        item_service.create({"name": "B"})
        assert len(item_service.get_recently_created(10 ** 6)) == 2
        assert len(item_service.get_recently_updated(10 ** 12)) == 2
