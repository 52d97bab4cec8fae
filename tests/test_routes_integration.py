"""Integration tests for the HTTP layer."""
import pytest
from fastapi.testclient import TestClient


class TestItemRoutes:
    """Test the shared CRUD routes through the item endpoints."""

    def test_create_and_fetch(self, test_client):
        response = test_client.post("/api/items", json={"name": "Widget"})
        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["name"] == "Widget"
        assert body["status"] == "active"
        assert "createdAt" in body and "updatedAt" in body

        response = test_client.get("/api/items/1")
        assert response.status_code == 200
        assert response.json()["name"] == "Widget"

    def test_create_requires_name(self, test_client):
        response = test_client.post("/api/items", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}

    def test_duplicate_is_bad_request(self, test_client):
        test_client.post("/api/items", json={"name": "Widget"})
        response = test_client.post("/api/items", json={"name": "Widget"})
        assert response.status_code == 400
        assert "already exists" in response.json()["error"]

    def test_invalid_id(self, test_client):
        response = test_client.get("/api/items/abc")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid id: abc"}

    def test_missing_record(self, test_client):
        response = test_client.get("/api/items/99")
        assert response.status_code == 404
        assert response.json() == {"error": "Item with id 99 not found"}

    def test_update_and_delete(self, test_client):
        test_client.post("/api/items", json={"name": "Widget"})
        response = test_client.put("/api/items/1", json={"status": "archived"})
        assert response.status_code == 200
        assert response.json()["status"] == "archived"

        response = test_client.patch("/api/items/1", json={"name": "Gizmo"})
        assert response.json()["name"] == "Gizmo"

        response = test_client.delete("/api/items/1")
        assert response.status_code == 204
        assert test_client.get("/api/items/1").status_code == 404

    def test_list_filter_and_paginate(self, test_client):
        for n in range(12):
            test_client.post("/api/items", json={"name": f"Item {n}"})
        test_client.put("/api/items/1", json={"status": "archived"})

        response = test_client.get("/api/items", params={"status": "archived"})
        assert [i["id"] for i in response.json()] == [1]

        response = test_client.get("/api/items", params={"page": 2, "limit": 5})
        body = response.json()
        assert [i["id"] for i in body["items"]] == [6, 7, 8, 9, 10]
        assert body["pagination"]["totalPages"] == 3

    def test_page_must_be_positive(self, test_client):
        response = test_client.get("/api/items", params={"page": 0})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_sorted_list(self, test_client):
        for name in ("b", "c", "a"):
            test_client.post("/api/items", json={"name": name})
        response = test_client.get("/api/items", params={"sortBy": "name", "order": "desc"})
        assert [i["name"] for i in response.json()] == ["c", "b", "a"]

    def test_stats_and_search(self, test_client):
        test_client.post("/api/items", json={"name": "Blue Widget"})
        test_client.post("/api/items", json={"name": "Gadget"})
        assert test_client.get("/api/items/stats").json()["total"] == 2
        response = test_client.get("/api/items/search", params={"q": "widget"})
        assert [i["name"] for i in response.json()] == ["Blue Widget"]

    def test_search_requires_query(self, test_client):
        response = test_client.get("/api/items/search")
        assert response.status_code == 400
        assert response.json() == {"error": 'Search query parameter "q" is required'}

    def test_recent_with_huge_window(self, test_client):
        test_client.post("/api/items", json={"name": "A"})
        response = test_client.get("/api/items/recent", params={"days": 1000000})
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_pattern(self, test_client):
        test_client.post("/api/items", json={"name": "Red Widget"})
        response = test_client.get("/api/items/pattern", params={"pattern": "*widget"})
        assert len(response.json()) == 1


class TestBulkRoutes:
    """Test the bulk and batch endpoints."""

    def test_bulk_create(self, test_client):
        response = test_client.post("/api/items/bulk", json={"items": [{"name": "A"}, {"name": ""}]})
        assert response.status_code == 200
        body = response.json()
        assert body["successCount"] == 1
        assert body["errorCount"] == 1

    def test_transactional_bulk_create(self, test_client):
        response = test_client.post(
            "/api/items/bulk",
            json={"items": [{"name": "A"}, {"name": ""}], "transactional": True},
        )
        assert response.status_code == 400
        assert "All changes rolled back" in response.json()["error"]
        assert test_client.get("/api/items").json() == []

    def test_bulk_update_validate_first(self, test_client):
        test_client.post("/api/items", json={"name": "A"})
        response = test_client.put(
            "/api/items/bulk",
            json={"updates": [{"id": 1, "status": "bogus"}], "validateFirst": True},
        )
        body = response.json()
        assert body["validated"] is True
        assert body["errorCount"] == 1

    def test_lookup_and_bulk_delete(self, test_client):
        test_client.post("/api/items", json={"name": "A"})
        response = test_client.post("/api/items/lookup", json={"ids": [1, 2]})
        assert response.json()["notFound"] == [2]
        response = test_client.post("/api/items/bulk/delete", json={"ids": [1]})
        assert response.json()["deleted"] == [1]

    def test_batch(self, test_client):
        response = test_client.post(
            "/api/items/batch",
            json={"operations": [{"type": "create", "data": {"name": "A"}}]},
        )
        assert response.status_code == 200
        assert response.json()["successCount"] == 1


class TestEntityRoutes:
    """Test routes specific to one entity."""

    def test_seeded_product_stats(self, seeded_client):
        stats = seeded_client.get("/api/products/stats").json()
        assert stats["totalValue"] == 16499.55
        assert stats["totalStock"] == 45

    def test_products_by_category(self, seeded_client):
        response = seeded_client.get("/api/products/category/electronics")
        assert [p["name"] for p in response.json()] == ["Laptop"]

    def test_product_requires_name_and_price(self, test_client):
        response = test_client.post("/api/products", json={"name": "Lamp"})
        assert response.status_code == 400
        assert response.json() == {"error": "Name and price are required"}

    def test_order_create_uses_camel_case(self, test_client):
        response = test_client.post(
            "/api/orders",
            json={"customerName": "Ann", "productId": 1, "quantity": 3, "price": 19.99},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["customerName"] == "Ann"
        assert body["total"] == 59.97

    def test_order_lookups(self, seeded_client):
        response = seeded_client.get("/api/orders/customer/alice johnson")
        assert len(response.json()) == 1
        response = seeded_client.get("/api/orders/product/2")
        assert [o["customerName"] for o in response.json()] == ["Bob Smith"]
        response = seeded_client.get("/api/orders/total-range", params={"min": 1000})
        assert [o["customerName"] for o in response.json()] == ["Alice Johnson"]

    def test_orders_grouped_by_status(self, seeded_client):
        grouped = seeded_client.get("/api/orders/grouped/status").json()
        assert sorted(grouped) == ["completed", "pending"]

    def test_orders_grouped_by_customer(self, seeded_client):
        grouped = seeded_client.get("/api/orders/grouped/customer").json()
        assert sorted(grouped) == ["alice johnson", "bob smith"]

    @pytest.mark.parametrize("group", ["quantity", "total", "createdAt", "productId"])
    def test_orders_grouped_by_unsupported_field(self, seeded_client, group):
        response = seeded_client.get(f"/api/orders/grouped/{group}")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid group field. Must be one of: status, customer"}

    def test_user_routes(self, seeded_client):
        response = seeded_client.get("/api/users", params={"role": "admin"})
        assert [u["name"] for u in response.json()] == ["Jane Smith"]
        response = seeded_client.post("/api/users", json={"name": "Eve"})
        assert response.json() == {"error": "Name and email are required"}

    def test_review_rating(self, test_client):
        for rating in (5, 4, 4):
            test_client.post("/api/reviews", json={"productId": 1, "userId": 1, "rating": rating})
        response = test_client.get("/api/reviews/product/1/rating")
        assert response.json() == {"average": 4.33, "count": 3}
        assert len(test_client.get("/api/reviews/product/1").json()) == 3

    def test_review_requires_fields(self, test_client):
        response = test_client.post("/api/reviews", json={"productId": 1})
        assert response.json() == {"error": "Product ID, User ID, and rating are required"}


class TestAuditAndErrors:
    """Test the audit log and the error handlers."""

    def test_audit_logs(self, test_client):
        test_client.post("/api/items", json={"name": "A"})
        test_client.delete("/api/items/1")
        response = test_client.get("/api/audit/logs", params={"objectType": "item"})
        assert [log["action"] for log in response.json()] == ["delete", "create"]
        assert response.json()[0]["objectId"] == 1

    def test_unknown_route(self, test_client):
        response = test_client.get("/api/nothing")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_unexpected_error_is_hidden(self, app, services, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("database on fire")

        monkeypatch.setattr(services.items, "get_all", explode)
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/api/items")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


@pytest.mark.parametrize("path", ["/api/items", "/api/users", "/api/products", "/api/orders", "/api/reviews"])
def test_collections_start_empty(test_client, path):
    response = test_client.get(path)
    assert response.status_code == 200
    assert response.json() == []
