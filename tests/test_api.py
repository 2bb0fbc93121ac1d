"""
HTTP API, driven through FastAPI's TestClient against an in-memory
storefront.
"""

import pytest
from fastapi.testclient import TestClient

from brewhouse.main import app, get_storefront
from brewhouse.services.descriptions import (
    FALLBACK_DESCRIPTION,
    MockDescriptionService,
    get_description_service,
)
from brewhouse.services.storage import ORDER_HISTORY_KEY

from tests.conftest import ADMIN_SECRET, START_MS


@pytest.fixture
def description_service():
    return MockDescriptionService(failure_rate=0, min_latency=0, max_latency=0)


@pytest.fixture
def client(storefront, description_service):
    app.dependency_overrides[get_storefront] = lambda: storefront
    app.dependency_overrides[get_description_service] = lambda: description_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(client):
    response = client.post("/api/admin/login", json={"secret": ADMIN_SECRET})
    assert response.status_code == 200
    return client


def place_order(client, *item_ids, payment_method="cash") -> dict:
    for item_id in item_ids:
        assert client.post("/api/cart/items", json={"item_id": item_id}).status_code == 200
    response = client.post("/api/checkout", json={"payment_method": payment_method})
    assert response.status_code == 201
    return response.json()


# ============================================================================
# Root & health
# ============================================================================

class TestHealth:

    def test_root(self, client):
        assert client.get("/").json()["menu"] == "/api/menu"

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["storage"] == "healthy"
        assert data["cloud_sync"] == "disabled"


# ============================================================================
# Menu & cart
# ============================================================================

class TestMenuAndCart:

    def test_menu(self, client):
        items = client.get("/api/menu").json()
        assert [i["id"] for i in items] == ["1", "2", "3", "4"]

    def test_menu_by_category(self, client):
        items = client.get("/api/menu", params={"category": "Ice Coffee"}).json()
        assert {i["name"] for i in items} == {"Cold Brew", "Iced Matcha Latte"}

    def test_add_merges_lines(self, client):
        client.post("/api/cart/items", json={"item_id": "1"})
        data = client.post("/api/cart/items", json={"item_id": "1"}).json()
        assert len(data["items"]) == 1
        assert data["items"][0]["quantity"] == 2
        assert data["total"] == 11.0

    def test_add_unknown_item(self, client):
        assert client.post("/api/cart/items", json={"item_id": "nope"}).status_code == 404

    def test_adjust_floor(self, client):
        client.post("/api/cart/items", json={"item_id": "3"})
        data = client.patch("/api/cart/items/3", json={"delta": -5}).json()
        assert data["items"][0]["quantity"] == 1
        assert data["item_count"] == 1

    def test_remove_and_clear(self, client):
        client.post("/api/cart/items", json={"item_id": "1"})
        client.post("/api/cart/items", json={"item_id": "2"})
        assert len(client.delete("/api/cart/items/1").json()["items"]) == 1
        assert client.delete("/api/cart").json()["items"] == []


# ============================================================================
# Checkout & tracking
# ============================================================================

class TestCheckout:

    def test_checkout(self, client):
        view = place_order(client, "1", "1", "3")
        assert view["order"]["total"] == 14.5
        assert view["order"]["status"] == "pending"
        assert view["order"]["paymentStatus"] == "unpaid"
        assert view["order"]["id"] == f"ORD-{START_MS}"
        assert view["stage_index"] == 0
        assert client.get("/api/cart").json()["items"] == []

    def test_online_checkout_is_paid(self, client):
        view = place_order(client, "2", payment_method="online")
        assert view["order"]["paymentStatus"] == "paid"

    def test_empty_cart(self, client, store):
        response = client.post("/api/checkout", json={"payment_method": "online"})
        assert response.status_code == 400
        assert client.get("/api/orders").json() == {"active": [], "history": []}
        assert store.get(ORDER_HISTORY_KEY) is None

    def test_order_lookup(self, client):
        view = place_order(client, "4")
        order_id = view["order"]["id"]
        assert client.get(f"/api/orders/{order_id}").json()["order"]["id"] == order_id
        assert client.get("/api/orders/ORD-0").status_code == 404


# ============================================================================
# Staff access
# ============================================================================

class TestAdminAccess:

    def test_admin_routes_need_login(self, client):
        assert client.get("/api/admin/dashboard").status_code == 403

    def test_wrong_secret(self, client):
        response = client.post("/api/admin/login", json={"secret": "guess"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid Access Key"

    def test_logout(self, admin):
        assert admin.get("/api/admin/dashboard").status_code == 200
        admin.post("/api/admin/logout")
        assert admin.get("/api/admin/dashboard").status_code == 403


# ============================================================================
# Admin: menu
# ============================================================================

class TestAdminMenu:

    def test_create_goes_first(self, admin):
        response = admin.post(
            "/api/admin/menu",
            json={"name": "Cortado", "description": "Equal parts.", "price": 4.0, "category": "Hot Coffee"},
        )
        assert response.status_code == 201
        assert admin.get("/api/menu").json()[0]["name"] == "Cortado"

    def test_update_and_delete(self, admin):
        assert admin.put("/api/admin/menu/1", json={"price": 6.0}).json()["price"] == 6.0
        assert admin.delete("/api/admin/menu/1").status_code == 200
        assert admin.delete("/api/admin/menu/1").status_code == 404
        assert admin.put("/api/admin/menu/1", json={"price": 1.0}).status_code == 404

    def test_deleting_menu_item_keeps_order_snapshot(self, admin):
        view = place_order(admin, "1")
        admin.delete("/api/admin/menu/1")
        order = admin.get(f"/api/orders/{view['order']['id']}").json()["order"]
        assert order["items"][0]["name"] == "Caramel Macchiato"
        assert order["total"] == 5.5

    def test_describe(self, admin):
        data = admin.post("/api/admin/menu/describe", json={"name": "Cortado", "category": "Hot Coffee"}).json()
        assert "Cortado" in data["description"]

    def test_describe_fallback(self, admin, description_service):
        description_service.failure_rate = 1.0
        data = admin.post("/api/admin/menu/describe", json={"name": "Cortado"}).json()
        assert data["description"] == FALLBACK_DESCRIPTION


# ============================================================================
# Admin: orders
# ============================================================================

class TestAdminOrders:

    def test_skip_to_ready_then_complete(self, admin):
        order_id = place_order(admin, "1")["order"]["id"]

        ready = admin.patch(f"/api/admin/orders/{order_id}/status", json={"status": "ready"}).json()
        assert ready["stage_label"] == "Awaiting Your Arrival"

        done = admin.patch(f"/api/admin/orders/{order_id}/status", json={"status": "completed"})
        assert done.json()["is_terminal"] is True

        locked = admin.patch(f"/api/admin/orders/{order_id}/status", json={"status": "pending"})
        assert locked.status_code == 409

        orders = admin.get("/api/orders").json()
        assert orders["active"] == []
        assert [v["order"]["id"] for v in orders["history"]] == [order_id]

    def test_unknown_order(self, admin):
        response = admin.patch("/api/admin/orders/ORD-0/status", json={"status": "ready"})
        assert response.status_code == 404
        response = admin.patch("/api/admin/orders/ORD-0/payment", json={"payment_status": "paid"})
        assert response.status_code == 404

    def test_invalid_status_value(self, admin):
        order_id = place_order(admin, "1")["order"]["id"]
        response = admin.patch(f"/api/admin/orders/{order_id}/status", json={"status": "shipped"})
        assert response.status_code == 422

    def test_mark_paid_and_dashboard(self, admin):
        cash = place_order(admin, "1")["order"]["id"]
        place_order(admin, "3", payment_method="online")
        cancelled = place_order(admin, "2", payment_method="online")["order"]["id"]

        admin.patch(f"/api/admin/orders/{cash}/payment", json={"payment_status": "paid"})
        admin.patch(f"/api/admin/orders/{cancelled}/status", json={"status": "cancelled"})

        data = admin.get("/api/admin/dashboard").json()
        assert data["total_orders"] == 3
        assert data["active_orders"] == 2
        assert data["cancelled_orders"] == 1
        assert data["unpaid_orders"] == 0
        assert data["revenue"] == 9.0
        assert data["menu_items"] == 4


# ============================================================================
# Admin: cloud sync
# ============================================================================

class TestAdminCloud:

    def test_sync_requires_enabled_config(self, admin):
        assert admin.post("/api/admin/cloud/sync").status_code == 409

    def test_configure_and_force_sync(self, admin):
        config = admin.put(
            "/api/admin/cloud",
            json={"enabled": True, "api_key": "k", "project_url": "https://example.invalid"},
        ).json()
        assert config["enabled"] is True
        assert config["projectUrl"] == "https://example.invalid"

        data = admin.post("/api/admin/cloud/sync").json()
        assert data["success"] is True
        assert data["order"]["order"]["source"] == "cloud"
        assert admin.get("/api/admin/dashboard").json()["cloud_orders"] == 1

    def test_import(self, admin):
        record = {
            "id": "ORD-1700000000000",
            "createdAt": 1_700_000_000_000,
            "date": "10:13:20 PM",
            "items": [{"id": "9", "name": "Mocha", "price": 5.0, "category": "Specialty", "quantity": 1}],
            "total": 5.0,
            "status": "pending",
            "paymentMethod": "online",
            "paymentStatus": "paid",
        }
        first = admin.post("/api/admin/cloud/import", json=[record]).json()
        assert first == {"success": True, "added": 1, "skipped": 0}
        second = admin.post("/api/admin/cloud/import", json=[record]).json()
        assert second["skipped"] == 1

        view = admin.get("/api/orders/ORD-1700000000000").json()
        assert view["order"]["source"] == "cloud"
