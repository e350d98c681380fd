import pytest

from conftest import login

ADMIN_GETS = [
    "/api/admin/reports",
    "/api/admin/users",
    "/api/admin/farmers-with-crops",
    "/api/admin/customers-with-multiple-orders",
    "/api/admin/farmers-with-multiple-disputes",
    "/api/admin/products-by-type/seeds",
    "/api/admin/products-by-price-range",
    "/api/admin/available-products",
    "/api/admin/products-by-vendor-ratings",
    "/api/admin/crops-for-sale",
    "/api/admin/crop-sales",
    "/api/admin/most-sold-items",
    "/api/admin/vendor-product-counts",
    "/api/admin/highly-rated-vendors",
    "/api/admin/farmer-orders",
    "/api/admin/disputes",
    "/api/admin/orders",
    "/api/admin/orders-by-year",
    "/api/admin/orders-by-year/2024",
]


@pytest.mark.parametrize("path", ADMIN_GETS)
def test_anonymous_gets_401(client, path):
    resp = client.get(path)
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Not authenticated"}


@pytest.mark.parametrize("path", ADMIN_GETS)
def test_non_admin_gets_403(user_client, path):
    resp = user_client.get(path)
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Not authorized"


def test_console_and_status_update_are_guarded(client, user_client):
    assert client.post("/api/admin/execute-query", json={"query": "SELECT 1"}).status_code == 401
    assert user_client.post("/api/admin/execute-query", json={"query": "SELECT 1"}).status_code == 403
    resp = user_client.post("/api/admin/update-order-status/FCO001", json={"status": "shipped"})
    assert resp.status_code == 403


def test_login_returns_user(client):
    resp = login(client, "admin", "admin123")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["user"]["username"] == "admin"
    assert body["user"]["role"] == "admin"
    assert "password" not in body["user"]


def test_login_rejects_bad_password(client):
    resp = login(client, "admin", "wrong")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid username or password"


def test_login_requires_both_fields(client):
    resp = client.post("/api/login", json={"username": "admin"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_current_user_and_logout(admin_client):
    resp = admin_client.get("/api/user")
    assert resp.status_code == 200
    assert resp.get_json()["user"]["username"] == "admin"

    assert admin_client.post("/api/logout").status_code == 200
    assert admin_client.get("/api/user").status_code == 401
    assert admin_client.get("/api/admin/users").status_code == 401


def test_cors_preflight_is_not_gated(client):
    resp = client.options(
        "/api/admin/users",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert "Access-Control-Allow-Origin" in resp.headers


def test_login_rejects_non_object_body(client):
    resp = client.post("/api/login", json=["admin", "admin123"])
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Request body must be a JSON object"}


def test_login_rejects_non_string_credentials(client):
    resp = client.post("/api/login", json={"username": 123, "password": "admin123"})
    assert resp.status_code == 400
    resp = client.post("/api/login", json={"username": "admin", "password": ["admin123"]})
    assert resp.status_code == 400
