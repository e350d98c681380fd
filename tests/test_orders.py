def test_all_orders_combines_both_books(admin_client):
    resp = admin_client.get("/api/admin/orders")
    assert resp.status_code == 200
    orders = resp.get_json()["data"]
    assert len(orders) == 12
    assert orders[0]["id"] == "FCO006"
    assert orders[0]["status"] == "cancelled"

    dates = [o["date"] for o in orders]
    assert dates == sorted(dates, reverse=True)

    vendor_order = next(o for o in orders if o["id"] == "VFO004")
    assert vendor_order["orderType"] == "vendor_farmer"
    assert vendor_order["customer"] == "Lisa Farmer"
    assert vendor_order["customerType"] == "farmer"
    assert vendor_order["seller"] == "AgriTech Equipment"
    assert vendor_order["items"] == ["Irrigation System"]
    assert vendor_order["total"] == 450.0
    assert vendor_order["payment"] == "bank transfer"


def test_orders_by_year(admin_client):
    resp = admin_client.get("/api/admin/orders-by-year/2024")
    assert resp.status_code == 200
    orders = resp.get_json()["data"]
    assert [o["orderId"] for o in orders] == ["FCO002", "VFO002", "FCO001", "VFO001"]
    assert all(o["orderDate"].startswith("2024-") for o in orders)
    assert orders[0]["orderType"] == "farmer_customer"
    assert orders[0]["customerName"] == "Mike Customer"
    assert orders[0]["sellerName"] == "John Farmer"
    assert orders[0]["totalAmount"] == 31.0


def test_orders_by_year_defaults_to_configured_year(admin_client):
    orders = admin_client.get("/api/admin/orders-by-year").get_json()["data"]
    assert len(orders) == 8
    assert all(o["orderDate"].startswith("2025-") for o in orders)


def test_orders_by_year_without_orders(admin_client):
    resp = admin_client.get("/api/admin/orders-by-year/1999")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == []


def test_orders_by_year_rejects_non_numeric_year(admin_client):
    resp = admin_client.get("/api/admin/orders-by-year/last-year")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_update_order_status(admin_client):
    resp = admin_client.post("/api/admin/update-order-status/FCO004", json={"status": "shipped"})
    assert resp.status_code == 200
    order = resp.get_json()["data"]
    assert order["orderId"] == "FCO004"
    assert order["orderType"] == "farmer_customer"
    assert order["status"] == "shipped"

    orders = admin_client.get("/api/admin/orders").get_json()["data"]
    assert next(o for o in orders if o["id"] == "FCO004")["status"] == "shipped"


def test_update_order_status_with_order_type(admin_client):
    resp = admin_client.post(
        "/api/admin/update-order-status/VFO005",
        json={"status": "delivered", "orderType": "vendor-farmer"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "delivered"

    # order exists, but not in the requested order book
    resp = admin_client.post(
        "/api/admin/update-order-status/VFO005",
        json={"status": "delivered", "orderType": "farmer_customer"},
    )
    assert resp.status_code == 404


def test_update_order_status_rejects_unknown_status(admin_client):
    resp = admin_client.post("/api/admin/update-order-status/FCO004", json={"status": "lost"})
    assert resp.status_code == 400
    assert "status must be one of" in resp.get_json()["message"]


def test_update_order_status_rejects_unknown_order_type(admin_client):
    resp = admin_client.post(
        "/api/admin/update-order-status/FCO004", json={"status": "shipped", "orderType": "barter"}
    )
    assert resp.status_code == 400


def test_update_order_status_missing_order(admin_client):
    resp = admin_client.post("/api/admin/update-order-status/NOPE", json={"status": "shipped"})
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Order not found"}


def test_update_order_status_rejects_non_object_body(admin_client):
    resp = admin_client.post("/api/admin/update-order-status/FCO001", json="shipped")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Request body must be a JSON object"


def test_orders_by_year_rejects_non_ascii_digits(admin_client):
    assert admin_client.get("/api/admin/orders-by-year/%C2%B2").status_code == 400
    assert admin_client.get("/api/admin/orders-by-year/%D9%A2%D9%A0%D9%A2%D9%A5").status_code == 400


def test_orders_by_year_rejects_oversized_year(admin_client):
    resp = admin_client.get("/api/admin/orders-by-year/" + "9" * 30)
    assert resp.status_code == 400


def test_orders_sort_by_full_timestamp(app, admin_client):
    from datetime import datetime

    from agrobuizz.extensions import db
    from agrobuizz.models import FarmerCustomerOrder

    with app.app_context():
        # same day as FCO006, later in the day; ids sort the other way round
        db.session.add_all([
            FarmerCustomerOrder(order_id="FCO007", farmer_id="F003", customer_id="C002", crop_id="CR002",
                                order_type="standard", order_status="pending", quantity=2,
                                order_date=datetime(2025, 4, 2, 18, 0)),
            FarmerCustomerOrder(order_id="FCO008", farmer_id="F003", customer_id="C002", crop_id="CR002",
                                order_type="standard", order_status="pending", quantity=3,
                                order_date=datetime(2025, 4, 2, 9, 30)),
        ])
        db.session.commit()

    orders = admin_client.get("/api/admin/orders").get_json()["data"]
    assert [o["id"] for o in orders[:3]] == ["FCO007", "FCO008", "FCO006"]
    assert {o["date"] for o in orders[:3]} == {"2025-04-02"}

    by_year = admin_client.get("/api/admin/orders-by-year/2025").get_json()["data"]
    assert [o["orderId"] for o in by_year[:3]] == ["FCO007", "FCO008", "FCO006"]
