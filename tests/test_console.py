import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from agrobuizz.executor import run_read_only
from agrobuizz.extensions import db
from agrobuizz.models import Product


def execute(client, query):
    return client.post("/api/admin/execute-query", json={"query": query})


def test_select_returns_rows_and_columns(admin_client):
    resp = execute(admin_client, "SELECT product_id, name FROM products WHERE type = 'seeds' ORDER BY product_id")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["columns"] == ["product_id", "name"]
    assert body["rowCount"] == 2
    assert body["truncated"] is False
    assert body["result"][0] == {"product_id": "P001", "name": "Organic Tomato Seeds"}


def test_colons_in_literals_are_not_bind_parameters(admin_client):
    resp = execute(admin_client, "SELECT 'ratio 1:2' AS label")
    assert resp.status_code == 200
    assert resp.get_json()["result"] == [{"label": "ratio 1:2"}]


def test_rejects_writes(admin_client):
    resp = execute(admin_client, "DROP TABLE users")
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Only SELECT queries are allowed"}
    # table is still there
    assert execute(admin_client, "SELECT COUNT(*) AS n FROM users").get_json()["result"] == [{"n": 4}]


def test_rejects_stacked_statements(admin_client):
    resp = execute(admin_client, "SELECT 1; DELETE FROM products")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Only a single statement may be executed"


def test_requires_query(admin_client):
    resp = admin_client.post("/api/admin/execute-query", json={})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "SQL query is required"


def test_database_error_is_reported(admin_client):
    resp = execute(admin_client, "SELECT * FROM no_such_table")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Failed to execute custom query"
    assert "no_such_table" in body["error"]


def test_row_limit_sets_truncated(app):
    with app.app_context():
        columns, rows, truncated = run_read_only("SELECT * FROM products ORDER BY product_id", max_rows=2)
    assert "product_id" in columns
    assert [r["product_id"] for r in rows] == ["P001", "P002"]
    assert truncated is True


def test_console_connection_is_read_only(app):
    with app.app_context():
        with pytest.raises(SQLAlchemyError):
            run_read_only("DELETE FROM products")
        assert db.session.scalar(select(func.count()).select_from(Product)) == 6


def test_rejects_non_object_body(admin_client):
    resp = admin_client.post("/api/admin/execute-query", json=["SELECT 1"])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Request body must be a JSON object"


def test_rejects_non_string_query(admin_client):
    resp = admin_client.post("/api/admin/execute-query", json={"query": 42})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "SQL query is required"
