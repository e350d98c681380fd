import pytest

from agrobuizz.query_guard import UnsafeQueryError, validate_read_only


@pytest.mark.parametrize("sql", [
    "SELECT 1",
    "select * from products",
    "SELECT * FROM products;",
    "  SELECT name FROM products WHERE type = 'seeds'  ",
    "WITH totals AS (SELECT vendor_id, COUNT(*) AS n FROM vendor_products GROUP BY vendor_id) SELECT * FROM totals",
    "SELECT * FROM products WHERE description = 'drop shipping available'",
    "-- top products\nSELECT * FROM products",
])
def test_accepts_read_only_queries(sql):
    assert validate_read_only(sql) == sql.strip().rstrip(";").strip()


@pytest.mark.parametrize("sql, message", [
    ("", "SQL query is required"),
    ("   ", "SQL query is required"),
    (None, "SQL query is required"),
    ("-- just a comment", "SQL query is required"),
    ("DROP TABLE users", "Only SELECT queries are allowed"),
    ("DELETE FROM products", "Only SELECT queries are allowed"),
    ("UPDATE users SET role = 'admin'", "Only SELECT queries are allowed"),
    ("INSERT INTO users (username) VALUES ('x')", "Only SELECT queries are allowed"),
    ("SELECT 1; DROP TABLE users", "Only a single statement may be executed"),
    ("SELECT 1; SELECT 2", "Only a single statement may be executed"),
])
def test_rejects(sql, message):
    with pytest.raises(UnsafeQueryError) as exc:
        validate_read_only(sql)
    assert str(exc.value) == message


def test_rejects_select_into():
    with pytest.raises(UnsafeQueryError, match="INTO"):
        validate_read_only("SELECT * INTO backup_users FROM users")


def test_is_a_value_error():
    assert issubclass(UnsafeQueryError, ValueError)


@pytest.mark.parametrize("sql", [
    "(SELECT 1)",
    "((SELECT product_id FROM products))",
    "(SELECT 1) UNION (SELECT 2)",
])
def test_accepts_parenthesised_select(sql):
    assert validate_read_only(sql) == sql


def test_parenthesised_writes_are_still_rejected():
    with pytest.raises(UnsafeQueryError):
        validate_read_only("(DELETE FROM products)")
    with pytest.raises(UnsafeQueryError, match="INTO"):
        validate_read_only("(SELECT * INTO backup FROM users)")
