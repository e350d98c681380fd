from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .shaping import jsonable


def run(statement):
    """Execute a report statement on the shared session and return plain dict rows.

    Every dynamic value in ``statement`` is a bound parameter.
    """
    try:
        result = db.session.execute(statement)
        return [dict(row._mapping) for row in result]
    except SQLAlchemyError:
        current_app.logger.exception("Error executing report query: %s", statement)
        db.session.rollback()
        raise


def console_engine():
    # dedicated bind keeps slow console queries off the shared pool
    if "console" in db.engines:
        return db.engines["console"]
    return db.engine


def _apply_guards(conn, timeout_ms):
    dialect = conn.dialect.name
    timeout_ms = int(timeout_ms)
    if dialect == "postgresql":
        conn.exec_driver_sql("SET TRANSACTION READ ONLY")
        conn.exec_driver_sql(f"SET LOCAL statement_timeout = {timeout_ms}")
    elif dialect in ("mysql", "mariadb"):
        conn.exec_driver_sql(f"SET SESSION MAX_EXECUTION_TIME = {timeout_ms}")
    elif dialect == "sqlite":
        conn.exec_driver_sql("PRAGMA query_only = ON")


def _release_guards(conn):
    dialect = conn.dialect.name
    if dialect in ("mysql", "mariadb"):
        conn.exec_driver_sql("SET SESSION MAX_EXECUTION_TIME = 0")
    elif dialect == "sqlite":
        conn.exec_driver_sql("PRAGMA query_only = OFF")


def run_read_only(sql, timeout_ms=None, max_rows=None):
    """Run validated console SQL in a rolled-back, read-only transaction.

    Returns ``(columns, rows, truncated)``.
    """
    timeout_ms = timeout_ms or current_app.config["ADMIN_QUERY_TIMEOUT_MS"]
    max_rows = max_rows or current_app.config["ADMIN_QUERY_MAX_ROWS"]

    with console_engine().connect() as conn:
        trans = conn.begin()
        try:
            _apply_guards(conn, timeout_ms)
            result = conn.exec_driver_sql(sql, execution_options={"no_parameters": True})
            columns = list(result.keys()) if result.returns_rows else []
            fetched = result.fetchmany(max_rows + 1) if result.returns_rows else []
        except SQLAlchemyError:
            current_app.logger.exception("Error executing console query: %.200s", sql)
            raise
        finally:
            trans.rollback()
            _release_guards(conn)

    truncated = len(fetched) > max_rows
    rows = [
        {column: jsonable(value) for column, value in row._mapping.items()}
        for row in fetched[:max_rows]
    ]
    return columns, rows, truncated
