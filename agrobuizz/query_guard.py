import sqlparse
from sqlparse.sql import Parenthesis, Statement
from sqlparse import tokens as T

ALLOWED_TYPES = {"SELECT"}

# Matched against real keyword tokens only, so string literals such as
# 'drop shipping' and comments never trigger a rejection.
FORBIDDEN_KEYWORDS = {
    "INSERT", "UPDATE", "DELETE", "MERGE", "UPSERT", "REPLACE",
    "DROP", "CREATE", "ALTER", "TRUNCATE", "RENAME",
    "GRANT", "REVOKE", "INTO", "COPY", "CALL", "EXEC", "EXECUTE",
    "LOCK", "VACUUM", "ATTACH", "DETACH", "PRAGMA", "REINDEX",
}


class UnsafeQueryError(ValueError):
    """Raised when console SQL is not a single read-only statement."""


def _statements(sql):
    parsed = sqlparse.parse(sql)
    return [stmt for stmt in parsed if stmt.token_first(skip_cm=True, skip_ws=True) is not None]


def _statement_type(stmt):
    # "(SELECT 1)" parses as a bare Parenthesis group of type UNKNOWN
    first = stmt.token_first(skip_cm=True, skip_ws=True)
    while isinstance(first, Parenthesis):
        stmt = Statement(first.tokens[1:-1])
        first = stmt.token_first(skip_cm=True, skip_ws=True)
    return stmt.get_type()


def validate_read_only(sql):
    """Return the trimmed SQL if it is exactly one SELECT / WITH ... SELECT.

    Raises :class:`UnsafeQueryError` otherwise.
    """
    if not isinstance(sql, str) or not sql.strip():
        raise UnsafeQueryError("SQL query is required")

    statements = _statements(sql)
    if not statements:
        raise UnsafeQueryError("SQL query is required")
    if len(statements) > 1:
        raise UnsafeQueryError("Only a single statement may be executed")

    stmt = statements[0]
    if _statement_type(stmt) not in ALLOWED_TYPES:
        raise UnsafeQueryError("Only SELECT queries are allowed")

    for token in stmt.flatten():
        if token.ttype in T.Keyword and token.normalized in FORBIDDEN_KEYWORDS:
            raise UnsafeQueryError(f"Keyword {token.normalized} is not allowed in console queries")

    return sql.strip().rstrip(";").strip()
