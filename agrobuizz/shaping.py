"""Row shaping shared by every admin report.

Reports declare a :class:`RowMapper` that renames snake_case SQL columns to
the camelCase keys the dashboard reads and coerces driver values (``Decimal``,
``datetime``, string-typed numerics) into plain JSON types.
"""
from datetime import date, datetime
from decimal import Decimal


def as_str(value):
    return None if value is None else str(value)


def as_int(value):
    return None if value is None else int(value)


def as_money(value):
    return None if value is None else round(float(value), 2)


as_rating = as_money


def as_bool(value):
    return None if value is None else bool(value)


def as_date(value):
    """Format a date, datetime or ISO string as ``YYYY-MM-DD``."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]


def as_timestamp(value):
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def jsonable(value):
    """Convert a raw driver value into something ``jsonify`` renders faithfully."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value


def row_mapping(row):
    """Accept a SQLAlchemy ``Row`` or any mapping and return a mapping view."""
    mapping = getattr(row, "_mapping", None)
    return mapping if mapping is not None else row


class RowMapper:
    """Declarative column renamer + coercer.

    ``RowMapper(cropId=("crop_id", as_str))`` maps the ``crop_id`` column to
    ``cropId`` after passing it through ``as_str``.
    """

    def __init__(self, **fields):
        self.fields = fields

    @property
    def keys(self):
        return list(self.fields)

    def __call__(self, row):
        source = row_mapping(row)
        return {key: coerce(source[column]) for key, (column, coerce) in self.fields.items()}

    def map_rows(self, rows):
        return [self(row) for row in rows]


def percentage_shares(values, ndigits=2):
    """Each value's percentage of the total. A zero total yields all zeros."""
    values = [float(v or 0) for v in values]
    total = sum(values)
    if total <= 0:
        return [0.0 for _ in values]
    return [round(v * 100.0 / total, ndigits) for v in values]
