"""
Wire mapping for mirror models.

The remote store speaks camelCase JSON (storeId, priceSemiWholesale, ...);
the mirror keeps snake_case columns. WireMixin converts between both using the
mapped columns of each model, so a model only declares exceptions.
"""
import enum
import re
from datetime import datetime
from decimal import Decimal

from sqlalchemy import inspect, Numeric, DateTime, Enum

_CAMEL_RE = re.compile(r'_([a-z])')


def to_camel(name: str) -> str:
    """store_id -> storeId"""
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def to_decimal(value):
    """Convert a wire number to Decimal without going through binary floats."""
    if value is None or value == '':
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_datetime(value):
    """Parse ISO-8601 strings as sent by the remote store (accepts a trailing Z)."""
    if value is None or value == '' or isinstance(value, datetime):
        return value or None
    text = str(value)
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return datetime.fromisoformat(text)


def _from_wire(column, value):
    if value is None:
        return None
    if isinstance(column.type, Enum) and column.type.enum_class is not None:
        return value if isinstance(value, enum.Enum) else column.type.enum_class(value)
    if isinstance(column.type, Numeric):
        return to_decimal(value)
    if isinstance(column.type, DateTime):
        return parse_datetime(value)
    return value


def to_wire(value):
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class WireMixin:
    """Adds from_dict()/to_dict() to a declarative model."""

    # Remote table name, e.g. 'productVariants'
    __wire_table__ = None
    # column attribute -> wire key, when camelCase conversion is not enough
    __wire_aliases__ = {}
    # column attributes that only exist in the mirror
    __wire_exclude__ = ()

    @classmethod
    def _wire_columns(cls):
        for column_attr in inspect(cls).column_attrs:
            key = column_attr.key
            if key in cls.__wire_exclude__:
                continue
            yield key, column_attr.columns[0], cls.__wire_aliases__.get(key, to_camel(key))

    @classmethod
    def from_dict(cls, data: dict, **extra):
        """Build a transient instance from a wire record. Unknown keys are ignored."""
        values = {}
        for key, column, wire_key in cls._wire_columns():
            if wire_key in data:
                values[key] = _from_wire(column, data[wire_key])
        values.update(extra)
        return cls(**values)

    def to_dict(self, exclude_none: bool = False) -> dict:
        """Serialize to a wire record."""
        rv = {}
        for key, column, wire_key in self._wire_columns():
            value = getattr(self, key)
            if value is None and exclude_none:
                continue
            rv[wire_key] = to_wire(value)
        return rv
