"""Canonical type names for imported columns.

Vendor spellings are mapped onto a small set of canonical, uppercase names
while any parameter suffix is kept exactly as written.

Example:
    >>> normalize_type("int8")
    'BIGINT'
    >>> normalize_type("varchar(255)")
    'VARCHAR(255)'
    >>> normalize_type("numeric", ["10", "2"])
    'NUMERIC(10, 2)'
    >>> normalize_type("int4[]")
    'INTEGER[]'
"""

from __future__ import annotations

import re
from typing import Iterable

from sqlglot import exp

__all__ = [
    "TYPE_ALIASES",
    "normalize_type",
    "normalize_data_type",
]


TYPE_ALIASES: dict[str, str] = {
    "INT": "INTEGER",
    "INT4": "INTEGER",
    "INT8": "BIGINT",
    "INT2": "SMALLINT",
    "FLOAT": "REAL",
    "FLOAT4": "REAL",
    "FLOAT8": "DOUBLE PRECISION",
    "BOOL": "BOOLEAN",
    "TIMESTAMP WITH TIME ZONE": "TIMESTAMPTZ",
}

_ARRAY_SUFFIX = re.compile(r"\s*\[\s*\d*\s*\]\s*$")
_NAME_AND_PARAMS = re.compile(r"^(?P<name>[^(]*?)\s*(?P<params>\(.*\))?\s*$", re.DOTALL)


def normalize_type(name: str, params: Iterable[str] | None = None) -> str:
    """Return the canonical spelling of a column type.

    Args:
        name: Raw type name, optionally with its parameter suffix
            (`"varchar(255)"`) and array brackets (`"int[]"`).
        params: Already rendered parameters to append as `(p1, p2)`. Only
            used when `name` carries no suffix of its own.

    Returns:
        Uppercase canonical name with the original parameter suffix.
    """
    raw = name.strip()
    array_match = _ARRAY_SUFFIX.search(raw)
    if array_match:
        element = raw[: array_match.start()]
        return f"{normalize_type(element, params)}[]"

    match = _NAME_AND_PARAMS.match(raw)
    if match is None:
        return raw.upper()

    base = " ".join(match.group("name").split()).upper()
    suffix = match.group("params") or ""
    if not suffix and params:
        suffix = f"({', '.join(params)})"
    return f"{TYPE_ALIASES.get(base, base)}{suffix}"


def normalize_data_type(data_type: exp.DataType, dialect: str = "postgres") -> str:
    """Return the canonical spelling of a sqlglot data type node."""
    if data_type.is_type(exp.DataType.Type.ARRAY) and data_type.expressions:
        element = data_type.expressions[0]
        if isinstance(element, exp.DataType):
            return f"{normalize_data_type(element, dialect)}[]"

    params = [p.sql(dialect=dialect) for p in data_type.expressions]
    bare = data_type.copy()
    bare.set("expressions", None)
    return normalize_type(bare.sql(dialect=dialect), params or None)
