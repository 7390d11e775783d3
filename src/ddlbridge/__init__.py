from __future__ import annotations

from typing import Any

from .models import (
    FOREIGN_KEY_ACTIONS,
    Field,
    ForeignKeyReference,
    ParsedField,
    ParsedTable,
    Position,
    Table,
)
from .types import normalize_type
from .parsers import ParserConfig, parse_sql, render_expression
from .converters import to_sql, to_tables
from .validator import validate_tables


def from_sql(
    sql: str,
    *,
    validate: bool = True,
    parser_config: ParserConfig | None = None,
    **kwargs: Any,
) -> list[Table]:
    """Import editor tables from SQL DDL text.

    Unlike `parse_sql`, which never raises, `from_sql` refuses an import with
    duplicate table or field names by default. Pass `validate=False` to get
    the tables as parsed.

    Args:
        sql: Text with zero or more SQL statements; only `CREATE TABLE` is read.
        validate: If True, refuse imports with duplicate table or field names.
        parser_config: Optional parser configuration.
        **kwargs: `ModelConverterConfig` options forwarded to `to_tables`.

    Returns:
        Tables with ids and default positions. Empty when nothing was recognized.

    Raises:
        SchemaImportError: When `validate` is True and names are duplicated.
    """
    tables = to_tables(parse_sql(sql, parser_config), **kwargs)
    if validate:
        validate_tables(tables)
    return tables


__all__ = [
    "FOREIGN_KEY_ACTIONS",
    "Field",
    "ForeignKeyReference",
    "ParsedField",
    "ParsedTable",
    "ParserConfig",
    "Position",
    "Table",
    "from_sql",
    "normalize_type",
    "parse_sql",
    "render_expression",
    "to_sql",
    "to_tables",
    "validate_tables",
]
