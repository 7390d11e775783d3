"""Converters between parsed tables, editor entities and SQL DDL.

Example:
    >>> from ddlbridge.converters import to_sql
    >>> from ddlbridge.models import Field, Table
    >>> print(to_sql([Table(id="t1", name="t", fields=[Field(id="f1", name="id", type="UUID", primary_key=True, nullable=False)])]))
    CREATE TABLE t (
      id UUID PRIMARY KEY
    );
"""

from __future__ import annotations

from typing import Any, Sequence

from ..models import ParsedTable, Table
from .base import BaseConverter, BaseConverterConfig
from .model_converter import ModelConverter, ModelConverterConfig
from .sql_generator import SQLGenerator, SQLGeneratorConfig

__all__ = [
    "BaseConverter",
    "BaseConverterConfig",
    "ModelConverter",
    "ModelConverterConfig",
    "SQLGenerator",
    "SQLGeneratorConfig",
    "to_tables",
    "to_sql",
]


def to_tables(
    parsed_tables: Sequence[ParsedTable],
    *,
    include_tables: set[str] | None = None,
    ignore_tables: set[str] | None = None,
    **kwargs: Any,
) -> list[Table]:
    """Convert parsed tables into editor `Table` entities.

    Args:
        parsed_tables: Output of `parse_sql`.
        include_tables: Optional set of table names to convert.
        ignore_tables: Optional set of table names to leave out.
        **kwargs: Additional `ModelConverterConfig` options, such as
            `grid_columns` or `id_factory`.

    Returns:
        Tables with ids and grid positions, in input order.
    """
    config = ModelConverterConfig(
        include_tables=include_tables,
        ignore_tables=ignore_tables or set(),
        **kwargs,
    )
    return ModelConverter(config).convert(parsed_tables)


def to_sql(
    tables: Sequence[Table],
    *,
    include_tables: set[str] | None = None,
    ignore_tables: set[str] | None = None,
    **kwargs: Any,
) -> str:
    """Generate `CREATE TABLE` DDL for editor `Table` entities.

    Args:
        tables: Tables to serialize.
        include_tables: Optional set of table names to emit.
        ignore_tables: Optional set of table names to leave out.
        **kwargs: Additional `SQLGeneratorConfig` options, such as
            `if_not_exists`, `schema_name` or `include_comments`.

    Returns:
        DDL text, one statement per table separated by blank lines.
    """
    config = SQLGeneratorConfig(
        include_tables=include_tables,
        ignore_tables=ignore_tables or set(),
        **kwargs,
    )
    return SQLGenerator(config).generate(tables)
