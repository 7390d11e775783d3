"""Consistency checks for imported tables.

An import is refused when two tables share a name or when a table holds two
fields with the same name, since the editor addresses both by name.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Protocol, Sequence

from .exceptions import SchemaImportError


class _NamedFields(Protocol):
    name: str

    @property
    def field_names(self) -> list[str]: ...


def _duplicates(names: Iterable[str]) -> list[str]:
    counts = Counter(names)
    return [name for name, count in counts.items() if count > 1]


def find_duplicate_tables(tables: Sequence[_NamedFields]) -> list[str]:
    """Names used by more than one table, in first-seen order."""
    return _duplicates(t.name for t in tables)


def find_duplicate_fields(tables: Sequence[_NamedFields]) -> dict[str, list[str]]:
    """Map of table name to its duplicated field names, for affected tables only."""
    result: dict[str, list[str]] = {}
    for table in tables:
        duplicates = _duplicates(table.field_names)
        if duplicates:
            result[table.name] = duplicates
    return result


def validate_tables(tables: Sequence[_NamedFields]) -> None:
    """Raise `SchemaImportError` if `tables` cannot be imported as a whole.

    Works on both `ParsedTable` and `Table` sequences.

    Raises:
        SchemaImportError: When table names or field names within a table
            are duplicated.
    """
    duplicate_tables = find_duplicate_tables(tables)
    if duplicate_tables:
        raise SchemaImportError(
            f"Duplicate table names found: {', '.join(duplicate_tables)}",
            suggestions=["Rename or remove the repeated CREATE TABLE statements"],
        )

    duplicate_fields = find_duplicate_fields(tables)
    if duplicate_fields:
        details = "; ".join(
            f"{table} (duplicate fields: {', '.join(fields)})"
            for table, fields in duplicate_fields.items()
        )
        raise SchemaImportError(
            f"Tables with duplicate field names: {details}",
            suggestions=["Each column name must appear once per table"],
        )
