"""Conversion of parsed tables into editor entities.

Each imported table gets a synthetic id and a default diagram position on a
grid, so that no two imported tables start on top of each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence
from uuid import uuid4

from ..exceptions import ConverterConfigError
from ..models import Field, ParsedField, ParsedTable, Position, Table
from .base import BaseConverter, BaseConverterConfig


def _random_id(kind: str) -> str:
    return f"{kind}-{uuid4().hex}"


@dataclass(frozen=True)
class ModelConverterConfig(BaseConverterConfig):
    """Configuration for ModelConverter.

    Args:
        grid_columns: Number of tables per diagram row. Defaults to 3.
        origin: Position of the first table. Defaults to (100, 100).
        spacing: Horizontal and vertical distance between grid cells.
            Defaults to (300, 200).
        id_factory: Callable receiving "table" or "field" and returning a new
            id. Defaults to `"<kind>-<uuid4 hex>"`.
    """

    grid_columns: int = 3
    origin: tuple[int, int] = (100, 100)
    spacing: tuple[int, int] = (300, 200)
    id_factory: Callable[[str], str] | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.grid_columns <= 0:
            raise ConverterConfigError("grid_columns must be a positive integer.")
        if any(s <= 0 for s in self.spacing):
            raise ConverterConfigError(
                f"spacing must contain positive values. Got: {self.spacing}"
            )


class ModelConverter(BaseConverter[ParsedTable]):
    """Convert `ParsedTable` records into `Table` entities.

    Example:
        >>> from ddlbridge.models import ParsedField, ParsedTable
        >>> converter = ModelConverter()
        >>> [table] = converter.convert([ParsedTable("users", [ParsedField("id", "UUID")])])
        >>> table.position
        Position(x=100, y=100)
    """

    config: ModelConverterConfig

    def __init__(self, config: ModelConverterConfig | None = None) -> None:
        self.config = config or ModelConverterConfig()
        super().__init__(self.config)

    def convert(self, tables: Sequence[ParsedTable]) -> list[Table]:
        self._validate_table_filters(tables)
        return [
            self._convert_table(table, index)
            for index, table in enumerate(self._filter_tables(tables))
        ]

    def position_for(self, index: int) -> Position:
        """Grid position of the `index`-th imported table."""
        row, column = divmod(index, self.config.grid_columns)
        return Position(
            x=self.config.origin[0] + column * self.config.spacing[0],
            y=self.config.origin[1] + row * self.config.spacing[1],
        )

    def _new_id(self, kind: str) -> str:
        factory = self.config.id_factory or _random_id
        return factory(kind)

    def _convert_table(self, table: ParsedTable, index: int) -> Table:
        return Table(
            id=self._new_id("table"),
            name=table.name,
            fields=[self._convert_field(f) for f in table.fields],
            position=self.position_for(index),
        )

    def _convert_field(self, field: ParsedField) -> Field:
        return Field(
            id=self._new_id("field"),
            name=field.name,
            type=field.type,
            nullable=field.nullable,
            primary_key=field.primary_key,
            unique=field.unique,
            default_value=field.default_value,
            check=field.check,
            foreign_key=field.foreign_key,
        )
