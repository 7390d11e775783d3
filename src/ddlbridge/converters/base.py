"""Base converter interface for schema model transformations.

Converters move tables between representations: parsed tables into editor
entities, and editor entities into SQL DDL text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generator, Generic, Iterable, Protocol, Sequence, TypeVar

from ..exceptions import ConverterConfigError


class _Named(Protocol):
    name: str


N = TypeVar("N", bound=_Named)


@dataclass(frozen=True)
class BaseConverterConfig:
    """Base configuration for all ddlbridge converters.

    Args:
        ignore_tables: Set of table names to leave out of the conversion.
            Defaults to empty set.
        include_tables: Optional set of table names to convert. If specified,
            only these tables are included in the output. If None, all tables
            (except ignored ones) are included. Defaults to None.
    """

    ignore_tables: set[str] = field(default_factory=set)
    include_tables: set[str] | None = None

    def __post_init__(self) -> None:
        if self.include_tables is not None and self.ignore_tables:
            overlap = self.ignore_tables & self.include_tables
            if overlap:
                raise ConverterConfigError(
                    f"Tables cannot be both ignored and included: {sorted(overlap)}"
                )


class BaseConverter(Generic[N], ABC):
    """Abstract base class for table converters."""

    def __init__(self, config: BaseConverterConfig | None = None) -> None:
        """Initialize the BaseConverter.

        Args:
            config: Configuration object. If None, uses default BaseConverterConfig.
        """
        self.config = config or BaseConverterConfig()

    @abstractmethod
    def convert(self, tables: Sequence[N]) -> Any:
        """Convert a sequence of tables to the target representation."""
        ...

    def _filter_tables(self, tables: Iterable[N]) -> Generator[N, None, None]:
        for table in tables:
            name = table.name
            if name in self.config.ignore_tables:
                continue
            if self.config.include_tables is not None and (
                name not in self.config.include_tables
            ):
                continue
            yield table

    def _validate_table_filters(self, tables: Sequence[N]) -> None:
        table_names = {t.name for t in tables}
        unknown_ignored = self.config.ignore_tables - table_names
        unknown_included = (self.config.include_tables or set()) - table_names

        messages: list[str] = []
        if unknown_ignored:
            messages.append(
                "Unknown tables in ignore_tables: " + ", ".join(sorted(unknown_ignored))
            )
        if unknown_included:
            messages.append(
                "Unknown tables in include_tables: " + ", ".join(sorted(unknown_included))
            )
        if not messages:
            return
        raise ConverterConfigError("; ".join(messages))
