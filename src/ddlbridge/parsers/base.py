"""Base parser interface for SQL DDL import.

Parsers turn SQL text into `ParsedTable` records. Every parser shares the same
output contract, so the primary and fallback implementations can be swapped
behind `SQLParser`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlglot.dialects.dialect import Dialect

from ..exceptions import ParserConfigError
from ..models import ParsedTable

# Words that end the data type of a column definition and start its constraints
COLUMN_CONSTRAINT_KEYWORDS: frozenset[str] = frozenset(
    {
        "AUTOINCREMENT",
        "AUTO_INCREMENT",
        "CHECK",
        "COLLATE",
        "COMMENT",
        "CONSTRAINT",
        "DEFAULT",
        "GENERATED",
        "IDENTITY",
        "NOT",
        "NULL",
        "ON",
        "PRIMARY",
        "REFERENCES",
        "UNIQUE",
    }
)


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for SQL parsers.

    Args:
        dialect: sqlglot dialect used to read the SQL text and to render types
            and expressions. Defaults to "postgres".
        use_fallback: If True, `SQLParser` runs the legacy text parser when the
            AST parser fails. Defaults to True.
        max_input_length: Largest input, in characters, the legacy parser will
            scan. Longer inputs produce no tables from the fallback path.
            Defaults to 1,000,000.
    """

    dialect: str = "postgres"
    use_fallback: bool = True
    max_input_length: int = 1_000_000

    def __post_init__(self) -> None:
        try:
            Dialect.get_or_raise(self.dialect)
        except ValueError as e:
            raise ParserConfigError(
                f"Unknown SQL dialect: {self.dialect!r}.",
                suggestions=["Use a dialect name supported by sqlglot, e.g. 'postgres'"],
            ) from e
        if self.max_input_length <= 0:
            raise ParserConfigError("max_input_length must be a positive integer.")


class BaseParser(ABC):
    """Abstract base class for SQL DDL parsers."""

    def __init__(self, config: ParserConfig | None = None) -> None:
        """Initialize the BaseParser.

        Args:
            config: Configuration object. If None, uses default ParserConfig.
        """
        self.config = config or ParserConfig()

    @abstractmethod
    def parse(self, sql: str) -> list[ParsedTable]:
        """Parse `CREATE TABLE` statements from `sql`."""
        ...
