"""SQL parser orchestrating the AST parser and its text fallback.

`SQLParser` is the single entry point for reading DDL:
- Parse with the primary AST parser
- On any failure, log it and parse again with the legacy text parser
- Never raise; "no tables" is the only failure visible to callers
"""

from __future__ import annotations

import logging

from ..models import ParsedTable
from .ast_parser import SQLGlotParser
from .base import BaseParser, ParserConfig
from .legacy_parser import LegacyParser

logger = logging.getLogger(__name__)


class SQLParser:
    """Parse `CREATE TABLE` statements with a single, explicit fallback policy.

    The parser composes:
    - A primary parser. Defaults to `SQLGlotParser`.
    - A fallback parser used when the primary one raises. Defaults to
      `LegacyParser`. Disabled when `config.use_fallback` is False.

    Args:
        config: Parser configuration shared by both default parsers.
        primary: Optional primary parser override.
        fallback: Optional fallback parser override.

    Example:
        >>> parser = SQLParser()
        >>> tables = parser.parse("CREATE TABLE users (id UUID PRIMARY KEY);")
        >>> tables[0].name
        'users'
    """

    def __init__(
        self,
        config: ParserConfig | None = None,
        primary: BaseParser | None = None,
        fallback: BaseParser | None = None,
    ) -> None:
        self.config = config or ParserConfig()
        self._primary = primary or SQLGlotParser(self.config)
        self._fallback = fallback or LegacyParser(self.config)

    def parse(self, sql: str) -> list[ParsedTable]:
        """Parse all `CREATE TABLE` statements in `sql`.

        Args:
            sql: Text containing zero or more SQL statements. Statements other
                than `CREATE TABLE` are ignored.

        Returns:
            Parsed tables in statement order. An empty list means nothing was
            recognized.
        """
        try:
            return self._primary.parse(sql)
        except Exception as e:
            if not self.config.use_fallback:
                logger.warning("AST parser failed and fallback is disabled: %s", e)
                return []
            logger.warning("AST parser failed, using legacy parser: %s", e)

        try:
            return self._fallback.parse(sql)
        except Exception as e:
            logger.error("Legacy parser failed: %s", e)
            return []


def parse_sql(sql: str, config: ParserConfig | None = None) -> list[ParsedTable]:
    """Parse `CREATE TABLE` statements from `sql` into `ParsedTable` records.

    Args:
        sql: SQL text.
        config: Optional parser configuration. Uses defaults when omitted.

    Returns:
        Parsed tables in statement order; never raises.
    """
    return SQLParser(config).parse(sql)
