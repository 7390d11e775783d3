"""Primary `CREATE TABLE` parser built on the sqlglot AST.

The parser turns SQL text into sqlglot statements, keeps the `CREATE TABLE`
statements and extracts a `ParsedTable` from each. Errors are raised to the
caller; `SQLParser` is responsible for falling back to the legacy parser.
"""

from __future__ import annotations

import logging
import re

import sqlglot
from sqlglot import exp

from ..exceptions import ParsingError
from ..models import ParsedField, ParsedTable
from .base import BaseParser
from .columns import ColumnExtractor
from .source import SourceText

logger = logging.getLogger(__name__)


# Clauses the grammar does not accept. These substitutions are not aware of
# string literals or comments.
_UNSUPPORTED_CLAUSES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\)\s*TABLESPACE\s+[\w\"]+\s*(;|$)", re.IGNORECASE), r")\1"),
    (re.compile(r"\)\s*WITH(?:OUT)?\s+OIDS\s*(;|$)", re.IGNORECASE), r")\1"),
]

_CREATE_TABLE_COMMAND = re.compile(
    r"^\s*CREATE\s+(?:(?:GLOBAL|LOCAL|TEMP|TEMPORARY|UNLOGGED)\s+)*TABLE\b",
    re.IGNORECASE,
)


def _take_column_types(
    column_types: list[tuple[str, dict[str, list[str]]]], table: str
) -> dict[str, list[str]]:
    """Remove and return the first source column types recorded for `table`."""
    for index, (name, types) in enumerate(column_types):
        if name == table:
            del column_types[index]
            return types
    return {}


def _next_type(types: dict[str, list[str]], column: str) -> str | None:
    pending = types.get(column)
    return pending.pop(0) if pending else None


class SQLGlotParser(BaseParser):
    """Parse `CREATE TABLE` statements with sqlglot.

    Statements other than `CREATE TABLE` are ignored. A `CREATE TABLE` that
    sqlglot can only keep as an opaque command is treated as a parse failure.

    Example:
        >>> parser = SQLGlotParser()
        >>> [table] = parser.parse("CREATE TABLE t (id INT PRIMARY KEY);")
        >>> table.fields[0].type
        'INTEGER'
    """

    def parse(self, sql: str) -> list[ParsedTable]:
        text = self.preprocess(sql)
        statements = sqlglot.parse(text, read=self.config.dialect)

        creates: list[exp.Create] = []
        for statement in statements:
            if statement is None:
                continue
            if isinstance(statement, exp.Command):
                self._reject_create_table_command(statement)
                continue
            if isinstance(statement, exp.Create) and statement.kind == "TABLE":
                creates.append(statement)
        if not creates:
            return []

        source = SourceText(text, self.config.dialect)
        extractor = ColumnExtractor(self.config.dialect, source=source)
        column_types = source.column_types()

        tables: list[ParsedTable] = []
        for create in creates:
            table = self._extract_table(create, extractor, column_types)
            if table is not None:
                tables.append(table)
        return tables

    def preprocess(self, sql: str) -> str:
        for pattern, replacement in _UNSUPPORTED_CLAUSES:
            sql = pattern.sub(replacement, sql)
        return sql

    def _extract_table(
        self,
        create: exp.Create,
        extractor: ColumnExtractor,
        column_types: list[tuple[str, dict[str, list[str]]]],
    ) -> ParsedTable | None:
        schema = create.this
        if not isinstance(schema, exp.Schema):
            # CREATE TABLE ... AS SELECT carries no column definitions
            return None
        name = schema.this.name
        types = _take_column_types(column_types, name)
        fields = [
            self._extract_column(name, column, extractor, _next_type(types, column.name))
            for column in schema.expressions
            if isinstance(column, exp.ColumnDef)
        ]
        logger.debug("Parsed table '%s' with %d fields", name, len(fields))
        return ParsedTable(name=name, fields=fields)

    def _extract_column(
        self,
        table: str,
        column: exp.ColumnDef,
        extractor: ColumnExtractor,
        type_text: str | None,
    ) -> ParsedField:
        try:
            return extractor.extract(column, type_text)
        except ParsingError as e:
            raise ParsingError(
                f"Table '{table}': {e.args[0]}",
                suggestions=e.suggestions,
            ) from e

    def _reject_create_table_command(self, command: exp.Command) -> None:
        text = command.sql(dialect=self.config.dialect)
        if _CREATE_TABLE_COMMAND.match(text):
            raise ParsingError(
                "CREATE TABLE statement contains syntax the AST parser does not support.",
                suggestions=["Remove vendor-specific clauses from the statement"],
            )
