"""Text-based `CREATE TABLE` parser used when the AST parser fails.

This parser works on the raw text with regular expressions and a
parenthesis-depth counter. It understands less than `SQLGlotParser`:

- table bodies may nest parentheses only one level deep;
- table-level clauses (`CONSTRAINT`, `PRIMARY KEY (...)`, `FOREIGN KEY`,
  `UNIQUE (...)`, `CHECK (...)`, `KEY`, `INDEX`) are dropped, matched on whole
  keywords so a column named `checked_at` is kept;
- foreign keys and `CHECK` expressions are not extracted;
- a `DEFAULT` value stops at the next whitespace or comma.

It never raises. Statements it cannot read are skipped with a `ParseWarning`.
"""

from __future__ import annotations

import logging
import re

from ..exceptions import validation_warning
from ..models import ParsedField, ParsedTable
from ..types import normalize_type
from .base import COLUMN_CONSTRAINT_KEYWORDS, BaseParser

logger = logging.getLogger(__name__)


_CREATE_TABLE = re.compile(
    r"CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?([\w.\"`]+)\s*\(((?:[^()]|\([^()]*\))*)\)\s*;?",
    re.IGNORECASE,
)
_TABLE_LEVEL_CLAUSE = re.compile(
    r"^(?:CONSTRAINT\b|PRIMARY\s+KEY\b|FOREIGN\s+KEY\b|UNIQUE\s*\(|CHECK\s*\(|EXCLUDE\b"
    r"|(?:UNIQUE\s+)?(?:KEY|INDEX)\b)",
    re.IGNORECASE,
)
_LEADING_WORD = re.compile(r"[A-Za-z_]+")
_NOT_NULL = re.compile(r"\bNOT\s+NULL\b", re.IGNORECASE)
_PRIMARY_KEY = re.compile(r"\bPRIMARY\s+KEY\b", re.IGNORECASE)
_UNIQUE = re.compile(r"\bUNIQUE\b", re.IGNORECASE)
_DEFAULT = re.compile(r"\bDEFAULT\s+([^,\s]+)", re.IGNORECASE)


def _strip_quotes(identifier: str) -> str:
    return identifier.strip('"`[]')


def _is_open(tokens: list[str]) -> bool:
    text = "".join(tokens)
    return text.count("(") > text.count(")")


def _starts_constraint(token: str) -> bool:
    word = _LEADING_WORD.match(token)
    return word is not None and word.group(0).upper() in COLUMN_CONSTRAINT_KEYWORDS


def split_top_level(content: str, separator: str = ",") -> list[str]:
    """Split `content` on `separator` outside of any parentheses."""
    statements: list[str] = []
    current: list[str] = []
    depth = 0
    for char in content:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == separator and depth == 0:
            statements.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


class LegacyParser(BaseParser):
    """Regex and bracket-depth parser with the same output as `SQLGlotParser`.

    Example:
        >>> parser = LegacyParser()
        >>> [table] = parser.parse("CREATE TABLE t (id INT PRIMARY KEY, name TEXT NOT NULL);")
        >>> [(f.name, f.type, f.nullable) for f in table.fields]
        [('id', 'INTEGER', False), ('name', 'TEXT', False)]
    """

    def parse(self, sql: str) -> list[ParsedTable]:
        if len(sql) > self.config.max_input_length:
            validation_warning(
                message=(
                    f"SQL input of {len(sql)} characters exceeds max_input_length"
                    f" ({self.config.max_input_length}). No tables will be read."
                ),
                filename="ddlbridge.parsers.legacy_parser",
                module=__name__,
            )
            return []

        tables: list[ParsedTable] = []
        clean_sql = " ".join(sql.split())
        try:
            for match in _CREATE_TABLE.finditer(clean_sql):
                name = _strip_quotes(match.group(1).split(".")[-1])
                fields = self._parse_fields(match.group(2), name)
                tables.append(ParsedTable(name=name, fields=fields))
        except Exception as e:
            logger.warning(
                "Legacy parser stopped after %d table(s): %s", len(tables), e
            )
        return tables

    def _parse_fields(self, content: str, table: str) -> list[ParsedField]:
        fields: list[ParsedField] = []
        for statement in split_top_level(content):
            if not statement or _TABLE_LEVEL_CLAUSE.match(statement):
                continue
            field = self._parse_field(statement)
            if field is None:
                validation_warning(
                    message=(
                        f"Could not read column definition '{statement}'"
                        f" in table '{table}'."
                        " The column will be skipped."
                    ),
                    filename="ddlbridge.parsers.legacy_parser",
                    module=__name__,
                )
                continue
            fields.append(field)
        return fields

    def _parse_field(self, statement: str) -> ParsedField | None:
        parts = statement.split()
        if len(parts) < 2:
            return None

        name = _strip_quotes(parts[0])
        type_tokens = [parts[1]]
        rest = parts[2:]
        # The type runs up to the first constraint keyword outside its parameter
        # list, e.g. "NUMERIC(10, 2)" or "CHARACTER VARYING(20)"
        while rest and (_is_open(type_tokens) or not _starts_constraint(rest[0])):
            type_tokens.append(rest.pop(0))

        constraints = " ".join(rest)
        primary_key = bool(_PRIMARY_KEY.search(constraints))
        default_match = _DEFAULT.search(constraints)

        return ParsedField(
            name=name,
            type=normalize_type(" ".join(type_tokens)),
            nullable=not _NOT_NULL.search(constraints) and not primary_key,
            primary_key=primary_key,
            unique=bool(_UNIQUE.search(constraints)),
            default_value=default_match.group(1) if default_match else None,
        )
