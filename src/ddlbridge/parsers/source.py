"""Token-level view of the SQL text read by the AST parser.

sqlglot's AST drops some details of what the user wrote: type spellings
(`FLOAT` becomes `DOUBLE PRECISION`, `NUMERIC(10,2)` becomes `DECIMAL(10, 2)`) and the
names of known functions (`now()` becomes `CURRENT_TIMESTAMP`). `SourceText`
tokenizes the same text once and recovers them from token offsets.
"""

from __future__ import annotations

import bisect
from typing import NamedTuple

import sqlglot
from sqlglot.tokens import Token, TokenType

from .base import COLUMN_CONSTRAINT_KEYWORDS

_OPENING = {TokenType.L_PAREN, TokenType.L_BRACKET, TokenType.L_BRACE}
_CLOSING = {TokenType.R_PAREN, TokenType.R_BRACKET, TokenType.R_BRACE}
_TABLE_LEVEL_KEYWORDS = frozenset(
    {"CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "CHECK", "EXCLUDE", "LIKE"}
)


class FunctionCall(NamedTuple):
    """A function call as written.

    `arguments` holds the raw text of each argument and `spans` its inclusive
    `(start, end)` character offsets.
    """

    name: str
    arguments: list[str]
    spans: list[tuple[int, int]]


def _first_word(token: Token) -> str:
    words = token.text.upper().split()
    return words[0] if words else ""


def _collapse(text: str) -> str:
    return " ".join(text.split())


class SourceText:
    """Tokens of one SQL input, addressed by character offset.

    Args:
        sql: The exact text given to sqlglot's parser.
        dialect: sqlglot dialect used to tokenize `sql`.

    Example:
        >>> source = SourceText("CREATE TABLE t (price NUMERIC(10,2) NOT NULL);")
        >>> source.column_types()
        [('t', {'price': ['NUMERIC(10,2)']})]
    """

    def __init__(self, sql: str, dialect: str = "postgres") -> None:
        self.sql = sql
        self.tokens = sqlglot.tokenize(sql, read=dialect)
        self._starts = [token.start for token in self.tokens]

    def text(self, first: Token, last: Token) -> str:
        return self.sql[first.start : last.end + 1]

    # %% Column types
    def column_types(self) -> list[tuple[str, dict[str, list[str]]]]:
        """Raw data type text of each column, per `CREATE TABLE` in order.

        Returns:
            `(table name, {column name: type texts})` pairs. Table-level
            clauses are left out. A repeated column name lists one type
            text per definition, in order.
        """
        tables: list[tuple[str, dict[str, list[str]]]] = []
        index = 0
        while index < len(self.tokens):
            if self.tokens[index].token_type != TokenType.CREATE:
                index += 1
                continue
            body_start = self._table_body_start(index)
            if body_start is None:
                index += 1
                continue
            name = self.tokens[body_start - 1].text
            elements, index = self._split_group(body_start)
            types: dict[str, list[str]] = {}
            for element in elements:
                column = self._column_type(element)
                if column is not None:
                    types.setdefault(column[0], []).append(column[1])
            tables.append((name, types))
        return tables

    def _table_body_start(self, create_index: int) -> int | None:
        """Index of the `(` opening the column list of a `CREATE TABLE`."""
        index = create_index + 1
        seen_table = False
        while index < len(self.tokens):
            token_type = self.tokens[index].token_type
            if token_type in (TokenType.SEMICOLON, TokenType.ALIAS):
                return None
            if token_type == TokenType.TABLE:
                seen_table = True
            elif token_type == TokenType.L_PAREN:
                return index if seen_table and index > create_index + 2 else None
            index += 1
        return None

    def _column_type(self, element: list[Token]) -> tuple[str, str] | None:
        if len(element) < 2:
            return None
        name_token = element[0]
        if (
            name_token.token_type != TokenType.IDENTIFIER
            and _first_word(name_token) in _TABLE_LEVEL_KEYWORDS
        ):
            return None

        type_tokens: list[Token] = []
        depth = 0
        for token in element[1:]:
            if depth == 0 and _first_word(token) in COLUMN_CONSTRAINT_KEYWORDS:
                break
            if token.token_type in _OPENING:
                depth += 1
            elif token.token_type in _CLOSING:
                depth -= 1
            type_tokens.append(token)
        if not type_tokens:
            return None
        return name_token.text, _collapse(self.text(type_tokens[0], type_tokens[-1]))

    # %% Function calls
    def call_at(self, start: int) -> FunctionCall | None:
        """The function call whose name token starts at offset `start`."""
        index = bisect.bisect_left(self._starts, start)
        if index >= len(self.tokens) - 1 or self._starts[index] != start:
            return None
        if self.tokens[index + 1].token_type != TokenType.L_PAREN:
            return None
        groups, _ = self._split_group(index + 1)
        groups = [group for group in groups if group]
        return FunctionCall(
            name=self.tokens[index].text,
            arguments=[_collapse(self.text(group[0], group[-1])) for group in groups],
            spans=[(group[0].start, group[-1].end) for group in groups],
        )

    def _split_group(self, open_index: int) -> tuple[list[list[Token]], int]:
        """Split the bracketed group opening at `open_index` on top-level commas.

        Returns:
            The comma-separated token groups and the index just past the
            closing bracket (or the end of input when it is never closed).
        """
        groups: list[list[Token]] = [[]]
        depth = 0
        index = open_index + 1
        while index < len(self.tokens):
            token = self.tokens[index]
            index += 1
            if token.token_type in _OPENING:
                depth += 1
            elif token.token_type in _CLOSING:
                if depth == 0:
                    break
                depth -= 1
            elif token.token_type == TokenType.COMMA and depth == 0:
                groups.append([])
                continue
            groups[-1].append(token)
        if groups == [[]]:
            groups = []
        return groups, index
