"""Extraction of `ParsedField` records from sqlglot column definitions."""

from __future__ import annotations

import re

from sqlglot import exp

from ..exceptions import ParsingError, validation_warning
from ..models import FOREIGN_KEY_ACTIONS, ForeignKeyReference, ParsedField
from ..types import normalize_data_type, normalize_type
from .expressions import ExpressionRenderer
from .source import SourceText

_REFERENCE_ACTION = re.compile(
    r"\bON\s+(?P<event>DELETE|UPDATE)\s+(?P<action>SET\s+NULL|SET\s+DEFAULT|NO\s+ACTION|CASCADE|RESTRICT)\b",
    re.IGNORECASE,
)


class ColumnExtractor:
    """Build a `ParsedField` from one `exp.ColumnDef` and its constraints.

    Constraints are applied in declaration order and the last one wins per
    attribute, so `NULL` after `NOT NULL` leaves the column nullable. A
    `PRIMARY KEY` always makes the column non-nullable.

    Table-level constraints (`PRIMARY KEY (a, b)`, `FOREIGN KEY ...` and
    table `CHECK`s) are not part of a column definition and are not read here.

    Args:
        dialect: sqlglot dialect used to render types and expressions.
        source: Tokens of the text the column was parsed from. When given,
            function names in DEFAULT and CHECK expressions are kept as
            written.
    """

    def __init__(
        self, dialect: str = "postgres", source: SourceText | None = None
    ) -> None:
        self.dialect = dialect
        self.renderer = ExpressionRenderer(dialect, source=source)

    def extract(
        self, column: exp.ColumnDef, type_text: str | None = None
    ) -> ParsedField:
        """Build the `ParsedField` for `column`.

        Args:
            column: Column definition node.
            type_text: Data type as written in the source. Normalized with
                `normalize_type` when given, otherwise the type is read from
                the sqlglot node.
        """
        name = column.name
        kind = column.args.get("kind")
        if not isinstance(kind, exp.DataType):
            raise ParsingError(f"Column '{name}' has no data type.")

        nullable = True
        primary_key = False
        unique = False
        default_value: str | None = None
        check: str | None = None
        foreign_key: ForeignKeyReference | None = None

        for constraint in column.constraints:
            c = constraint.kind
            if isinstance(c, exp.NotNullColumnConstraint):
                nullable = bool(c.args.get("allow_null"))
            elif isinstance(c, exp.PrimaryKeyColumnConstraint):
                primary_key = True
                nullable = False
            elif isinstance(c, exp.UniqueColumnConstraint):
                unique = True
            elif isinstance(c, exp.DefaultColumnConstraint):
                default_value = self.renderer.render(c.this)
            elif isinstance(c, exp.CheckColumnConstraint):
                check = self._render_check(c.this)
            elif isinstance(c, exp.Reference):
                foreign_key = self._extract_reference(name, c)

        if primary_key:
            nullable = False

        return ParsedField(
            name=name,
            type=(
                normalize_type(type_text)
                if type_text
                else normalize_data_type(kind, self.dialect)
            ),
            nullable=nullable,
            primary_key=primary_key,
            unique=unique,
            default_value=default_value,
            check=check,
            foreign_key=foreign_key,
        )

    def _render_check(self, node: exp.Expression) -> str:
        if isinstance(node, exp.Paren):
            node = node.this
        return self.renderer.render(node)

    def _extract_reference(
        self, column_name: str, reference: exp.Reference
    ) -> ForeignKeyReference:
        target = reference.this
        referenced_columns: list[str] = []
        if isinstance(target, exp.Schema):
            referenced_columns = [e.name for e in target.expressions]
            target = target.this

        actions: dict[str, str] = {}
        for option in self._reference_options(reference):
            for match in _REFERENCE_ACTION.finditer(option):
                event = match.group("event").upper()
                action = " ".join(match.group("action").upper().split())
                if action not in FOREIGN_KEY_ACTIONS:
                    validation_warning(
                        message=(
                            f"Foreign key action 'ON {event} {action}' is not supported"
                            f" for column '{column_name}'. The action will be omitted."
                        ),
                        filename="ddlbridge.parsers.columns",
                        module=__name__,
                    )
                    continue
                actions[event] = action

        return ForeignKeyReference(
            table=target.name,
            field=referenced_columns[0] if referenced_columns else "id",
            on_delete=actions.get("DELETE"),
            on_update=actions.get("UPDATE"),
        )

    def _reference_options(self, reference: exp.Reference) -> list[str]:
        # Key constraint options are kept as plain strings such as "ON DELETE CASCADE"
        options: list[str] = []
        for key in ("options", "expressions"):
            for option in reference.args.get(key) or []:
                options.append(option if isinstance(option, str) else option.sql())
        return options
