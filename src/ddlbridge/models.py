"""Schema model objects exchanged with the surrounding editor.

Two families of objects live here:

- `ParsedTable` / `ParsedField`: immutable, intermediate results of a single
  parse call. They are created by the parsers and discarded once converted.
- `Table` / `Field`: long-lived, mutable entities owned by the editor. They add
  an id, a diagram position and a free-text comment.

Example:
    >>> fk = ForeignKeyReference(table="users", field="id", on_delete="CASCADE")
    >>> field = ParsedField(name="user_id", type="INTEGER", foreign_key=fk)
    >>> table = ParsedTable(name="posts", fields=[field])
    >>> table.field_names
    ['user_id']
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import ModelError

FOREIGN_KEY_ACTIONS: frozenset[str] = frozenset(
    {"CASCADE", "SET NULL", "RESTRICT", "NO ACTION"}
)
CHECK_COMMENT_PREFIX = "Check:"


@dataclass(frozen=True)
class ForeignKeyReference:
    """Target of a column-level foreign key.

    Args:
        table: Referenced table name.
        field: Referenced column name.
        on_delete: Optional `ON DELETE` action, one of `FOREIGN_KEY_ACTIONS`.
        on_update: Optional `ON UPDATE` action, one of `FOREIGN_KEY_ACTIONS`.
    """

    table: str
    field: str = "id"
    on_delete: str | None = None
    on_update: str | None = None

    def __post_init__(self) -> None:
        for clause, action in (
            ("on_delete", self.on_delete),
            ("on_update", self.on_update),
        ):
            if action is not None and action not in FOREIGN_KEY_ACTIONS:
                raise ModelError(
                    f"Unsupported foreign key action for '{clause}': {action!r}.",
                    suggestions=[
                        "Use one of: " + ", ".join(sorted(FOREIGN_KEY_ACTIONS))
                    ],
                )

    def __str__(self) -> str:
        return f"{self.table}({self.field})"


@dataclass(frozen=True)
class ParsedField:
    """A column as read from a `CREATE TABLE` statement."""

    name: str
    type: str
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    default_value: str | None = None
    check: str | None = None
    foreign_key: ForeignKeyReference | None = None


@dataclass(frozen=True)
class ParsedTable:
    """A table as read from a `CREATE TABLE` statement."""

    name: str
    fields: list[ParsedField] = field(default_factory=list)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


@dataclass
class Position:
    """Diagram coordinates of a table node."""

    x: int = 0
    y: int = 0


@dataclass
class Field:
    """A column of a schema table, as edited in the diagram.

    `check` holds the CHECK expression text. Older projects stored it in the
    comment with a `Check:` prefix; `check_expression` reads either form.

    Example:
        >>> f = Field(id="field-1", name="age", type="INTEGER", comment="Check: age >= 0")
        >>> f.check_expression
        'age >= 0'
    """

    id: str
    name: str
    type: str
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    default_value: str | None = None
    check: str | None = None
    comment: str | None = None
    foreign_key: ForeignKeyReference | None = None

    @property
    def check_expression(self) -> str | None:
        """CHECK expression from `check`, else from a `Check:` comment."""
        if self.check:
            return self.check
        if self.comment and self.has_check_comment:
            return self.comment[len(CHECK_COMMENT_PREFIX) :].strip() or None
        return None

    @property
    def has_check_comment(self) -> bool:
        return bool(self.comment) and self.comment.startswith(CHECK_COMMENT_PREFIX)


@dataclass
class Table:
    """A schema table, as edited in the diagram."""

    id: str
    name: str
    fields: list[Field] = field(default_factory=list)
    position: Position = field(default_factory=Position)
    comment: str | None = None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def foreign_key_fields(self) -> list[Field]:
        return [f for f in self.fields if f.foreign_key is not None]
