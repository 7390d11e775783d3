"""SQL DDL generation from editor entities.

The generator emits one `CREATE TABLE` statement per table. Column-level
foreign keys are written as trailing table clauses:

    CREATE TABLE posts (
      id UUID PRIMARY KEY,
      user_id INTEGER NOT NULL,
      FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );

Entities are assumed to be valid; nothing is re-checked here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..exceptions import ConverterConfigError
from ..models import Field, Table
from .base import BaseConverter, BaseConverterConfig


def _quote_literal(text: str) -> str:
    escaped = text.replace("'", "''")
    return f"'{escaped}'"


@dataclass(frozen=True)
class SQLGeneratorConfig(BaseConverterConfig):
    """Configuration for SQLGenerator.

    Args:
        if_not_exists: If True, emits `CREATE TABLE IF NOT EXISTS`. Defaults to False.
        schema_name: Optional schema used to qualify every table name.
            Defaults to None.
        include_comments: If True, emits `COMMENT ON TABLE` and
            `COMMENT ON COLUMN` statements for table and field comments.
            Comments holding a `Check:` expression are not emitted.
            Defaults to False.
        indent: Indentation of column definitions. Defaults to two spaces.
    """

    if_not_exists: bool = False
    schema_name: str | None = None
    include_comments: bool = False
    indent: str = "  "

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.indent.strip():
            raise ConverterConfigError("indent must contain only whitespace.")
        if self.schema_name is not None and not self.schema_name.strip():
            raise ConverterConfigError("schema_name must not be empty.")


class SQLGenerator(BaseConverter[Table]):
    """Generate `CREATE TABLE` DDL from `Table` entities.

    Column clauses are written in a fixed order: type, `PRIMARY KEY` or
    `NOT NULL`, `UNIQUE`, `DEFAULT`, `CHECK`.

    Example:
        >>> from ddlbridge.models import Field, Table
        >>> table = Table(id="t1", name="tags", fields=[Field(id="f1", name="label", type="TEXT", nullable=False)])
        >>> print(SQLGenerator().generate([table]))
        CREATE TABLE tags (
          label TEXT NOT NULL
        );
    """

    config: SQLGeneratorConfig

    def __init__(self, config: SQLGeneratorConfig | None = None) -> None:
        self.config = config or SQLGeneratorConfig()
        super().__init__(self.config)

    def convert(self, tables: Sequence[Table]) -> str:
        return self.generate(tables)

    def generate(self, tables: Sequence[Table]) -> str:
        """Generate DDL for `tables`, one statement per table.

        Args:
            tables: Tables to serialize, in output order.

        Returns:
            The statements separated by blank lines, each ending with `;`.
        """
        self._validate_table_filters(tables)
        statements = [self.generate_table(t) for t in self._filter_tables(tables)]
        return "\n\n".join(statements)

    def generate_table(self, table: Table) -> str:
        indent = self.config.indent
        clauses = [self.column_definition(f) for f in table.fields]
        clauses.extend(self.foreign_key_clause(f) for f in table.foreign_key_fields)

        exists = "IF NOT EXISTS " if self.config.if_not_exists else ""
        body = ",\n".join(f"{indent}{clause}" for clause in clauses)
        statement = f"CREATE TABLE {exists}{self._table_name(table)} (\n{body}\n);"

        if self.config.include_comments:
            comments = self._comment_statements(table)
            if comments:
                statement += "\n" + "\n".join(comments)
        return statement

    def column_definition(self, field: Field) -> str:
        parts = [field.name, field.type]
        if field.primary_key:
            parts.append("PRIMARY KEY")
        elif not field.nullable:
            parts.append("NOT NULL")
        if field.unique and not field.primary_key:
            parts.append("UNIQUE")
        if field.default_value:
            parts.append(f"DEFAULT {field.default_value}")
        check = field.check_expression
        if check:
            parts.append(f"CHECK ({check})")
        return " ".join(parts)

    def foreign_key_clause(self, field: Field) -> str:
        fk = field.foreign_key
        if fk is None:
            raise ValueError(f"Field '{field.name}' has no foreign key.")
        clause = f"FOREIGN KEY ({field.name}) REFERENCES {fk.table}({fk.field})"
        if fk.on_delete:
            clause += f" ON DELETE {fk.on_delete}"
        if fk.on_update:
            clause += f" ON UPDATE {fk.on_update}"
        return clause

    def _table_name(self, table: Table) -> str:
        if self.config.schema_name:
            return f"{self.config.schema_name}.{table.name}"
        return table.name

    def _comment_statements(self, table: Table) -> list[str]:
        name = self._table_name(table)
        statements = []
        if table.comment:
            statements.append(
                f"COMMENT ON TABLE {name} IS {_quote_literal(table.comment)};"
            )
        for field in table.fields:
            if field.comment and not field.has_check_comment:
                statements.append(
                    f"COMMENT ON COLUMN {name}.{field.name} IS"
                    f" {_quote_literal(field.comment)};"
                )
        return statements
