"""Rendering of sqlglot expression nodes into SQL text.

`DEFAULT` and `CHECK` clauses are stored on the schema model as plain SQL text.
The renderer covers the expression kinds that commonly appear in those clauses
exactly, and falls back to sqlglot's own generator for everything else.
"""

from __future__ import annotations

import logging
import re
from functools import singledispatchmethod

from sqlglot import exp

from ..types import normalize_data_type
from .source import FunctionCall, SourceText

logger = logging.getLogger(__name__)


_BINARY_OPERATORS: dict[type[exp.Expression], str] = {
    exp.EQ: "=",
    exp.NEQ: "<>",
    exp.GT: ">",
    exp.GTE: ">=",
    exp.LT: "<",
    exp.LTE: "<=",
    exp.Add: "+",
    exp.Sub: "-",
    exp.Mul: "*",
    exp.Div: "/",
    exp.Mod: "%",
    exp.And: "AND",
    exp.Or: "OR",
    exp.Like: "LIKE",
    exp.ILike: "ILIKE",
    exp.Is: "IS",
    exp.DPipe: "||",
}

_NEGATED_OPERATORS: dict[type[exp.Expression], str] = {
    exp.Is: "IS NOT",
    exp.Like: "NOT LIKE",
    exp.ILike: "NOT ILIKE",
}

_VERBATIM_CALLS: dict[str, str] = {
    "gen_random_uuid": "gen_random_uuid()",
}

_FUNCTION_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")


def _call_arguments(node: exp.Func) -> list[exp.Expression]:
    """Argument nodes of a known function, in declaration order."""
    arguments: list[exp.Expression] = []
    for key in node.arg_types:
        value = node.args.get(key)
        values = value if isinstance(value, list) else [value]
        arguments.extend(v for v in values if isinstance(v, exp.Expression))
    return arguments


def _first_position(node: exp.Expression) -> int | None:
    for child in node.walk():
        start = child.meta.get("start")
        if start is not None:
            return start
    return None


def _aligned(arguments: list[exp.Expression], spans: list[tuple[int, int]]) -> bool:
    """Whether each argument node was parsed from the matching source argument."""
    if len(arguments) != len(spans):
        return False
    for argument, (start, end) in zip(arguments, spans):
        position = _first_position(argument)
        if position is None or not start <= position <= end:
            return False
    return True


class ExpressionRenderer:
    """Turn a sqlglot expression node into SQL text.

    Rendering is total: handlers exist for literals, column references,
    function calls, `ANY`, binary operators, arrays and casts, and any other
    node kind is printed with sqlglot's generator for the configured dialect.

    Known functions are printed under the name used in `source`, so `now()`
    stays `now()` instead of sqlglot's `CURRENT_TIMESTAMP`. Without a source
    they go to the generic printer.

    Args:
        dialect: sqlglot dialect used by the generic printer and for type names.
        source: Tokens of the text the nodes were parsed from.

    Example:
        >>> from sqlglot import parse_one
        >>> renderer = ExpressionRenderer()
        >>> renderer.render(parse_one("'draft'::text", read="postgres"))
        "CAST('draft' AS TEXT)"
        >>> renderer.render(parse_one("ARRAY[1, 2]", read="postgres"))
        'ARRAY[1, 2]'
    """

    def __init__(
        self, dialect: str = "postgres", source: SourceText | None = None
    ) -> None:
        self.dialect = dialect
        self.source = source

    def render(self, node: exp.Expression) -> str:
        try:
            return self._render(node)
        except Exception as e:
            logger.debug("Falling back to generic printer for %r: %s", node, e)
            return self._generic(node)

    def _generic(self, node: exp.Expression) -> str:
        try:
            return node.sql(dialect=self.dialect)
        except Exception as e:
            logger.debug("Generic printer failed for %r: %s", node, e)
            return str(node)

    @singledispatchmethod
    def _render(self, node: exp.Expression) -> str:
        return self._generic(node)

    @_render.register(exp.Literal)
    def _(self, node: exp.Literal) -> str:
        if node.is_string:
            escaped = node.this.replace("'", "''")
            return f"'{escaped}'"
        return str(node.this)

    @_render.register(exp.Boolean)
    def _(self, node: exp.Boolean) -> str:
        return "TRUE" if node.this else "FALSE"

    @_render.register(exp.Null)
    def _(self, node: exp.Null) -> str:
        return "NULL"

    @_render.register(exp.Column)
    def _(self, node: exp.Column) -> str:
        if node.table:
            return f"{node.table}.{node.name}"
        return node.name

    @_render.register(exp.Func)
    def _(self, node: exp.Func) -> str:
        # sqlglot parses gen_random_uuid() into its own Uuid node
        if node.key == "uuid":
            return _VERBATIM_CALLS["gen_random_uuid"]
        if isinstance(node, exp.Anonymous):
            name = node.name
            if name.lower() in _VERBATIM_CALLS:
                return _VERBATIM_CALLS[name.lower()]
            args = ", ".join(self.render(arg) for arg in node.expressions)
            return f"{name}({args})"
        return self._render_known_function(node)

    def _render_known_function(self, node: exp.Func) -> str:
        call = self._source_call(node)
        if call is None:
            return self._generic(node)
        if call.name.lower() in _VERBATIM_CALLS:
            return _VERBATIM_CALLS[call.name.lower()]

        arguments = _call_arguments(node)
        if _aligned(arguments, call.spans):
            args = ", ".join(self.render(arg) for arg in arguments)
        else:
            # sqlglot reordered, added or merged arguments; keep them as written
            args = ", ".join(call.arguments)
        return f"{call.name}({args})"

    def _source_call(self, node: exp.Func) -> FunctionCall | None:
        start = node.meta.get("start")
        if self.source is None or start is None:
            return None
        call = self.source.call_at(start)
        if call is None or not _FUNCTION_NAME.fullmatch(call.name):
            return None
        return call

    @_render.register(exp.Any)
    def _(self, node: exp.Any) -> str:
        inner = node.this
        if isinstance(inner, exp.Paren):
            inner = inner.this
        return f"ANY ({self.render(inner)})"

    @_render.register(exp.Binary)
    def _(self, node: exp.Binary) -> str:
        # sqlglot keeps `IS NOT` and `NOT LIKE` as the positive node with a negate flag
        if node.args.get("negate"):
            operator = _NEGATED_OPERATORS.get(type(node))
        else:
            operator = _BINARY_OPERATORS.get(type(node))
        if operator is None:
            return self._generic(node)
        return f"{self.render(node.left)} {operator} {self.render(node.right)}"

    @_render.register(exp.Array)
    def _(self, node: exp.Array) -> str:
        elements = ", ".join(self.render(e) for e in node.expressions)
        return f"ARRAY[{elements}]"

    @_render.register(exp.Cast)
    def _(self, node: exp.Cast) -> str:
        to = node.args.get("to")
        type_sql = (
            normalize_data_type(to, self.dialect)
            if isinstance(to, exp.DataType)
            else self._generic(to)
        )
        return f"CAST({self.render(node.this)} AS {type_sql})"

    @_render.register(exp.Paren)
    def _(self, node: exp.Paren) -> str:
        return f"({self.render(node.this)})"

    @_render.register(exp.Neg)
    def _(self, node: exp.Neg) -> str:
        return f"-{self.render(node.this)}"

    @_render.register(exp.Not)
    def _(self, node: exp.Not) -> str:
        return f"NOT {self.render(node.this)}"


_default_renderer = ExpressionRenderer()


def render_expression(node: exp.Expression) -> str:
    """Render `node` as PostgreSQL text with the default renderer."""
    return _default_renderer.render(node)
