from .base import BaseParser, ParserConfig
from .source import SourceText
from .expressions import ExpressionRenderer, render_expression
from .columns import ColumnExtractor
from .ast_parser import SQLGlotParser
from .legacy_parser import LegacyParser
from .sql_parser import SQLParser, parse_sql

__all__ = [
    "BaseParser",
    "ParserConfig",
    "SourceText",
    "ExpressionRenderer",
    "render_expression",
    "ColumnExtractor",
    "SQLGlotParser",
    "LegacyParser",
    "SQLParser",
    "parse_sql",
]
