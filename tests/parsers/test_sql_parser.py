import logging

import pytest

from ddlbridge.exceptions import ParserConfigError, ParsingError
from ddlbridge.models import ParsedTable
from ddlbridge.parsers import (
    BaseParser,
    LegacyParser,
    ParserConfig,
    SQLGlotParser,
    SQLParser,
    parse_sql,
)


# ======================================================================
# SQLParser tests
# Scope: fallback policy, never-raise contract, parser agreement
# ======================================================================


class _RaisingParser(BaseParser):
    def parse(self, sql):
        raise ParsingError("primary failed")


class _StaticParser(BaseParser):
    def __init__(self, tables):
        super().__init__()
        self.tables = tables
        self.calls = 0

    def parse(self, sql):
        self.calls += 1
        return self.tables


# %% Fallback policy
class TestSQLParserFallback:
    def test_primary_result_is_returned(self):
        fallback = _StaticParser([ParsedTable(name="fallback")])
        parser = SQLParser(fallback=fallback)
        tables = parser.parse("CREATE TABLE t (id INT);")
        assert [t.name for t in tables] == ["t"]
        assert fallback.calls == 0

    def test_primary_failure_uses_fallback(self):
        fallback = _StaticParser([ParsedTable(name="fallback")])
        parser = SQLParser(primary=_RaisingParser(), fallback=fallback)
        assert [t.name for t in parser.parse("anything")] == ["fallback"]
        assert fallback.calls == 1

    def test_primary_failure_is_logged(self, caplog):
        parser = SQLParser(primary=_RaisingParser(), fallback=_StaticParser([]))
        with caplog.at_level(logging.WARNING, logger="ddlbridge.parsers.sql_parser"):
            parser.parse("anything")
        assert "AST parser failed, using legacy parser: primary failed" in caplog.text

    def test_fallback_disabled_returns_empty(self):
        fallback = _StaticParser([ParsedTable(name="fallback")])
        parser = SQLParser(
            ParserConfig(use_fallback=False), primary=_RaisingParser(), fallback=fallback
        )
        assert parser.parse("anything") == []
        assert fallback.calls == 0

    def test_fallback_failure_returns_empty(self):
        parser = SQLParser(primary=_RaisingParser(), fallback=_RaisingParser())
        assert parser.parse("anything") == []

    def test_fallback_parses_same_text(self, monkeypatch):
        def broken(self, sql):
            raise RuntimeError("grammar error")

        monkeypatch.setattr(SQLGlotParser, "parse", broken)
        tables = parse_sql("CREATE TABLE users (id UUID PRIMARY KEY, name TEXT);")
        assert [t.name for t in tables] == ["users"]
        assert tables[0].field_names == ["id", "name"]


# %% Never-raise contract
class TestSQLParserNeverRaises:
    @pytest.mark.parametrize(
        "sql",
        [
            "CREATE TABLE broken (id INT,, name TEXT",
            "CREATE TABLE (",
            "))) CREATE TABLE ((( ",
            "CREATE TABLE t (id INT REFERENCES);",
            "\x00\x01",
            "",
        ],
    )
    def test_malformed_input_returns_list(self, sql):
        assert isinstance(parse_sql(sql), list)


# %% Parser agreement
SIMPLE_COLUMNS_SQL = """
CREATE TABLE accounts (
  id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
  email VARCHAR(255) NOT NULL UNIQUE,
  handle TEXT UNIQUE,
  balance BIGINT NOT NULL DEFAULT 0,
  active BOOL DEFAULT true,
  score INT8,
  nickname VARCHAR(40),
  created_at TIMESTAMPTZ NOT NULL
);

CREATE TABLE tags (
  id INT PRIMARY KEY,
  label TEXT NOT NULL
);
"""


def _shape(tables):
    return [
        (t.name, [(f.name, f.type, f.nullable, f.primary_key, f.unique) for f in t.fields])
        for t in tables
    ]


def test_primary_and_fallback_agree_on_simple_columns():
    primary = SQLGlotParser().parse(SIMPLE_COLUMNS_SQL)
    fallback = LegacyParser().parse(SIMPLE_COLUMNS_SQL)
    assert _shape(primary) == _shape(fallback)
    assert len(primary) == 2


@pytest.mark.parametrize(
    "written",
    [
        "FLOAT",
        "NUMERIC",
        "NUMERIC(10,2)",
        "CHARACTER VARYING(20)",
        "DOUBLE PRECISION",
        "TIMESTAMP WITH TIME ZONE",
    ],
)
def test_primary_and_fallback_agree_on_written_types(written):
    sql = f"CREATE TABLE t (id INT PRIMARY KEY, x {written} NOT NULL, y {written});"
    assert _shape(SQLGlotParser().parse(sql)) == _shape(LegacyParser().parse(sql))

def test_primary_key_implies_not_null_for_both_parsers():
    sql = "CREATE TABLE t (a INT PRIMARY KEY, b INT NULL PRIMARY KEY, c INT);"
    for parser in (SQLGlotParser(), LegacyParser()):
        for table in parser.parse(sql):
            for field in table.fields:
                if field.primary_key:
                    assert field.nullable is False


# %% Configuration
class TestParserConfig:
    def test_defaults(self):
        config = ParserConfig()
        assert config.dialect == "postgres"
        assert config.use_fallback is True
        assert config.max_input_length == 1_000_000

    def test_unknown_dialect_raises(self):
        with pytest.raises(ParserConfigError, match="Unknown SQL dialect"):
            ParserConfig(dialect="not-a-dialect")

    @pytest.mark.parametrize("length", [0, -1])
    def test_non_positive_max_input_length_raises(self, length):
        with pytest.raises(ParserConfigError, match="max_input_length"):
            ParserConfig(max_input_length=length)
