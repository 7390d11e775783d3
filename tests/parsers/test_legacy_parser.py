import pytest

from ddlbridge.exceptions import ParseWarning
from ddlbridge.models import ParsedField
from ddlbridge.parsers import LegacyParser, ParserConfig
from ddlbridge.parsers.legacy_parser import split_top_level


# ======================================================================
# LegacyParser tests
# Scope: regex table matching, comma splitting, reduced-fidelity columns
# ======================================================================


@pytest.fixture
def parser() -> LegacyParser:
    return LegacyParser()


# %% Splitting
class TestSplitTopLevel:
    def test_splits_on_top_level_commas(self):
        assert split_top_level("a INT, b TEXT") == ["a INT", "b TEXT"]

    def test_keeps_commas_inside_parentheses(self):
        assert split_top_level("price NUMERIC(10, 2), CHECK (a IN (1, 2))") == [
            "price NUMERIC(10, 2)",
            "CHECK (a IN (1, 2))",
        ]

    def test_drops_empty_tail(self):
        assert split_top_level("a INT, ") == ["a INT"]


# %% Tables
class TestLegacyParserTables:
    def test_users_table(self, parser):
        sql = """
        CREATE TABLE users (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          email VARCHAR(255) NOT NULL UNIQUE,
          age INT
        );
        """
        [table] = parser.parse(sql)
        assert table.name == "users"
        assert table.fields == [
            ParsedField(
                name="id",
                type="UUID",
                nullable=False,
                primary_key=True,
                default_value="gen_random_uuid()",
            ),
            ParsedField(name="email", type="VARCHAR(255)", nullable=False, unique=True),
            ParsedField(name="age", type="INTEGER"),
        ]

    def test_if_not_exists_and_multiple_tables(self, parser):
        sql = "CREATE TABLE IF NOT EXISTS a (x INT); create table b (y BOOL);"
        tables = parser.parse(sql)
        assert [t.name for t in tables] == ["a", "b"]
        assert tables[1].fields[0].type == "BOOLEAN"

    def test_quoted_and_qualified_names(self, parser):
        [table] = parser.parse('CREATE TABLE public."Accounts" ("Id" INT);')
        assert table.name == "Accounts"
        assert table.field_names == ["Id"]

    def test_table_level_clauses_are_dropped(self, parser):
        sql = """
        CREATE TABLE memberships (
          user_id INT NOT NULL,
          team_id INT NOT NULL,
          CONSTRAINT memberships_pkey PRIMARY KEY (user_id, team_id),
          FOREIGN KEY (team_id) REFERENCES teams(id),
          UNIQUE (user_id),
          CHECK (user_id > 0)
        );
        """
        [table] = parser.parse(sql)
        assert table.field_names == ["user_id", "team_id"]

    def test_no_create_table(self, parser):
        assert parser.parse("SELECT 1;") == []

    def test_deeply_nested_body_is_not_matched(self, parser):
        assert parser.parse("CREATE TABLE t (a INT CHECK (a IN ((1), (2))));") == []


# %% Columns
class TestLegacyParserColumns:
    def test_parameterized_type_with_spaces(self, parser):
        [table] = parser.parse("CREATE TABLE t (price NUMERIC(10, 2) NOT NULL);")
        assert table.fields[0].type == "NUMERIC(10, 2)"
        assert table.fields[0].nullable is False

    def test_primary_key_implies_not_null(self, parser):
        [table] = parser.parse("CREATE TABLE t (id INT PRIMARY KEY);")
        assert table.fields[0].primary_key is True
        assert table.fields[0].nullable is False

    def test_unique_matches_whole_word_only(self, parser):
        [table] = parser.parse("CREATE TABLE t (is_unique BOOLEAN);")
        assert table.fields[0].unique is False

    def test_default_stops_at_whitespace(self, parser):
        [table] = parser.parse("CREATE TABLE t (status TEXT DEFAULT 'active' NOT NULL);")
        assert table.fields[0].default_value == "'active'"

    def test_references_and_checks_are_not_extracted(self, parser):
        sql = "CREATE TABLE t (user_id INT REFERENCES users(id) CHECK (user_id > 0));"
        [table] = parser.parse(sql)
        assert table.fields[0].foreign_key is None
        assert table.fields[0].check is None

    @pytest.mark.parametrize("name", ["checked_at", "unique_code", "constraint_id", "primary_flag"])
    def test_column_named_like_a_table_clause_is_kept(self, parser, name):
        [table] = parser.parse(f"CREATE TABLE t (id INT, {name} TEXT, CHECK (id > 0));")
        assert table.field_names == ["id", name]

    @pytest.mark.parametrize(
        "definition, expected",
        [
            ("name CHARACTER VARYING(20) NOT NULL", "CHARACTER VARYING(20)"),
            ("at TIMESTAMP WITH TIME ZONE", "TIMESTAMPTZ"),
            ("ratio DOUBLE PRECISION DEFAULT 0", "DOUBLE PRECISION"),
        ],
    )
    def test_multi_word_type(self, parser, definition, expected):
        [table] = parser.parse(f"CREATE TABLE t ({definition});")
        assert table.fields[0].type == expected

    def test_table_level_clauses_are_skipped(self, parser):
        sql = (
            "CREATE TABLE t (id INT, code TEXT, CONSTRAINT pk PRIMARY KEY (id),"
            " UNIQUE (code), FOREIGN KEY (id) REFERENCES u(id));"
        )
        [table] = parser.parse(sql)
        assert table.field_names == ["id", "code"]

    def test_unreadable_column_is_skipped_with_warning(self, parser):
        message = "Could not read column definition 'orphan' in table 't'"
        with pytest.warns(ParseWarning, match=message):
            [table] = parser.parse("CREATE TABLE t (id INT, orphan);")
        assert table.field_names == ["id"]


# %% Limits
class TestLegacyParserLimits:
    def test_oversized_input_is_not_scanned(self):
        parser = LegacyParser(ParserConfig(max_input_length=10))
        with pytest.warns(ParseWarning, match="exceeds max_input_length"):
            assert parser.parse("CREATE TABLE t (id INT);") == []

    def test_internal_error_returns_partial_result(self, parser, monkeypatch):
        calls = []

        def flaky(content, table):
            calls.append(content)
            if len(calls) > 1:
                raise RuntimeError("boom")
            return []

        monkeypatch.setattr(parser, "_parse_fields", flaky)
        tables = parser.parse("CREATE TABLE a (x INT); CREATE TABLE b (y INT);")
        assert [t.name for t in tables] == ["a"]
