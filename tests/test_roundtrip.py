import pytest

import ddlbridge
from ddlbridge import Field, Position, Table, from_sql, parse_sql, to_sql, to_tables
from ddlbridge.exceptions import SchemaImportError
from ddlbridge.parsers import LegacyParser


# ======================================================================
# Round-trip tests
# Scope: generate then parse, import entry point, cross-module properties
# ======================================================================


def _field(name: str, type: str, **kwargs) -> Field:
    return Field(id=f"f-{name}", name=name, type=type, **kwargs)


EDITOR_TABLES = [
    Table(
        id="t-users",
        name="users",
        fields=[
            _field(
                "id", "UUID", nullable=False, primary_key=True, default_value="gen_random_uuid()"
            ),
            _field("email", "VARCHAR(255)", nullable=False, unique=True),
            _field("age", "INTEGER", check="age >= 0"),
            _field("active", "BOOLEAN", nullable=False, default_value="TRUE"),
        ],
    ),
    Table(
        id="t-events",
        name="events",
        fields=[
            _field("id", "BIGINT", nullable=False, primary_key=True),
            _field("kind", "TEXT", default_value="'signup'"),
        ],
    ),
]


def _attributes(tables):
    return [
        (
            t.name,
            [
                (f.name, f.type, f.nullable, f.primary_key, f.unique, f.default_value, f.check)
                for f in t.fields
            ],
        )
        for t in tables
    ]


# %% Generate then parse
class TestRoundTrip:
    def test_generated_sql_parses_back_to_same_attributes(self):
        parsed = parse_sql(to_sql(EDITOR_TABLES))
        assert _attributes(parsed) == _attributes(EDITOR_TABLES)

    def test_generator_options_parse_back(self):
        sql = to_sql(EDITOR_TABLES, if_not_exists=True, schema_name="public")
        assert [t.name for t in parse_sql(sql)] == ["users", "events"]

    def test_legacy_parser_reads_generated_sql(self):
        tables = LegacyParser().parse(to_sql(EDITOR_TABLES))
        assert [t.field_names for t in tables] == [t.field_names for t in EDITOR_TABLES]

    def test_negated_checks_and_written_types_survive(self):
        table = Table(
            id="t-items",
            name="items",
            fields=[
                _field("price", "NUMERIC(10,2)", check="price IS NOT NULL"),
                _field("code", "CHARACTER VARYING(20)", check="code NOT LIKE 'tmp%'"),
                _field("created_at", "TIMESTAMPTZ", default_value="now()"),
            ],
        )
        assert _attributes(parse_sql(to_sql([table]))) == _attributes([table])

    def test_reimport_assigns_fresh_ids_and_positions(self):
        tables = to_tables(parse_sql(to_sql(EDITOR_TABLES)))
        assert {t.id for t in tables}.isdisjoint({t.id for t in EDITOR_TABLES})
        assert [t.position for t in tables] == [Position(100, 100), Position(400, 100)]


# %% Import entry point
class TestFromSQL:
    def test_from_sql(self):
        sql = """
        CREATE TABLE users (id UUID PRIMARY KEY, email TEXT NOT NULL UNIQUE);
        CREATE TABLE posts (
          id UUID PRIMARY KEY,
          user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE
        );
        """
        users, posts = from_sql(sql)
        assert users.name == "users"
        assert posts.fields[1].foreign_key.table == "users"
        assert posts.fields[1].foreign_key.on_delete == "CASCADE"
        assert posts.position == Position(400, 100)

    def test_from_sql_refuses_duplicate_tables(self):
        sql = "CREATE TABLE a (id INT); CREATE TABLE a (id INT);"
        with pytest.raises(SchemaImportError, match="Duplicate table names found: a"):
            from_sql(sql)

    def test_from_sql_refuses_duplicate_fields(self):
        with pytest.raises(SchemaImportError, match="duplicate fields: id"):
            from_sql("CREATE TABLE a (id INT, id TEXT);")

    def test_from_sql_is_stricter_than_parse_sql(self):
        sql = "CREATE TABLE a (id INT); CREATE TABLE a (id INT);"
        assert [t.name for t in parse_sql(sql)] == ["a", "a"]
        with pytest.raises(SchemaImportError):
            from_sql(sql)

    def test_from_sql_without_validation(self):
        sql = "CREATE TABLE a (id INT); CREATE TABLE a (id INT);"
        assert len(from_sql(sql, validate=False)) == 2

    def test_from_sql_forwards_converter_options(self):
        sql = "CREATE TABLE a (id INT); CREATE TABLE b (id INT);"
        tables = from_sql(sql, ignore_tables={"a"}, id_factory=lambda kind: kind)
        assert [(t.id, t.name) for t in tables] == [("table", "b")]

    def test_nothing_recognized(self):
        assert from_sql("SELECT 1;") == []


# %% Cross-module properties
@pytest.mark.parametrize(
    "sql",
    [
        "CREATE TABLE t (id INT PRIMARY KEY, x INT NULL);",
        "CREATE TABLE t (id INT NULL PRIMARY KEY);",
        "CREATE TABLE t (id INT PRIMARY KEY NULL, y TEXT NOT NULL NULL);",
    ],
)
def test_primary_key_is_never_nullable(sql):
    for table in parse_sql(sql):
        for field in table.fields:
            if field.primary_key:
                assert field.nullable is False


def test_public_api():
    assert set(ddlbridge.__all__) >= {"from_sql", "parse_sql", "to_sql", "to_tables"}
