"""Tests for SQL statement construction."""

import pytest

from autorest.core.errors import InvalidArgument
from autorest.query.builder import (
    SqlStatement,
    build_insert,
    build_select_all,
    build_select_by_id,
    build_select_filtered,
    quote_identifier,
)

COLUMNS = ["id", "personid", "street", "city"]


def plain(name: str) -> str:
    return name


class TestQuoteIdentifier:
    def test_wraps_in_double_quotes(self):
        assert quote_identifier("people") == '"people"'

    def test_doubles_embedded_quotes(self):
        assert quote_identifier('we"ird') == '"we""ird"'


class TestSelectAll:
    def test_projection_in_catalog_order(self):
        stmt = build_select_all("addresses", COLUMNS)
        assert stmt.text == 'SELECT "id", "personid", "street", "city" FROM "addresses"'
        assert stmt.bound_values == ()

    def test_custom_quote(self):
        stmt = build_select_all("people", ["id", "name"], quote=plain)
        assert stmt.text == "SELECT id, name FROM people"

    def test_schema_qualified(self):
        stmt = build_select_all("people", ["id"], quote=plain, schema="public")
        assert stmt.text == "SELECT id FROM public.people"


class TestSelectById:
    def test_binds_integer_id(self):
        stmt = build_select_by_id("people", ["id", "name"], "7", quote=plain)
        assert stmt.text == "SELECT id, name FROM people WHERE id = :p1"
        assert stmt.bound_values == (7,)
        assert stmt.params == {"p1": 7}

    def test_accepts_signed_literal(self):
        assert build_select_by_id("people", ["id"], "-3").bound_values == (-3,)

    @pytest.mark.parametrize("raw", ["abc", "1.5", " 1", "", "1_000", "0x10"])
    def test_rejects_non_integer(self, raw: str):
        with pytest.raises(InvalidArgument):
            build_select_by_id("people", ["id"], raw)


class TestSelectFiltered:
    def test_no_filters_equals_select_all(self):
        assert build_select_filtered("addresses", COLUMNS, []) == build_select_all(
            "addresses", COLUMNS
        )

    def test_filters_in_supplied_order(self):
        stmt = build_select_filtered(
            "addresses", COLUMNS, [("city", "London"), ("personid", "1")], quote=plain
        )
        assert stmt.text == (
            "SELECT id, personid, street, city FROM addresses "
            "WHERE city = :p1 AND personid = :p2"
        )
        assert stmt.bound_values == ("London", 1)

    def test_placeholders_match_values(self):
        filters = [("street", "x"), ("city", "y"), ("id", "3"), ("personid", "4")]
        stmt = build_select_filtered("addresses", COLUMNS, filters)
        assert stmt.placeholder_count == len(stmt.bound_values) == 4

    def test_values_are_never_interpolated(self):
        stmt = build_select_filtered("addresses", COLUMNS, [("city", "x' OR '1'='1")])
        assert "OR" not in stmt.text
        assert stmt.bound_values == ("x' OR '1'='1",)

    def test_non_numeric_id_suffix_value_rejected(self):
        with pytest.raises(InvalidArgument, match="personid"):
            build_select_filtered("addresses", COLUMNS, [("personid", "abc")])

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidArgument, match="not a column of addresses"):
            build_select_filtered("addresses", COLUMNS, [("zip", "1234")])

    @pytest.mark.parametrize(
        "key",
        ["city; DROP TABLE addresses", 'city" = city OR "1', "city--", "1=1 OR city"],
    )
    def test_adversarial_key_rejected(self, key: str):
        with pytest.raises(InvalidArgument):
            build_select_filtered("addresses", COLUMNS, [(key, "x")])

    def test_colon_in_identifier_is_not_a_placeholder(self):
        stmt = build_select_filtered("t", ["a:b", "name"], [("name", "x")])
        assert '"a\\:b"' in stmt.text
        assert stmt.placeholder_count == 1


class TestInsert:
    def test_columns_from_data_keys(self):
        stmt = build_insert("addresses", {"personid": 1, "city": "London"}, quote=plain)
        assert stmt.text == "INSERT INTO addresses (personid, city) VALUES (:p1, :p2)"
        assert stmt.bound_values == (1, "London")

    def test_returning_clause(self):
        stmt = build_insert("people", {"name": "Ada"}, returning=["id", "name"], quote=plain)
        assert stmt.text == "INSERT INTO people (name) VALUES (:p1) RETURNING id, name"

    def test_empty_data_uses_default_values(self):
        stmt = build_insert("people", {}, quote=plain)
        assert stmt.text == "INSERT INTO people DEFAULT VALUES"
        assert stmt.bound_values == ()

    def test_unknown_column_rejected(self):
        with pytest.raises(InvalidArgument, match="nickname"):
            build_insert("people", {"nickname": "x"}, columns=["id", "name"])

    def test_columns_check_is_optional(self):
        stmt = build_insert("people", {"nickname": "x"})
        assert stmt.placeholder_count == 1


def test_statement_is_hashable_value():
    assert SqlStatement("SELECT 1") == SqlStatement("SELECT 1", ())
