"""Tests for INSERT and SELECT statement text."""

import pytest

from dbtogo.codegen.core.schema import Field, SemanticType, Struct
from dbtogo.codegen.core.statements import (
    PlaceholderStyle,
    build_insert,
    build_select,
    placeholders,
)


def _struct(clean_name, columns):
    struct = Struct(name=clean_name.lower(), clean_name=clean_name)
    for column in columns:
        struct.add_field(
            Field(name=column.lower(), type=SemanticType.string(), clean_name=column)
        )
    return struct


class TestStatements:
    @pytest.fixture
    def users(self):
        return _struct("Users", ["Id", "Name", "Email"])

    def test_insert_with_question_marks(self, users):
        assert build_insert(users) == "INSERT INTO Users (Id,Name,Email) VALUES (?,?,?)"

    def test_insert_with_dollar_placeholders(self, users):
        assert (
            build_insert(users, PlaceholderStyle.DOLLAR)
            == "INSERT INTO Users (Id,Name,Email) VALUES ($1,$2,$3)"
        )

    def test_insert_with_named_placeholders(self, users):
        assert (
            build_insert(users, PlaceholderStyle.NAMED)
            == "INSERT INTO Users (Id,Name,Email) VALUES (:Id,:Name,:Email)"
        )

    def test_select(self, users):
        assert build_select(users) == "SELECT Id,Name,Email FROM Users"

    def test_zero_fields(self):
        empty = _struct("Empty", [])
        assert build_insert(empty) == "INSERT INTO Empty () VALUES ()"
        assert build_select(empty) == "SELECT  FROM Empty"

    @pytest.mark.parametrize("style", list(PlaceholderStyle))
    def test_one_placeholder_per_column(self, style):
        columns = ["A", "B", "C", "D"]
        assert len(placeholders(columns, style)) == len(columns)

    def test_column_order_is_kept(self):
        struct = _struct("T", ["Zeta", "Alpha", "Mid"])
        assert build_select(struct) == "SELECT Zeta,Alpha,Mid FROM T"
