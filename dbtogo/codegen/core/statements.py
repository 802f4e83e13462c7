"""
SQL statement text derived from enriched table metadata.

Statements use the clean (sanitized) table and column names, one
placeholder per column, in schema column order.
"""

from enum import Enum
from typing import List

from .schema import Struct


class PlaceholderStyle(Enum):
    """Positional parameter syntax of the target SQL dialect."""

    QMARK = "qmark"  # ?, ?, ?  (MySQL, SQLite)
    DOLLAR = "dollar"  # $1, $2, $3  (PostgreSQL)
    NAMED = "named"  # :Name, :Email  (sqlx named queries)


def placeholders(columns: List[str], style: PlaceholderStyle) -> List[str]:
    """Return one placeholder token per column."""
    if style == PlaceholderStyle.DOLLAR:
        return [f"${i}" for i in range(1, len(columns) + 1)]
    if style == PlaceholderStyle.NAMED:
        return [f":{column}" for column in columns]
    return ["?"] * len(columns)


def column_names(struct: Struct) -> List[str]:
    return [f.clean_name for f in struct.fields]


def build_insert(
    struct: Struct, style: PlaceholderStyle = PlaceholderStyle.QMARK
) -> str:
    """
    Build the INSERT statement for a table.

    A table without columns yields ``INSERT INTO T () VALUES ()``.
    """
    columns = column_names(struct)
    return "INSERT INTO {} ({}) VALUES ({})".format(
        struct.clean_name,
        ",".join(columns),
        ",".join(placeholders(columns, style)),
    )


def build_select(struct: Struct) -> str:
    """Build the SELECT statement listing every column of a table."""
    return "SELECT {} FROM {}".format(",".join(column_names(struct)), struct.clean_name)
