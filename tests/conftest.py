"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
import sqlalchemy as sa

from dbtogo.codegen.core.config import GeneratorConfig
from dbtogo.codegen.core.schema import SemanticType, build_metadata
from dbtogo.introspect.base import RawColumn, RawTable


@pytest.fixture
def users_table() -> RawTable:
    return RawTable(
        name="users",
        columns=[
            RawColumn("id", SemanticType.integer(), "INTEGER", nullable=False),
            RawColumn("name", SemanticType.string(), "VARCHAR(50)"),
            RawColumn("email", SemanticType.string(), "TEXT"),
        ],
    )


@pytest.fixture
def posts_table() -> RawTable:
    """A table touching every semantic kind."""
    return RawTable(
        name="posts",
        columns=[
            RawColumn("id", SemanticType.integer(), "INTEGER", nullable=False),
            RawColumn("title", SemanticType.string(), "TEXT"),
            RawColumn("tags", SemanticType.sequence(SemanticType.string()), "TEXT[]"),
            RawColumn("created_at", SemanticType.external("timestamp"), "DATETIME"),
            RawColumn("body", SemanticType.binary(), "BLOB"),
            RawColumn("score", SemanticType.floating(), "REAL"),
            RawColumn("published", SemanticType.boolean(), "BOOLEAN"),
        ],
    )


@pytest.fixture
def sample_tables(users_table, posts_table):
    return [users_table, posts_table]


@pytest.fixture
def make_metadata():
    """Build fresh metadata from raw tables with fixed provenance args."""

    def _make(tables, package="model"):
        return build_metadata(
            tables,
            package=package,
            args=["dbtogo", '"sqlite3"', '"test.db"'],
            safe_args=["dbtogo", '"sqlite3"'],
        )

    return _make


@pytest.fixture
def unformatted_config() -> GeneratorConfig:
    """Configuration that skips gofmt."""
    return GeneratorConfig(format_output=False)


@pytest.fixture
def sqlite_db(tmp_path) -> Path:
    """Create a SQLite database file with two tables."""
    path = tmp_path / "test.db"
    engine = sa.create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE users ("
            "id INTEGER NOT NULL PRIMARY KEY, "
            "name VARCHAR(50), "
            "email TEXT)"
        )
        conn.exec_driver_sql(
            "CREATE TABLE posts ("
            "id INTEGER NOT NULL PRIMARY KEY, "
            "user_id INTEGER, "
            "title TEXT, "
            "score REAL, "
            "published BOOLEAN, "
            "body BLOB, "
            "created_at DATETIME, "
            "price NUMERIC(10, 2))"
        )
    engine.dispose()
    return path
