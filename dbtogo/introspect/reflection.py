"""
Schema introspection through SQLAlchemy reflection.

Each backend accepts the DSN its native Go driver would (``user:pass@tcp(host:port)/db``
for MySQL, libpq key/value strings for PostgreSQL, a file path for SQLite)
as well as any full SQLAlchemy URL.
"""

import datetime
import decimal
import re
import shlex
from pathlib import Path
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, SQLAlchemyError
from sqlalchemy.types import NullType, TypeEngine

from ..codegen.core.schema import SemanticType
from ..logging_config import get_logger
from .base import IntrospectionError, Introspector, RawColumn, RawTable

logger = get_logger(__name__)

_BINARY_TYPES = (sa.LargeBinary, sa.BINARY, sa.VARBINARY)
_TIME_TYPES = (sa.Date, sa.DateTime, sa.Time)

# Fallback when only the Python-side type is known
_PYTHON_TYPES = [
    (bool, SemanticType.boolean()),
    (int, SemanticType.integer()),
    ((float, decimal.Decimal), SemanticType.floating()),
    (str, SemanticType.string()),
    ((bytes, bytearray, memoryview), SemanticType.binary()),
    ((datetime.date, datetime.time), SemanticType.external("timestamp")),
    (datetime.timedelta, SemanticType.external("interval")),
]


def classify_type(type_: TypeEngine) -> SemanticType:
    """Decide the semantic kind of a reflected column type."""
    if isinstance(type_, sa.ARRAY):
        return SemanticType.sequence(classify_type(type_.item_type))
    if isinstance(type_, sa.Boolean):
        return SemanticType.boolean()
    if isinstance(type_, sa.Integer):
        return SemanticType.integer()
    if isinstance(type_, sa.Numeric):
        return SemanticType.floating()
    if isinstance(type_, _BINARY_TYPES) or isinstance(type_, NullType):
        return SemanticType.binary()
    if isinstance(type_, _TIME_TYPES):
        return SemanticType.external("timestamp")
    if isinstance(type_, sa.Interval):
        return SemanticType.external("interval")
    if isinstance(type_, sa.JSON):
        return SemanticType.external("json")
    if isinstance(type_, (sa.String, sa.Enum, sa.Uuid)):
        return SemanticType.string()

    try:
        python_type = type_.python_type
    except NotImplementedError:
        return SemanticType.binary()

    for candidates, semantic in _PYTHON_TYPES:
        if issubclass(python_type, candidates):
            return semantic
    return SemanticType.binary()


class SQLAlchemyIntrospector(Introspector):
    """Reflects every table of a database with ``sqlalchemy.inspect``."""

    #: SQLAlchemy dialect+driver used for native DSNs
    driver: str = ""
    #: Optional dependency group that installs the driver
    extra: str = ""

    def url(self) -> URL:
        """Translate the DSN into a SQLAlchemy URL."""
        if "://" in self.dsn:
            return make_url(self.dsn)
        return self.translate_dsn(self.dsn)

    def translate_dsn(self, dsn: str) -> URL:
        raise IntrospectionError(f"Unsupported DSN for {self.name}: {dsn}")

    def create_engine(self) -> Engine:
        try:
            url = self.url()
        except (ArgumentError, ValueError) as e:
            raise IntrospectionError(f"Invalid {self.name} DSN: {e}") from e
        logger.debug("Connecting to %s", url.render_as_string(hide_password=True))
        try:
            return sa.create_engine(url)
        except ImportError as e:
            hint = f"; install dbtogo[{self.extra}]" if self.extra else ""
            raise IntrospectionError(
                f"Database driver {e.name or url.drivername!r} is not installed{hint}"
            ) from e
        except SQLAlchemyError as e:
            raise IntrospectionError(str(e)) from e

    def introspect(self) -> List[RawTable]:
        engine = self.create_engine()
        try:
            inspector = sa.inspect(engine)
            tables = []
            for table_name in inspector.get_table_names():
                columns = [
                    RawColumn(
                        name=column["name"],
                        type=classify_type(column["type"]),
                        native_type=self._native_name(column["type"], engine),
                        nullable=column.get("nullable", True),
                    )
                    for column in inspector.get_columns(table_name)
                ]
                logger.debug("Reflected %s with %d columns", table_name, len(columns))
                tables.append(RawTable(name=table_name, columns=columns))
            return tables
        except DBAPIError as e:
            raise IntrospectionError(str(e.orig)) from e
        except SQLAlchemyError as e:
            raise IntrospectionError(str(e)) from e
        finally:
            engine.dispose()

    @staticmethod
    def _native_name(type_: TypeEngine, engine: Engine) -> str:
        try:
            return type_.compile(dialect=engine.dialect)
        except SQLAlchemyError:
            return type(type_).__name__


def _parse_port(text: str, backend: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise IntrospectionError(f"Invalid port in {backend} DSN: {text!r}") from None


_GO_MYSQL_DSN = re.compile(
    r"^(?:(?P<user>[^:@]*)(?::(?P<password>.*))?@)?"
    r"(?:(?P<net>\w+)(?:\((?P<address>[^)]*)\))?)?"
    r"/(?P<database>[^?]*)(?:\?(?P<params>.*))?$"
)


class MySQLIntrospector(SQLAlchemyIntrospector):
    name = "mysql"
    driver = "mysql+pymysql"
    extra = "mysql"

    def translate_dsn(self, dsn: str) -> URL:
        """``user:pass@tcp(host:port)/db?params`` -> ``mysql+pymysql://...``"""
        match = _GO_MYSQL_DSN.match(dsn)
        if not match:
            raise IntrospectionError(f"Invalid MySQL DSN: {dsn}")

        host: Optional[str] = None
        port: Optional[int] = None
        query = {}
        address = match.group("address") or ""
        if match.group("net") == "unix":
            query["unix_socket"] = address
        elif address:
            host, sep, port_text = address.rpartition(":")
            if not sep:
                host, port_text = address, ""
            port = _parse_port(port_text, self.name) if port_text else None

        if match.group("params"):
            # Go driver options such as parseTime have no pymysql equivalent
            logger.debug("Ignoring MySQL DSN parameters: %s", match.group("params"))

        return URL.create(
            self.driver,
            username=match.group("user") or None,
            password=match.group("password"),
            host=host,
            port=port,
            database=match.group("database") or None,
            query=query,
        )


_LIBPQ_FIELDS = {
    "user": "username",
    "password": "password",
    "host": "host",
    "port": "port",
    "dbname": "database",
}


class PostgreSQLIntrospector(SQLAlchemyIntrospector):
    name = "postgresql"
    driver = "postgresql+psycopg2"
    extra = "postgresql"

    def url(self) -> URL:
        # libpq accepts the postgres:// scheme, SQLAlchemy does not
        if self.dsn.startswith("postgres://"):
            return make_url("postgresql://" + self.dsn[len("postgres://") :])
        return super().url()

    def translate_dsn(self, dsn: str) -> URL:
        """``host=h user=u dbname=d sslmode=disable`` -> ``postgresql+psycopg2://...``"""
        try:
            pairs = shlex.split(dsn)
        except ValueError as e:
            raise IntrospectionError(f"Invalid PostgreSQL DSN: {e}") from e

        fields = {}
        query = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep:
                raise IntrospectionError(f"Invalid PostgreSQL DSN entry: {pair}")
            if key in _LIBPQ_FIELDS:
                fields[_LIBPQ_FIELDS[key]] = value
            else:
                query[key] = value

        if "port" in fields:
            fields["port"] = _parse_port(fields["port"], self.name)

        return URL.create(self.driver, query=query, **fields)


class SQLiteIntrospector(SQLAlchemyIntrospector):
    name = "sqlite3"
    driver = "sqlite"

    def translate_dsn(self, dsn: str) -> URL:
        """A database file path, or a ``file:`` URI."""
        if dsn.startswith("file:"):
            return URL.create(self.driver, database=dsn, query={"uri": "true"})
        if dsn != ":memory:" and not Path(dsn).exists():
            # sqlite would silently create an empty database
            raise IntrospectionError(f"SQLite database not found: {dsn}")
        return URL.create(self.driver, database=dsn)
