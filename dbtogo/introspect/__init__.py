"""
Database schema introspection.

Reads tables and columns from a live database and normalizes their types
into the backend-neutral records that code generation consumes.
"""

from .base import IntrospectionError, Introspector, RawColumn, RawTable
from .reflection import (
    MySQLIntrospector,
    PostgreSQLIntrospector,
    SQLAlchemyIntrospector,
    SQLiteIntrospector,
    classify_type,
)
from .registry import (
    IntrospectorRegistry,
    RegistryError,
    get_introspector,
    get_registry,
    list_supported_backends,
)

__all__ = [
    "IntrospectionError",
    "Introspector",
    "RawColumn",
    "RawTable",
    "SQLAlchemyIntrospector",
    "MySQLIntrospector",
    "PostgreSQLIntrospector",
    "SQLiteIntrospector",
    "classify_type",
    "IntrospectorRegistry",
    "RegistryError",
    "get_introspector",
    "get_registry",
    "list_supported_backends",
]
