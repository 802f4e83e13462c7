"""
Backend-neutral introspection records and the introspector interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from ..codegen.core.schema import SemanticType


class IntrospectionError(Exception):
    """Raised when the database cannot be reached or its catalog read."""

    pass


@dataclass
class RawColumn:
    """One column as reported by the backend, with its semantic type decided."""

    name: str
    type: SemanticType
    native_type: str = ""
    nullable: bool = True


@dataclass
class RawTable:
    """One table and its columns in ordinal order."""

    name: str
    columns: List[RawColumn] = field(default_factory=list)


class Introspector(ABC):
    """Reads table and column metadata from one kind of database."""

    #: Registry name of the backend (e.g. "mysql")
    name: str = ""

    def __init__(self, dsn: str):
        if not dsn:
            raise IntrospectionError("DSN cannot be empty")
        self.dsn = dsn

    @abstractmethod
    def introspect(self) -> List[RawTable]:
        """
        Read every table of the database.

        Returns:
            Tables in backend-reported order

        Raises:
            IntrospectionError: On connection or catalog failures
        """
        pass
