"""
Core metadata representation for code generation.

Holds the normalized, backend-neutral model of a database schema
(tables, columns, semantic column types) that every generator
and template operates on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class SemanticKind(Enum):
    """Normalized column categories shared by all backends."""

    BOOLEAN = "boolean"
    INTEGER = "integer"  # 64-bit integer
    FLOAT = "float"  # 64-bit float
    STRING = "string"
    BYTES = "bytes"  # byte sequence
    SEQUENCE = "sequence"  # array of some element type
    EXTERNAL = "external"  # named type defined outside the builtins


PRIMITIVE_KINDS = frozenset(
    {
        SemanticKind.BOOLEAN,
        SemanticKind.INTEGER,
        SemanticKind.FLOAT,
        SemanticKind.STRING,
    }
)

SEQUENCE_KINDS = frozenset({SemanticKind.BYTES, SemanticKind.SEQUENCE})


@dataclass(frozen=True)
class SemanticType:
    """
    Semantic descriptor of a column type.

    The kind is decided once, when the backend's structured type
    information is normalized; later stages never re-parse type names.
    """

    kind: SemanticKind
    name: str = ""  # neutral name for EXTERNAL kinds, e.g. "timestamp"
    element: Optional["SemanticType"] = None  # element type for SEQUENCE

    def __post_init__(self):
        if self.kind == SemanticKind.SEQUENCE and self.element is None:
            raise ValueError("SEQUENCE types need an element type")
        if self.kind == SemanticKind.EXTERNAL and not self.name:
            raise ValueError("EXTERNAL types need a name")

    @property
    def is_sequence(self) -> bool:
        """True for kinds that already have a natural empty value."""
        return self.kind in SEQUENCE_KINDS

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    def __str__(self) -> str:
        if self.kind == SemanticKind.SEQUENCE:
            return f"sequence<{self.element}>"
        if self.kind == SemanticKind.EXTERNAL:
            return self.name
        return self.kind.value

    # Convenience constructors

    @classmethod
    def boolean(cls) -> "SemanticType":
        return cls(SemanticKind.BOOLEAN)

    @classmethod
    def integer(cls) -> "SemanticType":
        return cls(SemanticKind.INTEGER)

    @classmethod
    def floating(cls) -> "SemanticType":
        return cls(SemanticKind.FLOAT)

    @classmethod
    def string(cls) -> "SemanticType":
        return cls(SemanticKind.STRING)

    @classmethod
    def binary(cls) -> "SemanticType":
        return cls(SemanticKind.BYTES)

    @classmethod
    def sequence(cls, element: "SemanticType") -> "SemanticType":
        return cls(SemanticKind.SEQUENCE, element=element)

    @classmethod
    def external(cls, name: str) -> "SemanticType":
        return cls(SemanticKind.EXTERNAL, name=name)


@dataclass
class Field:
    """Represents a single database column."""

    name: str  # raw column identifier as reported by the backend
    type: SemanticType
    native_type: str = ""  # backend type text, for diagnostics
    nullable: bool = True

    # Filled by enrichment
    clean_name: str = ""
    type_expr: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Field name cannot be empty")


@dataclass
class Struct:
    """Represents a single database table."""

    name: str
    fields: List[Field] = field(default_factory=list)

    # Filled by enrichment
    clean_name: str = ""
    insert_stmt: str = ""
    select_stmt: str = ""
    declaration: str = ""
    accessor: str = ""

    def add_field(self, field: Field) -> None:
        """Append a column, keeping schema order."""
        self.fields.append(field)

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by raw name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class Metadata:
    """Whole-run context handed to the template renderer."""

    args: List[str] = field(default_factory=list)
    safe_args: List[str] = field(default_factory=list)
    package: str = "model"
    structs: List[Struct] = field(default_factory=list)

    # Filled by enrichment
    imports: Set[str] = field(default_factory=set)
    insert_stmts: List[str] = field(default_factory=list)
    select_stmts: List[str] = field(default_factory=list)
    struct_code: List[str] = field(default_factory=list)

    @property
    def tables(self) -> List[Struct]:
        """Alias of ``structs`` for templates that speak in tables."""
        return self.structs

    def reset_derived(self) -> None:
        """Drop everything enrichment computes so it can run again."""
        self.imports = set()
        self.insert_stmts = []
        self.select_stmts = []
        self.struct_code = []

    def sorted_imports(self) -> List[str]:
        return sorted(self.imports)

    def field_count(self) -> int:
        return sum(len(s.fields) for s in self.structs)

    def as_context(self) -> Dict[str, Any]:
        """Build the variable namespace exposed to templates."""
        return {
            "metadata": self,
            "args": list(self.args),
            "safe_args": list(self.safe_args),
            "package": self.package,
            "structs": self.structs,
            "tables": self.structs,
            "imports": self.sorted_imports(),
            "insert_stmts": list(self.insert_stmts),
            "select_stmts": list(self.select_stmts),
            "struct_code": list(self.struct_code),
        }


def build_metadata(
    tables: List[Any],
    package: str = "model",
    args: Optional[List[str]] = None,
    safe_args: Optional[List[str]] = None,
) -> Metadata:
    """
    Convert introspected tables into a fresh Metadata instance.

    Args:
        tables: Ordered ``RawTable`` records from a backend introspector
        package: Target Go package name
        args: Invoking command line, already quoted for display
        safe_args: Command line with sensitive arguments removed

    Returns:
        Metadata with raw names and semantic types populated
    """
    args = list(args or [])
    metadata = Metadata(
        args=args,
        safe_args=list(safe_args) if safe_args is not None else list(args),
        package=package,
    )

    for table in tables:
        struct = Struct(name=table.name)
        for column in table.columns:
            struct.add_field(
                Field(
                    name=column.name,
                    type=column.type,
                    native_type=column.native_type,
                    nullable=column.nullable,
                )
            )
        metadata.structs.append(struct)

    return metadata
