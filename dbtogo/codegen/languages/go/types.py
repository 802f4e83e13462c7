"""
Go-specific type system for code generation.

Maps semantic column types onto Go type expressions under a
selectable nullability policy.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ...core.schema import Field, SemanticKind, SemanticType


class NullPolicy(Enum):
    """How a column that may hold no value is represented."""

    BARE = "bare"  # plain Go type, caller knows columns are NOT NULL
    NULL = "null"  # database/sql Null* wrappers, pointers for the rest
    POINTER = "pointer"  # pointer to every non-sequence type


SQL_IMPORT = "database/sql"


@dataclass(frozen=True)
class GoType:
    """
    Immutable representation of a Go type expression.

    Carries the rendered expression together with the packages
    that must be imported for it to compile.
    """

    name: str  # The Go type expression (e.g., "int64", "*time.Time")
    base_name: str = field(default="")  # Expression without pointer
    is_pointer: bool = field(default=False)
    is_sequence: bool = field(default=False)  # slice types are exempt from wrapping
    imports_needed: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        """Set base_name if not provided."""
        if not self.base_name:
            object.__setattr__(self, "base_name", self.name.lstrip("*"))

    def __str__(self) -> str:
        return self.name

    def as_pointer(self) -> "GoType":
        """Return a pointer version of this type."""
        if self.is_pointer:
            return self

        return GoType(
            name=f"*{self.name}",
            base_name=self.base_name,
            is_pointer=True,
            is_sequence=self.is_sequence,
            imports_needed=self.imports_needed,
        )

    def with_imports(self, *imports: str) -> "GoType":
        return GoType(
            name=self.name,
            base_name=self.base_name,
            is_pointer=self.is_pointer,
            is_sequence=self.is_sequence,
            imports_needed=self.imports_needed | frozenset(imports),
        )


@dataclass
class GoTypeConfig:
    """Configuration for Go type mapping behavior."""

    # Scalar types
    int_type: str = "int64"
    float_type: str = "float64"
    string_type: str = "string"
    bool_type: str = "bool"
    bytes_type: str = "[]byte"

    # Named external types: neutral name -> (Go expression, import path)
    external_types: Dict[str, Tuple[str, Optional[str]]] = field(
        default_factory=lambda: {
            "timestamp": ("time.Time", "time"),
            "interval": ("time.Duration", "time"),
            "json": ("json.RawMessage", "encoding/json"),
        }
    )

    # Fallback for external names nobody configured
    unknown_type: str = "interface{}"

    # database/sql wrappers for the primitive kinds
    null_types: Dict[SemanticKind, str] = field(
        default_factory=lambda: {
            SemanticKind.BOOLEAN: "sql.NullBool",
            SemanticKind.FLOAT: "sql.NullFloat64",
            SemanticKind.INTEGER: "sql.NullInt64",
            SemanticKind.STRING: "sql.NullString",
        }
    )

    null_policy: NullPolicy = NullPolicy.BARE


class GoTypeMapper:
    """
    Central engine for mapping semantic column types to Go types.

    The mapper is stateless apart from its configuration; import
    registration is left to the caller through ``GoType.imports_needed``.
    """

    def __init__(self, config: Optional[GoTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or GoTypeConfig()
        self._primitive_types = self._build_primitive_type_map()

    def _build_primitive_type_map(self) -> Dict[SemanticKind, GoType]:
        """Build mapping of scalar kinds to Go types."""
        return {
            SemanticKind.BOOLEAN: GoType(name=self.config.bool_type),
            SemanticKind.INTEGER: GoType(name=self.config.int_type),
            SemanticKind.FLOAT: GoType(name=self.config.float_type),
            SemanticKind.STRING: GoType(name=self.config.string_type),
            SemanticKind.BYTES: GoType(name=self.config.bytes_type, is_sequence=True),
        }

    @property
    def policy(self) -> NullPolicy:
        return self.config.null_policy

    def map_field(self, field: Field, policy: Optional[NullPolicy] = None) -> GoType:
        """
        Map a column to a Go type.

        Args:
            field: The column to map
            policy: Override of the configured null policy

        Returns:
            GoType with expression and required imports
        """
        return self.map_type(field.type, policy)

    def map_type(
        self, semantic: SemanticType, policy: Optional[NullPolicy] = None
    ) -> GoType:
        """Map a semantic type under ``policy`` (defaults to the configured one)."""
        policy = policy or self.config.null_policy
        base_type = self.bare(semantic)

        # Sequences already have a natural empty value
        if base_type.is_sequence:
            return base_type

        if policy == NullPolicy.NULL:
            wrapper = self.config.null_types.get(semantic.kind)
            if wrapper:
                return GoType(name=wrapper, imports_needed=frozenset({SQL_IMPORT}))
            return base_type.as_pointer()
        elif policy == NullPolicy.POINTER:
            return base_type.as_pointer()

        return base_type

    def bare(self, semantic: SemanticType) -> GoType:
        """Map the base type without considering nullability."""
        if semantic.kind in self._primitive_types:
            return self._primitive_types[semantic.kind]

        elif semantic.kind == SemanticKind.SEQUENCE:
            element = self.bare(semantic.element)
            return GoType(
                name=f"[]{element.name}",
                is_sequence=True,
                imports_needed=element.imports_needed,
            )

        elif semantic.kind == SemanticKind.EXTERNAL:
            return self._map_external(semantic.name)

        raise ValueError(f"Unsupported semantic kind: {semantic.kind}")

    def _map_external(self, name: str) -> GoType:
        expression, package = self.config.external_types.get(
            name, (self.config.unknown_type, None)
        )
        imports = frozenset({package}) if package else frozenset()
        return GoType(name=expression, imports_needed=imports)

    # Fixed-policy shortcuts used by template helpers

    def bare_type(self, field: Field) -> GoType:
        return self.map_field(field, NullPolicy.BARE)

    def nullable_type(self, field: Field) -> GoType:
        return self.map_field(field, NullPolicy.NULL)

    def pointer_type(self, field: Field) -> GoType:
        return self.map_field(field, NullPolicy.POINTER)

    def get_all_imports(self, types: List[GoType]) -> Set[str]:
        """Extract all unique imports needed for a list of types."""
        imports = set()
        for go_type in types:
            imports.update(go_type.imports_needed)
        return imports
