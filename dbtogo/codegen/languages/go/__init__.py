"""
Go code generator module.

Generates Go structs, Args() accessors and SQL statement maps from
database metadata.
"""

from .formatter import FormatterError, GoFormatter
from .generator import BUILTIN_TEMPLATES, GoGenerator, create_go_generator
from .naming import (
    GO_RESERVED_WORDS,
    create_go_sanitizer,
    go_quote,
    is_go_identifier,
    validate_go_package_name,
)
from .types import GoType, GoTypeConfig, GoTypeMapper, NullPolicy

__all__ = [
    "GoGenerator",
    "create_go_generator",
    "BUILTIN_TEMPLATES",
    "GoFormatter",
    "FormatterError",
    "GoType",
    "GoTypeConfig",
    "GoTypeMapper",
    "NullPolicy",
    "GO_RESERVED_WORDS",
    "create_go_sanitizer",
    "go_quote",
    "is_go_identifier",
    "validate_go_package_name",
]
