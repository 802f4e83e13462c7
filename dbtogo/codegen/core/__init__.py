"""
Core code generation components.

Provides the metadata model and the language-neutral pieces every
generator builds on.
"""

from .config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
    validate_config,
)
from .generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .inflection import Inflector
from .naming import (
    CollisionPolicy,
    NameCollisionError,
    NameSanitizer,
    capitalize,
    nounderscore,
)
from .schema import (
    Field,
    Metadata,
    SemanticKind,
    SemanticType,
    Struct,
    build_metadata,
)
from .statements import PlaceholderStyle, build_insert, build_select
from .templates import TemplateEngine, TemplateError, build_helpers

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Metadata model
    "Field",
    "Metadata",
    "SemanticKind",
    "SemanticType",
    "Struct",
    "build_metadata",
    # Naming utilities - language-agnostic
    "CollisionPolicy",
    "NameCollisionError",
    "NameSanitizer",
    "capitalize",
    "nounderscore",
    # Statements
    "PlaceholderStyle",
    "build_insert",
    "build_select",
    # Configuration system
    "ConfigError",
    "ConfigManager",
    "GeneratorConfig",
    "load_config",
    "validate_config",
    # Template system
    "Inflector",
    "TemplateEngine",
    "TemplateError",
    "build_helpers",
]
