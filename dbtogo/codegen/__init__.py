"""
dbtogo Code Generation Module

Turns introspected database metadata into Go source code.
"""

from .core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
    validate_config,
)
from .core.generator import (
    CodeGenerator,
    GenerationResult,
    GeneratorError,
    generate_code,
)
from .core.schema import Field, Metadata, SemanticKind, SemanticType, Struct, build_metadata
from .core.templates import TemplateError
from .languages.go import FormatterError, GoGenerator, create_go_generator


def generate_from_tables(tables, config=None, args=None, safe_args=None):
    """
    Generate Go code from introspected tables.

    Args:
        tables: ``RawTable`` records from an introspector
        config: GeneratorConfig (defaults when omitted)
        args: Invoking command line for the provenance comment
        safe_args: ``args`` without sensitive entries

    Returns:
        GenerationResult with generated code
    """
    config = config or GeneratorConfig()
    metadata = build_metadata(
        tables, package=config.package_name, args=args, safe_args=safe_args
    )
    return generate_code(GoGenerator(config), metadata)


__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "generate_code",
    "generate_from_tables",
    "Field",
    "Metadata",
    "SemanticKind",
    "SemanticType",
    "Struct",
    "build_metadata",
    "ConfigError",
    "ConfigManager",
    "GeneratorConfig",
    "load_config",
    "validate_config",
    "TemplateError",
    "FormatterError",
    "GoGenerator",
    "create_go_generator",
]
