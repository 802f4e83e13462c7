"""
Go code generator implementation.

Enriches table metadata with Go identifiers, type expressions and SQL
statement text, then renders it through a Jinja2 template.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from ....logging_config import get_logger
from ...core.config import ConfigError, GeneratorConfig
from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import CollisionPolicy
from ...core.schema import Field, Metadata, SemanticKind
from ...core.statements import PlaceholderStyle, build_insert, build_select
from ...core.templates import TemplateError
from .formatter import GoFormatter
from .naming import create_go_sanitizer, go_quote
from .types import GoTypeConfig, GoTypeMapper, NullPolicy

logger = get_logger(__name__)

# Built-in entry templates by short name
BUILTIN_TEMPLATES = {
    "output": "output.go.j2",
    "full": "full.go.j2",
}

DEFAULT_ENTRY_TEMPLATE = "output"

ACCESSOR_TEMPLATE = (
    "func (t *{name}) Args() []interface{{}} {{\n"
    "\treturn []interface{{}}{{{refs}}}\n"
    "}}"
)

# GoTypeConfig attributes that may be overridden through ``config.custom``
_TYPE_OVERRIDES = (
    "int_type",
    "float_type",
    "string_type",
    "bool_type",
    "bytes_type",
    "unknown_type",
)


def _option(enum_cls: Type[Enum], value: Any, name: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise ConfigError(f"Invalid {name}: {value!r} (choose from {choices})") from None


class GoGenerator(CodeGenerator):
    """Code generator for Go structs and SQL statement maps."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Go generator with configuration."""
        super().__init__(config)

        self.null_policy = _option(NullPolicy, self.config.null_policy, "null_policy")
        self.placeholder = _option(
            PlaceholderStyle, self.config.placeholder, "placeholder"
        )
        collision_policy = _option(
            CollisionPolicy, self.config.collision_policy, "collision_policy"
        )

        self.sanitizer = create_go_sanitizer(
            strip_underscores=self.config.strip_underscores,
            collision_policy=collision_policy,
        )

        self.type_config = self._build_type_config()
        self.type_mapper = GoTypeMapper(self.type_config)

        self.template_engine.register_helpers(self._go_helpers())
        self._user_templates: Optional[List[str]] = None

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def _build_type_config(self) -> GoTypeConfig:
        """Build GoTypeConfig from generator config."""
        type_config = GoTypeConfig(null_policy=self.null_policy)

        custom = self.config.custom
        for attr in _TYPE_OVERRIDES:
            if attr in custom:
                setattr(type_config, attr, custom[attr])

        # {"external_types": {"uuid": ["uuid.UUID", "github.com/google/uuid"]}}
        for name, mapping in custom.get("external_types", {}).items():
            expression, package = (mapping, None) if isinstance(mapping, str) else mapping
            type_config.external_types[name] = (expression, package)

        return type_config

    def _go_helpers(self) -> Dict[str, Any]:
        """Template helpers that need the type mapper."""
        return {
            "typeof": lambda f: self.type_mapper.map_field(f).name,
            "typebare": lambda f: self.type_mapper.bare_type(f).name,
            "typenull": lambda f: self.type_mapper.nullable_type(f).name,
            "typepointer": lambda f: self.type_mapper.pointer_type(f).name,
            "quote": go_quote,
        }

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    # Enrichment

    def create(self, metadata: Metadata) -> Metadata:
        """Populate every derived artifact of ``metadata``, in schema order."""
        metadata.reset_derived()
        table_names: Dict[str, str] = {}

        for struct in metadata.structs:
            struct.clean_name = self.sanitizer.resolve(
                struct.name, table_names, scope="tables"
            )

            field_names: Dict[str, str] = {}
            declaration = [f"type {struct.clean_name} struct {{"]
            references = []

            for field in struct.fields:
                field.clean_name = self.sanitizer.resolve(
                    field.name, field_names, scope=f"table '{struct.name}'"
                )

                go_type = self.type_mapper.map_field(field)
                field.type_expr = go_type.name
                metadata.imports.update(go_type.imports_needed)

                line = f"\t{field.clean_name} {go_type.name}"
                if self.config.struct_tags:
                    tag = f"sql:{go_quote(field.name)}"
                    # Raw string literals cannot hold a backtick
                    line += " " + (go_quote(tag) if "`" in tag else f"`{tag}`")
                declaration.append(line)
                references.append(f"&t.{field.clean_name}")

            declaration.append("}")
            struct.declaration = "\n".join(declaration)
            struct.accessor = ACCESSOR_TEMPLATE.format(
                name=struct.clean_name, refs=", ".join(references)
            )

            struct.insert_stmt = build_insert(struct, self.placeholder)
            struct.select_stmt = build_select(struct)

            metadata.insert_stmts.append(struct.insert_stmt)
            metadata.select_stmts.append(struct.select_stmt)
            metadata.struct_code.append(f"{struct.declaration}\n\n{struct.accessor}")

            logger.debug(
                "Table %s -> %s (%d columns)",
                struct.name,
                struct.clean_name,
                len(struct.fields),
            )

        return metadata

    # Rendering

    def _load_user_templates(self) -> List[str]:
        if self._user_templates is None:
            self._user_templates = self.template_engine.load_template_files(
                self.config.template_files
            )
        return self._user_templates

    def resolve_entry_template(self) -> str:
        """
        Pick the template that rendering starts from.

        An explicit entry name wins; user files are matched by base name and
        the built-in short names ``output`` and ``full`` are recognized. With
        no explicit name, the first user file is used, then the default
        built-in.
        """
        user_templates = self._load_user_templates()
        entry = self.config.entry_template

        if entry:
            if entry in user_templates:
                return entry
            if entry in BUILTIN_TEMPLATES:
                return BUILTIN_TEMPLATES[entry]
            if self.template_exists(entry):
                return entry
            raise TemplateError(f"Template not found: {entry}")

        if user_templates:
            return user_templates[0]

        return BUILTIN_TEMPLATES[DEFAULT_ENTRY_TEMPLATE]

    def render(self, metadata: Metadata) -> str:
        entry = self.resolve_entry_template()
        logger.info("Rendering %d tables with template %s", len(metadata.structs), entry)
        return self.render_template(entry, metadata.as_context())

    def format_code(self, code: str) -> str:
        """Run gofmt unless formatting is disabled."""
        if not self.config.format_output:
            return code
        return GoFormatter(tab_width=self.config.tab_width).format(code)

    def validate_metadata(self, metadata: Metadata) -> List[str]:
        """Validate enriched metadata for Go generation."""
        warnings = super().validate_metadata(metadata)

        for struct in metadata.structs:
            for field in struct.fields:
                if self._is_unmapped(field):
                    warnings.append(
                        f"Column {struct.name}.{field.name} has unrecognized type "
                        f"'{field.native_type or field.type}'; "
                        f"using {self.type_config.unknown_type}"
                    )

        return warnings

    def _is_unmapped(self, field: Field) -> bool:
        semantic = field.type
        while semantic.kind == SemanticKind.SEQUENCE:
            semantic = semantic.element
        return (
            semantic.kind == SemanticKind.EXTERNAL
            and semantic.name not in self.type_config.external_types
        )


def create_go_generator(
    config: Optional[GeneratorConfig] = None, **overrides: Any
) -> GoGenerator:
    """
    Create a Go generator.

    Args:
        config: Base configuration (defaults when omitted)
        **overrides: GeneratorConfig fields to replace

    Returns:
        Configured GoGenerator instance
    """
    config = config or GeneratorConfig()
    for key, value in overrides.items():
        if not hasattr(config, key):
            raise GeneratorError(f"Unknown generator option: {key}")
        setattr(config, key, value)
    return GoGenerator(config)
