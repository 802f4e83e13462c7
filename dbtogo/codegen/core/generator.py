"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .config import GeneratorConfig
from .schema import Metadata
from .templates import TemplateEngine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = TemplateEngine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing built-in templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def create(self, metadata: Metadata) -> Metadata:
        """
        Enrich metadata in place with clean names, type expressions,
        imports and statement text.

        Args:
            metadata: Metadata holding raw names and semantic types

        Returns:
            The same metadata instance, enriched
        """
        pass

    @abstractmethod
    def render(self, metadata: Metadata) -> str:
        """
        Render enriched metadata through the entry template.

        Args:
            metadata: Enriched metadata

        Returns:
            Rendered, unformatted source
        """
        pass

    def generate(self, metadata: Metadata) -> str:
        """Enrich and render in one step."""
        return self.render(self.create(metadata))

    def validate_metadata(self, metadata: Metadata) -> List[str]:
        """
        Validate metadata for structural issues.

        Language generators should override this to add language-specific validation.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for struct in metadata.structs:
            if not struct.fields:
                warnings.append(
                    f"Table '{struct.name}' has no columns; "
                    "its statements have empty column lists"
                )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        return code

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, metadata: Metadata) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Enrichment, rendering and formatting all have to succeed before a
    successful result is returned, so callers can write its code without
    further checks.

    Args:
        generator: Code generator instance
        metadata: Freshly introspected metadata

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        code = generator.generate(metadata)
        formatted_code = generator.format_code(code)
        warnings = generator.validate_metadata(metadata)

        info = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "package": metadata.package,
            "table_count": len(metadata.structs),
            "field_count": metadata.field_count(),
            "imports": metadata.sorted_imports(),
        }

        return GenerationResult(formatted_code, warnings, info)

    except Exception as e:
        logger.debug("Code generation failed", exc_info=True)
        return GenerationResult.error(str(e), exception=e)
