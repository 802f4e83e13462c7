"""
Template engine wrapper for code generation.

Provides a Jinja2 environment preloaded with the helper functions that
generated-code templates rely on: case conversion, inflection,
identifier hygiene and small integer arithmetic.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import jinja2
from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    pass_context,
)
from jinja2.runtime import Context

from ...logging_config import get_logger
from .inflection import Inflector
from .naming import capitalize, nounderscore

logger = get_logger(__name__)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


def build_helpers(inflector: Inflector) -> Dict[str, Callable[..., Any]]:
    """
    Build the helper namespace bound to one inflector.

    The ``add*`` registry helpers mutate ``inflector`` and return an
    empty string so templates can call them as statements.

    Helpers bound to ``inflector`` take the render context, so Jinja2
    evaluates them while rendering and never at compile time.
    """

    def at_render(func: Callable[..., Any]) -> Callable[..., Any]:
        @pass_context
        def wrapper(_context: Context, *args: Any, **kwargs: Any) -> Any:
            return func(*args, **kwargs)

        wrapper.__name__ = func.__name__
        return wrapper

    def registry_call(func: Callable[..., None]) -> Callable[..., str]:
        def wrapper(*args: str) -> str:
            func(*args)
            return ""

        wrapper.__name__ = func.__name__
        return at_render(wrapper)

    def join(items: Iterable[Any], sep: str = "") -> str:
        return sep.join(str(item) for item in items)

    return {
        "tolower": lambda s: str(s).lower(),
        "join": join,
        "capitalize": capitalize,
        "nounderscore": nounderscore,
        "underscore": at_render(inflector.underscore),
        "camelize": at_render(inflector.camelize),
        "camelizedownfirst": at_render(inflector.camelize_down_first),
        "pluralize": at_render(inflector.pluralize),
        "singularize": at_render(inflector.singularize),
        "tableize": at_render(inflector.tableize),
        "typeify": at_render(inflector.typeify),
        "humanize": at_render(inflector.humanize),
        "addacronym": registry_call(inflector.add_acronym),
        "addhuman": registry_call(inflector.add_human),
        "addirregular": registry_call(inflector.add_irregular),
        "addplural": registry_call(inflector.add_plural),
        "addsingular": registry_call(inflector.add_singular),
        "adduncountable": registry_call(inflector.add_uncountable),
        "add": lambda x, y: int(x) + int(y),
        "sub": lambda x, y: int(x) - int(y),
    }


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        inflector: Optional[Inflector] = None,
    ):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing built-in template files
            inflector: Inflection rule set; a fresh one is created when omitted
        """
        self.template_dir = template_dir
        self.inflector = inflector or Inflector()
        self._user_templates: Dict[str, str] = {}
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        loaders = [DictLoader(self._user_templates)]
        if self.template_dir and self.template_dir.exists():
            loaders.append(FileSystemLoader(str(self.template_dir)))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        self.register_helpers(build_helpers(self.inflector))

    @property
    def environment(self) -> Environment:
        return self._env

    def register_helpers(self, helpers: Dict[str, Callable[..., Any]]) -> None:
        """Expose helpers both as filters (``x|name``) and functions (``name(x)``)."""
        self._env.filters.update(helpers)
        self._env.globals.update(helpers)

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        self._user_templates[name] = content

    def load_template_files(self, paths: List[str | Path]) -> List[str]:
        """
        Load and compile user template files.

        Every file is registered under its base name and parsed eagerly, so
        a syntax error in any of them is reported before rendering begins.

        Args:
            paths: Template file paths

        Returns:
            Registered template names, in the order given

        Raises:
            TemplateError: If a file cannot be read or parsed
        """
        names = []
        for path in paths:
            path = Path(path)
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                raise TemplateError(f"Failed to read template {path}: {e}") from e

            self.add_template(path.name, content)
            names.append(path.name)
            logger.debug("Loaded template %s from %s", path.name, path)

        for name in names:
            try:
                self._env.get_template(name)
            except jinja2.TemplateSyntaxError as e:
                raise TemplateError(
                    f"Failed to parse template {name} (line {e.lineno}): {e.message}"
                ) from e

        return names

    def template_exists(self, name: str) -> bool:
        """Check if a template exists."""
        try:
            self._env.get_template(name)
        except jinja2.TemplateNotFound:
            return False
        except jinja2.TemplateSyntaxError:
            # Exists, but broken; rendering will report it
            return True
        return True

    def list_templates(self) -> List[str]:
        return sorted(self._env.list_templates())

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(f"Template not found: {e.name}") from e
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(
                f"Failed to parse template {template_name} (line {e.lineno}): {e.message}"
            ) from e
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            template = self._env.from_string(template_string)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template string: {e}") from e
