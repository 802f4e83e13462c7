"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import copy
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


NULL_POLICIES = ("bare", "null", "pointer")
PLACEHOLDER_STYLES = ("qmark", "dollar", "named")
COLLISION_POLICIES = ("error", "suffix")


@dataclass
class GeneratorConfig:
    """Options controlling one generation run."""

    # Output settings
    output_file: Optional[str] = None
    package_name: str = "model"

    # Type and naming policy
    null_policy: str = "bare"  # bare, null, pointer
    strip_underscores: bool = False
    struct_tags: bool = False
    collision_policy: str = "error"  # error, suffix

    # Statement dialect
    placeholder: str = "qmark"  # qmark, dollar, named

    # Templates
    template_files: List[str] = field(default_factory=list)
    entry_template: Optional[str] = None

    # Formatting
    format_output: bool = True
    tab_width: int = 4

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


DEFAULTS: Dict[str, Any] = asdict(GeneratorConfig())


class ConfigManager:
    """Merges defaults, a JSON configuration file and explicit overrides."""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        self._defaults = dict(defaults or DEFAULTS)

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Later sources win: defaults, then the file, then ``custom_config``.
        ``None`` values in ``custom_config`` are ignored so unset CLI flags
        do not mask file settings.

        Args:
            custom_config: Explicit overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = copy.deepcopy(self._defaults)

        if config_file:
            file_config = self._load_config_file(config_file)
            logger.debug("Loaded %d settings from %s", len(file_config), config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(
                {k: v for k, v in custom_config.items() if v is not None}
            )

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys are kept for language-specific consumers
        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e


def validate_config(config: GeneratorConfig) -> List[str]:
    """
    Validate a configuration.

    Returns:
        List of validation errors (empty if valid)
    """
    from ..languages.go.naming import validate_go_package_name

    errors = []

    if config.null_policy not in NULL_POLICIES:
        errors.append(f"Invalid null_policy: {config.null_policy}")

    if config.placeholder not in PLACEHOLDER_STYLES:
        errors.append(f"Invalid placeholder: {config.placeholder}")

    if config.collision_policy not in COLLISION_POLICIES:
        errors.append(f"Invalid collision_policy: {config.collision_policy}")

    if not isinstance(config.tab_width, int) or config.tab_width < 1:
        errors.append(f"Invalid tab_width: {config.tab_width}")

    errors.extend(validate_go_package_name(config.package_name))

    return errors


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Explicit overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return ConfigManager().get_config(custom_config, config_file)
