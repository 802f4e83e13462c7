"""Tests for configuration loading and validation."""

import json

import pytest

from dbtogo.codegen.core.config import (
    DEFAULTS,
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
    validate_config,
)


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()

        assert config == GeneratorConfig()
        assert config.package_name == "model"
        assert config.null_policy == "bare"
        assert config.placeholder == "qmark"
        assert config.format_output is True
        assert DEFAULTS["tab_width"] == 4

    def test_file_and_overrides(self, tmp_path):
        path = tmp_path / "dbtogo.json"
        path.write_text(json.dumps({"package_name": "db", "null_policy": "null"}))

        config = load_config({"null_policy": "pointer", "struct_tags": None}, path)

        assert config.package_name == "db"
        assert config.null_policy == "pointer"
        assert config.struct_tags is False

    def test_unknown_keys_go_to_custom(self, tmp_path):
        path = tmp_path / "dbtogo.json"
        path.write_text(json.dumps({"int_type": "int", "custom": {"bool_type": "B"}}))

        config = load_config(config_file=path)

        assert config.custom == {"bool_type": "B", "int_type": "int"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_file=tmp_path / "missing.json")

    def test_not_json_suffix(self, tmp_path):
        path = tmp_path / "dbtogo.yaml"
        path.write_text("package_name: db")

        with pytest.raises(ConfigError, match="must be JSON"):
            load_config(config_file=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "dbtogo.json"
        path.write_text("{nope")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(config_file=path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "dbtogo.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError, match="JSON object"):
            load_config(config_file=path)

    def test_save_and_reload(self, tmp_path):
        manager = ConfigManager()
        config = GeneratorConfig(package_name="db", custom={"int_type": "int"})
        path = tmp_path / "saved.json"

        manager.save_config(config, path)

        saved = json.loads(path.read_text())
        assert saved["int_type"] == "int"
        assert "custom" not in saved
        assert manager.get_config(config_file=path) == config


class TestValidateConfig:
    def test_valid(self):
        assert validate_config(GeneratorConfig()) == []

    def test_invalid_values(self):
        config = GeneratorConfig(
            null_policy="maybe",
            placeholder="percent",
            collision_policy="ignore",
            tab_width=0,
        )

        assert validate_config(config) == [
            "Invalid null_policy: maybe",
            "Invalid placeholder: percent",
            "Invalid collision_policy: ignore",
            "Invalid tab_width: 0",
        ]

    @pytest.mark.parametrize(
        "name,message",
        [
            ("", "cannot be empty"),
            ("Model", "lowercase"),
            ("func", "reserved word"),
            ("my-models", "not a valid Go identifier"),
        ],
    )
    def test_package_name(self, name, message):
        errors = validate_config(GeneratorConfig(package_name=name))
        assert any(message in error for error in errors)
