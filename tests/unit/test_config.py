"""Unit tests for configuration management."""

import json

import pytest
from pydantic import ValidationError

from tagvalidator.config import (
    CONFIG_FILE_NAME,
    LoggingConfig,
    LogLevel,
    TagValidatorConfig,
    ValidatorConfig,
    find_config_file,
    load_config,
)


class TestValidatorConfig:
    """Test ValidatorConfig model."""

    def test_defaults(self):
        config = ValidatorConfig()
        assert config.tag_name == "validate"
        assert config.json_tag == "json"

    def test_aliases(self):
        config = ValidatorConfig(**{"tagName": "check", "jsonTag": "yaml"})
        assert config.tag_name == "check"
        assert config.json_tag == "yaml"

    @pytest.mark.parametrize("value", ["", " check", "check "])
    def test_invalid_tag_name(self, value):
        with pytest.raises(ValidationError):
            ValidatorConfig(tag_name=value)


class TestTagValidatorConfig:
    """Test complete TagValidatorConfig model."""

    def test_minimal_config(self):
        config = TagValidatorConfig()
        assert config.validator.tag_name == "validate"
        assert config.logging.level == LogLevel.WARNING

    def test_config_from_dict(self):
        config = TagValidatorConfig(**{
            "validator": {"tagName": "strict"},
            "logging": {"level": "debug"},
        })
        assert config.validator.tag_name == "strict"
        assert config.validator.json_tag == "json"
        assert config.logging.level == "debug"

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            TagValidatorConfig(**{"rules": {}})

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="verbose")


class TestConfigLoading:
    """Test config file loading."""

    def test_load_config_from_file(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text(json.dumps({"validator": {"tagName": "strict"}}), encoding="utf-8")

        config = load_config(config_file)

        assert config.validator.tag_name == "strict"

    def test_load_config_missing_file(self, tmp_path):
        config = load_config(tmp_path / "nope.json")
        assert config.validator.tag_name == "validate"

    def test_load_config_invalid_json(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(config_file)

    def test_load_config_invalid_values(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text(json.dumps({"validator": {"tagName": ""}}), encoding="utf-8")

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)

    def test_load_config_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / CONFIG_FILE_NAME).write_text(json.dumps({"logging": {"level": "info"}}), encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.logging.level == "info"

    def test_find_config_file_in_parent(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{}", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_file.resolve()

    def test_find_config_file_skips_directories(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{}", encoding="utf-8")
        nested = tmp_path / "a"
        (nested / CONFIG_FILE_NAME).mkdir(parents=True)

        assert find_config_file(nested) == config_file.resolve()

    def test_load_config_not_an_object(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)
