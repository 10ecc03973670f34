"""Tests for settings resolution and TOML config loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from deepself.config.loader import get_config_path, load_cli_settings, load_config
from deepself.config.settings import (
    DEFAULT_BASE_URL,
    DeepselfSettings,
    resolve_plugin_settings,
    settings_from_mapping,
)
from deepself.core.schema import OutputShape


class TestPluginSettings:
    def test_defaults_without_config(self):
        settings = resolve_plugin_settings(None)
        assert settings.api_key is None
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.output_shape is OutputShape.TEXT
        assert settings.request_timeout is None
        assert not settings.has_api_key

    def test_host_path_and_camel_case_keys(self):
        tree = {
            "plugins": {
                "entries": {
                    "deepself": {
                        "config": {
                            "apiKey": "sk-live",
                            "baseUrl": "https://staging/v1",
                            "outputShape": "structured",
                            "requestTimeout": "30",
                            "headers": {"X-Team": "alpha"},
                        }
                    }
                }
            }
        }
        settings = resolve_plugin_settings(tree)
        assert settings.api_key == "sk-live"
        assert settings.base_url == "https://staging/v1"
        assert settings.output_shape is OutputShape.STRUCTURED
        assert settings.request_timeout == 30.0
        assert dict(settings.extra_headers) == {"X-Team": "alpha"}

    def test_malformed_tree_falls_back_to_defaults(self):
        settings = resolve_plugin_settings({"plugins": "not a table"})
        assert settings.base_url == DEFAULT_BASE_URL

    def test_blank_key_is_missing(self):
        assert not settings_from_mapping({"api_key": "   "}).has_api_key

    def test_key_from_environment(self):
        with patch.dict(os.environ, {"MY_DEEPSELF_KEY": "sk-env"}):
            settings = settings_from_mapping({"apiKeyEnv": "MY_DEEPSELF_KEY"})
        assert settings.api_key == "sk-env"

    def test_literal_key_beats_environment(self):
        with patch.dict(os.environ, {"MY_DEEPSELF_KEY": "sk-env"}):
            settings = settings_from_mapping(
                {"api_key": "sk-literal", "api_key_env": "MY_DEEPSELF_KEY"}
            )
        assert settings.api_key == "sk-literal"

    def test_tool_output_shapes(self):
        settings = settings_from_mapping({"tool_output_shapes": {"deepself_list": "structured"}})
        assert settings.shape_for("deepself_list") is OutputShape.STRUCTURED
        assert settings.shape_for("deepself_chat") is OutputShape.TEXT

    def test_invalid_headers_rejected(self):
        with pytest.raises(ValueError):
            settings_from_mapping({"headers": ["X-Team: alpha"]})

    def test_settings_are_immutable(self):
        settings = DeepselfSettings(api_key="sk", extra_headers={"a": "b"})
        with pytest.raises(AttributeError):
            settings.api_key = "other"
        with pytest.raises(TypeError):
            settings.extra_headers["c"] = "d"

    def test_repr_masks_key(self):
        assert "sk-secret" not in repr(DeepselfSettings(api_key="sk-secret"))


class TestLoadConfig:
    def test_config_path_under_home(self):
        assert get_config_path() == Path.home() / ".config" / "deepself" / "config.toml"

    def test_missing_file_returns_defaults(self):
        assert load_config() == {"deepself": {}}

    def test_reads_deepself_table(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            '[deepself]\napi_key = "sk-file"\noutput_shape = "structured"\n'
            '[other]\nvalue = 1\n'
        )
        assert load_config(config_file) == {
            "deepself": {"api_key": "sk-file", "output_shape": "structured"}
        }

    def test_default_location_is_read(self):
        path = get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text('[deepself]\nbase_url = "https://home/v1"\n')
        assert load_config()["deepself"]["base_url"] == "https://home/v1"

    def test_invalid_toml_exits(self, tmp_path, capsys):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[deepself\napi_key = ")
        with pytest.raises(SystemExit) as exc_info:
            load_config(config_file)
        assert exc_info.value.code == 1
        assert "Invalid TOML" in capsys.readouterr().err


class TestCliSettings:
    def test_env_default_for_cli(self):
        with patch.dict(os.environ, {"DEEPSELF_API_KEY": "sk-env"}):
            settings = load_cli_settings()
        assert settings.api_key == "sk-env"
        assert "DEEPSELF_API_KEY" in settings.config_hint

    def test_overrides_skip_none(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[deepself]\nbase_url = "https://file/v1"\n')
        settings = load_cli_settings(config_file, base_url=None, output_shape="structured")
        assert settings.base_url == "https://file/v1"
        assert settings.output_shape is OutputShape.STRUCTURED
