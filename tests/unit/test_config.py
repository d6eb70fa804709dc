"""Tests for configuration and API key storage."""

import os
import stat

from src import config
from src.llm.gateway import DEFAULT_MODEL


class TestConfigFile:
    def test_config_dir_under_xdg(self, config_home):
        assert config.get_config_dir() == config_home / "docsheet"
        assert config.get_config_dir().is_dir()

    def test_load_missing(self, config_home):
        assert config.load_config() == {}

    def test_load_corrupt(self, config_home):
        config.get_config_path().write_text("{not json")
        assert config.load_config() == {}

    def test_save_is_private(self, config_home):
        config.save_config({"model": "x"})
        mode = stat.S_IMODE(os.stat(config.get_config_path()).st_mode)
        assert mode == 0o600
        assert config.load_config() == {"model": "x"}


class TestApiKey:
    def test_env_wins(self, config_home, monkeypatch):
        config.set_api_key("sk-ant-stored")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
        assert config.get_api_key() == "sk-ant-env"

    def test_stored_key(self, config_home):
        config.set_api_key("sk-ant-stored")
        assert config.get_api_key() == "sk-ant-stored"

    def test_clear(self, config_home):
        config.set_api_key("sk-ant-stored")
        config.clear_api_key()
        assert config.get_api_key() is None

    def test_login_stores_key(self, config_home, monkeypatch):
        monkeypatch.setattr(config.getpass, "getpass", lambda prompt: "sk-ant-new")
        assert config.interactive_login() is True
        assert config.get_api_key() == "sk-ant-new"

    def test_login_empty_key(self, config_home, monkeypatch):
        monkeypatch.setattr(config.getpass, "getpass", lambda prompt: "  ")
        assert config.interactive_login() is False
        assert config.get_api_key() is None


class TestSettings:
    def test_default_model(self, config_home):
        assert config.get_model() == DEFAULT_MODEL

    def test_stored_model(self, config_home):
        config.save_config({"model": "claude-haiku"})
        assert config.get_model() == "claude-haiku"

    def test_ai_enabled_by_default(self, config_home):
        assert config.is_ai_enabled() is True

    def test_ai_disabled_in_config(self, config_home):
        config.save_config({"ai_extraction": False})
        assert config.is_ai_enabled() is False

    def test_env_override(self, config_home, monkeypatch):
        monkeypatch.setenv("DOCSHEET_AI_EXTRACTION", "off")
        assert config.is_ai_enabled() is False
        monkeypatch.setenv("DOCSHEET_AI_EXTRACTION", "1")
        assert config.is_ai_enabled() is True
