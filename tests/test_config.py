"""Tests for token configuration."""

import stat

import pytest
import yaml

from slack_chat import config
from slack_chat.utils.errors import ConfigError


def test_no_token():
    assert config.find_token() == (None, None)
    with pytest.raises(ConfigError):
        config.get_token()


def test_env_token_wins(monkeypatch):
    config.set_token("xoxb-file")
    monkeypatch.setenv("SLACK_API_TOKEN", "xoxb-env")
    assert config.find_token() == ("xoxb-env", "env")


def test_set_and_get(config_dir):
    config.set_token("  xoxb-file\n")
    assert config.get_token() == "xoxb-file"

    config_file = config_dir / "config.yaml"
    assert yaml.safe_load(config_file.read_text()) == {"token": "xoxb-file"}
    assert stat.S_IMODE(config_file.stat().st_mode) == 0o600
    assert config.find_token() == ("xoxb-file", str(config_file))


def test_set_empty_token():
    with pytest.raises(ConfigError):
        config.set_token("   ")


def test_delete_token(config_dir):
    config.save_config({"token": "xoxb-file", "other": 1})
    assert config.delete_token() is True
    assert config.load_config() == {"other": 1}
    assert config.delete_token() is False


def test_unreadable_config(config_dir):
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text("token: [unclosed")
    with pytest.raises(ConfigError, match="could not read"):
        config.load_config()


def test_config_must_be_mapping(config_dir):
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ConfigError, match="mapping"):
        config.load_config()
