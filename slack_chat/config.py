"""
Configuration for slack-chat.

The API token comes from the SLACK_API_TOKEN environment variable or from
config.yaml in the config directory (~/.config/slack-chat by default,
overridable with SLACK_CHAT_CONFIG_DIR).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .utils.const import CONFIG_DIR_ENV_VAR, CONFIG_FILE_NAME, DEFAULT_CONFIG_DIR, TOKEN_ENV_VAR
from .utils.errors import ConfigError

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    return Path(override) if override else DEFAULT_CONFIG_DIR


def get_config_file() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def load_config() -> Dict[str, Any]:
    """Load config from disk, returning an empty dict if missing."""
    config_file = get_config_file()
    if not config_file.exists():
        return {}
    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"could not read {config_file}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a mapping")
    return data


def save_config(config: Dict[str, Any]):
    """Persist config to disk, creating the directory as needed."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    # Token file should only be readable by its owner
    os.chmod(config_file, 0o600)
    logger.debug(f"Wrote {config_file}")


def find_token() -> Tuple[Optional[str], Optional[str]]:
    """Return (token, source) where source is "env" or the config file path."""
    token = os.environ.get(TOKEN_ENV_VAR)
    if token:
        return token, "env"
    token = load_config().get("token")
    if token:
        return token, str(get_config_file())
    return None, None


def get_token() -> str:
    token, _ = find_token()
    if not token:
        raise ConfigError(
            f"no API token configured. Set {TOKEN_ENV_VAR} or run "
            "'slack-chat config set-token'"
        )
    return token


def set_token(token: str):
    token = token.strip()
    if not token:
        raise ConfigError("token cannot be empty")
    config = load_config()
    config["token"] = token
    save_config(config)


def delete_token() -> bool:
    """Remove the stored token. Returns False if none was stored."""
    config = load_config()
    if "token" not in config:
        return False
    del config["token"]
    save_config(config)
    return True
