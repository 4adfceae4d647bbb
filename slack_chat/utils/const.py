"""Constants for slack-chat CLI."""

from pathlib import Path

SLACK_API_URL = "https://slack.com/api"
API_URL_ENV_VAR = "SLACK_API_URL"
TOKEN_ENV_VAR = "SLACK_API_TOKEN"
CONFIG_DIR_ENV_VAR = "SLACK_CHAT_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "slack-chat"
CONFIG_FILE_NAME = "config.yaml"

CHANNEL_TYPES = "public_channel,private_channel"
CHANNEL_LIST_LIMIT = 1000
CHANNELS_LIST_COMMAND = "slack-chat channels list"
