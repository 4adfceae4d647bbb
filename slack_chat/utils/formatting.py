"""Formatting and Parsing."""

import re
from datetime import datetime, timezone

from .errors import InvalidTimestamp

TIMESTAMP_PATTERN = re.compile(r"([0-9]+)(?:\.([0-9]{1,6}))?")


def validate_timestamp(ts: str):
    """Raise InvalidTimestamp unless ts looks like a Slack message timestamp."""
    if not TIMESTAMP_PATTERN.fullmatch(ts or ""):
        raise InvalidTimestamp(ts)


def normalize_timestamp(ts: str) -> str:
    """Pad the fractional part to Slack's canonical six digits.

    "1704067200" -> "1704067200.000000", "1704067200.5" -> "1704067200.500000".
    """
    match = TIMESTAMP_PATTERN.fullmatch(ts)
    if not match:
        raise InvalidTimestamp(ts)
    seconds, fraction = match.group(1), match.group(2) or ""
    return f"{seconds}.{fraction.ljust(6, '0')}"


def format_timestamp(ts: str) -> str:
    """Render a Slack timestamp as YYYY-MM-DD HH:MM (UTC)."""
    try:
        dt = datetime.fromtimestamp(float(ts), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return ts
    return dt.strftime("%Y-%m-%d %H:%M")


def truncate_text(text: str, max_len: int = 50) -> str:
    """Truncate text to max length."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def mask_token(token: str) -> str:
    """Show only the token prefix and last four characters."""
    if len(token) <= 12:
        return "*" * len(token)
    return f"{token[:5]}...{token[-4:]}"
