"""ID Resolution (User/Channel)."""

import logging
import re
import threading

from .const import CHANNEL_LIST_LIMIT, CHANNEL_TYPES
from .errors import ChannelNotFound, EmptyIdentifier, SlackAPIError, TransportError, wrap_error

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"<@(U[A-Z0-9]+)>")


def is_channel_id(s: str) -> bool:
    """Return True if s looks like a Slack channel ID.

    Channel IDs start with C (public), G (private/group) or D (direct
    message), followed by uppercase letters and digits, e.g. C02DF3BEUGN.
    At least one digit is required so that words like "GENERAL" are
    treated as names.
    """
    if len(s) < 2 or s[0] not in "CGD":
        return False
    has_digit = False
    for c in s[1:]:
        if "0" <= c <= "9":
            has_digit = True
        elif not "A" <= c <= "Z":
            return False
    return has_digit


def resolve_channel(client, channel: str) -> str:
    """Resolve a channel name or ID to a channel ID.

    Strings shaped like channel IDs are returned without a network call.
    Anything else is looked up by name (case-insensitive) in a single
    conversations.list call.
    """
    if channel.startswith("#"):
        channel = channel[1:]
    if not channel:
        raise EmptyIdentifier("channel")

    if is_channel_id(channel):
        return channel

    return _lookup_channel_by_name(client, channel)


def _lookup_channel_by_name(client, name: str) -> str:
    name = name.lower()
    if name.startswith("#"):
        name = name[1:]

    try:
        channels = client.list_channels(CHANNEL_TYPES, False, CHANNEL_LIST_LIMIT)
    except (SlackAPIError, TransportError) as e:
        raise wrap_error("list channels", e) from e

    for ch in channels:
        if ch.get("name", "").lower() == name:
            logger.debug(f"Resolved channel '{name}' to {ch.get('id')}")
            return ch.get("id")

    raise ChannelNotFound(name)


class KeyedCache:
    """Lock-guarded key/value cache with get-or-compute access.

    The lock covers the lookup and the insert separately; ``compute`` runs
    without it, so misses on different keys proceed in parallel. When two
    callers compute the same key, the first value inserted wins.
    """

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            return self._data.get(key)

    def get_or_compute(self, key, compute):
        with self._lock:
            if key in self._data:
                return self._data[key]

        value = compute(key)

        with self._lock:
            return self._data.setdefault(key, value)

    def __len__(self):
        with self._lock:
            return len(self._data)


def display_name_for(user: dict, fallback: str) -> str:
    """Pick profile display name, then real name, then account name."""
    profile = user.get("profile") or {}
    return (
        profile.get("display_name")
        or user.get("real_name")
        or user.get("name")
        or fallback
    )


class UserResolver:
    """Resolve user IDs to display names, caching successful lookups.

    One instance may be shared across threads.
    """

    def __init__(self, client):
        self.client = client
        self._cache = KeyedCache()

    def _lookup(self, user_id: str) -> str:
        user = self.client.get_user_info(user_id)
        return display_name_for(user, user_id)

    def resolve(self, user_id: str) -> str:
        """Return a display name for user_id, or user_id itself if lookup fails."""
        if not user_id:
            return user_id
        try:
            return self._cache.get_or_compute(user_id, self._lookup)
        except Exception as e:
            logger.debug(f"Failed to resolve user {user_id}: {e}")
            return user_id

    def resolve_mentions(self, text: str) -> str:
        """Replace <@UXXXX> mentions in text with @display-name."""

        def replace(match):
            user_id = match.group(1)
            if not user_id:
                return match.group(0)
            return "@" + self.resolve(user_id)

        return MENTION_PATTERN.sub(replace, text)
