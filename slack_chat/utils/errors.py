"""Error types and classification for slack-chat CLI."""

import sys
from contextlib import contextmanager

from .const import CHANNELS_LIST_COMMAND


class SlackCLIError(Exception):
    """Base exception for expected CLI errors."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(SlackCLIError):
    """Raised when the API token is missing or the config file is unreadable."""


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class ValidationError(SlackCLIError):
    """User input that can never succeed; reported as-is, never wrapped."""


class EmptyIdentifier(ValidationError):
    def __init__(self, kind: str = "channel"):
        super().__init__(f"{kind} cannot be empty")


class InvalidTimestamp(ValidationError):
    def __init__(self, ts: str):
        super().__init__(
            f"invalid timestamp '{ts}': expected format 1234567890.123456"
        )
        self.ts = ts


class ConflictingBlocksSource(ValidationError):
    def __init__(self):
        super().__init__(
            "only one of --blocks, --blocks-file, or --blocks-stdin can be specified"
        )


class ConflictingStdinUsage(ValidationError):
    def __init__(self):
        super().__init__(
            "cannot use '-' for text and --blocks-stdin together; "
            "stdin can only be used for one"
        )


class BlocksFileUnreadable(ValidationError):
    def __init__(self, source: str, detail: str):
        super().__init__(f"reading blocks {source}: {detail}")
        self.source = source


class StdinUnreadable(ValidationError):
    def __init__(self, detail: str):
        super().__init__(f"reading stdin: {detail}")


class InvalidBlocksJSON(ValidationError):
    def __init__(self, detail: str):
        super().__init__(f"invalid blocks JSON: {detail}")


class EmptyMessage(ValidationError):
    def __init__(self):
        super().__init__(
            "message text cannot be empty (or provide blocks via --blocks, "
            "--blocks-file, --blocks-stdin, or files via --file)"
        )


class FileUnreadable(ValidationError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"cannot access file {path}: {detail}")
        self.path = path


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionError(SlackCLIError):
    """An identifier could not be mapped to a Slack object."""


class ChannelNotFound(ResolutionError):
    def __init__(self, name: str):
        super().__init__(
            f"channel '{name}' not found. "
            f"Use '{CHANNELS_LIST_COMMAND}' to see available channels"
        )
        self.name = name


# ---------------------------------------------------------------------------
# Transport / API
# ---------------------------------------------------------------------------


class SlackAPIError(SlackCLIError):
    """Raised for Slack API responses where ok=false."""

    def __init__(self, method: str, error: str, details: dict = None):
        super().__init__(f"Slack API error for {method}: {error}")
        self.method = method
        self.error = error
        self.details = details or {}


class TransportError(SlackCLIError):
    """Network failure or non-2xx HTTP status."""

    def __init__(self, method: str, detail: str):
        super().__init__(f"request to {method} failed: {detail}")
        self.method = method


class OperationError(SlackCLIError):
    """An external call failed while performing a named operation."""

    def __init__(self, operation: str, cause: Exception, hint: str = None):
        message = f"{operation}: {cause}"
        if hint:
            message += f" ({hint})"
        super().__init__(message)
        self.operation = operation
        self.cause = cause


class UploadSlotRequestFailed(OperationError):
    pass


class FileTransferFailed(OperationError):
    pass


class UploadFinalizeFailed(OperationError):
    pass


# Hints for Slack error codes users commonly hit
ERROR_HINTS = {
    "not_in_channel": "the bot is not a member of this channel; invite it first",
    "channel_not_found": f"check the channel ID, or run '{CHANNELS_LIST_COMMAND}'",
    "missing_scope": "the token lacks a required OAuth scope",
    "invalid_auth": "the token is invalid; run 'slack-chat config set-token'",
    "not_authed": "no token was sent; run 'slack-chat config set-token'",
    "token_revoked": "the token was revoked; run 'slack-chat config set-token'",
    "message_not_found": "no message with that timestamp exists in the channel",
    "cant_update_message": "only messages posted by this token can be edited",
    "cant_delete_message": "only messages posted by this token can be deleted",
    "already_reacted": "that reaction is already on the message",
    "no_reaction": "that reaction is not on the message",
    "is_archived": "the channel is archived",
    "name_taken": "a channel with that name already exists",
    "ratelimited": "rate limited by Slack; try again shortly",
}


def wrap_error(operation: str, err: Exception, kind: type = OperationError) -> OperationError:
    """Wrap a transport/API failure with an operation label.

    The underlying error stays reachable through ``.cause`` and ``__cause__``.
    Validation errors should be raised directly instead.
    """
    hint = None
    if isinstance(err, SlackAPIError):
        hint = ERROR_HINTS.get(err.error)
    wrapped = kind(operation, err, hint=hint)
    wrapped.__cause__ = err
    return wrapped


@contextmanager
def reporting_errors():
    """Print expected CLI errors to stderr and exit with their code."""
    try:
        yield
    except SlackCLIError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(e.exit_code)
