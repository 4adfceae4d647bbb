"""Utility functions for slack-chat CLI."""

from .const import (
    SLACK_API_URL,
    TOKEN_ENV_VAR,
    CHANNEL_TYPES,
    CHANNEL_LIST_LIMIT,
    CHANNELS_LIST_COMMAND,
)

from .api import (
    SlackClient,
    get_client,
)

from .errors import (
    SlackCLIError,
    ValidationError,
    ResolutionError,
    SlackAPIError,
    TransportError,
    OperationError,
    wrap_error,
    reporting_errors,
)

from .resolution import (
    is_channel_id,
    resolve_channel,
    KeyedCache,
    UserResolver,
)

from .formatting import (
    validate_timestamp,
    normalize_timestamp,
    format_timestamp,
    truncate_text,
    mask_token,
)
