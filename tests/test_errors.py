"""Tests for error wrapping and reporting."""

import pytest

from slack_chat.utils.errors import (
    EmptyMessage,
    OperationError,
    SlackAPIError,
    TransportError,
    UploadFinalizeFailed,
    ValidationError,
    reporting_errors,
    wrap_error,
)


def test_wrap_keeps_cause():
    cause = TransportError("chat.postMessage", "connection refused")
    wrapped = wrap_error("send message", cause)
    assert isinstance(wrapped, OperationError)
    assert str(wrapped) == "send message: request to chat.postMessage failed: connection refused"
    assert wrapped.cause is cause
    assert wrapped.__cause__ is cause
    assert wrapped.operation == "send message"


def test_wrap_adds_hint_for_known_codes():
    wrapped = wrap_error("send message", SlackAPIError("chat.postMessage", "not_in_channel"))
    assert str(wrapped).startswith("send message: Slack API error for chat.postMessage: not_in_channel (")
    assert "invite it first" in str(wrapped)


def test_wrap_unknown_code_has_no_hint():
    wrapped = wrap_error("send message", SlackAPIError("chat.postMessage", "something_new"))
    assert str(wrapped) == "send message: Slack API error for chat.postMessage: something_new"


def test_wrap_kind():
    wrapped = wrap_error("complete upload", SlackAPIError("files.completeUploadExternal", "x"), UploadFinalizeFailed)
    assert isinstance(wrapped, UploadFinalizeFailed)
    assert isinstance(wrapped, OperationError)


def test_validation_errors_are_stable_strings():
    assert isinstance(EmptyMessage(), ValidationError)
    assert str(EmptyMessage()) == (
        "message text cannot be empty (or provide blocks via --blocks, "
        "--blocks-file, --blocks-stdin, or files via --file)"
    )


def test_reporting_errors_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        with reporting_errors():
            raise EmptyMessage()
    assert exc_info.value.code == 1
    assert "❌ message text cannot be empty" in capsys.readouterr().err


def test_reporting_errors_passes_other_exceptions():
    with pytest.raises(KeyError):
        with reporting_errors():
            raise KeyError("boom")
