"""
Message composition for slack-chat.

Turns the user's text argument and blocks options into a validated
OutgoingMessage before anything is sent to Slack. All failures here are
input validation errors and are raised as-is.
"""

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO

from .utils.errors import (
    BlocksFileUnreadable,
    ConflictingBlocksSource,
    ConflictingStdinUsage,
    EmptyMessage,
    InvalidBlocksJSON,
    StdinUnreadable,
)
from .utils.formatting import normalize_timestamp, validate_timestamp

STDIN_SENTINEL = "-"


class Blocks:
    """A validated Block Kit payload: a well-formed JSON array.

    Block semantics are left to Slack; only the JSON shape is checked.
    """

    def __init__(self, items: list):
        self.items = items

    @classmethod
    def parse(cls, source: str) -> "Blocks":
        try:
            items = json.loads(source)
        except ValueError as e:
            raise InvalidBlocksJSON(str(e))
        if not isinstance(items, list):
            raise InvalidBlocksJSON(
                f"expected a JSON array of blocks, got {type(items).__name__}"
            )
        return cls(items)

    @classmethod
    def default_for(cls, text: str) -> "Blocks":
        """A single mrkdwn section block holding text."""
        return cls([{"type": "section", "text": {"type": "mrkdwn", "text": text}}])

    def __len__(self):
        return len(self.items)

    def __bool__(self):
        return bool(self.items)

    def __eq__(self, other):
        return isinstance(other, Blocks) and self.items == other.items

    def __repr__(self):
        return f"Blocks({self.items!r})"


@dataclass
class BlocksSource:
    """Where blocks come from: exactly one of inline JSON, a file, or stdin."""

    kind: str  # "inline" | "file" | "stdin"
    value: Optional[str] = None

    @classmethod
    def select(cls, blocks_json: str = None, blocks_file: str = None,
               blocks_stdin: bool = False) -> Optional["BlocksSource"]:
        """Pick the active source, rejecting more than one."""
        active = []
        if blocks_json:
            active.append(cls("inline", blocks_json))
        if blocks_file:
            active.append(cls("file", blocks_file))
        if blocks_stdin:
            active.append(cls("stdin"))
        if len(active) > 1:
            raise ConflictingBlocksSource()
        return active[0] if active else None

    def read(self, stdin: TextIO) -> str:
        if self.kind == "inline":
            return self.value
        if self.kind == "file":
            try:
                return Path(self.value).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise BlocksFileUnreadable("file", str(e))
        try:
            return read_lines(stdin)
        except (OSError, UnicodeDecodeError) as e:
            raise BlocksFileUnreadable("from stdin", str(e))


@dataclass
class OutgoingMessage:
    channel: str
    text: Optional[str] = None
    blocks: Optional[Blocks] = None
    thread_ts: Optional[str] = None
    unfurl_links: bool = True
    unfurl_media: bool = True
    files: List[str] = field(default_factory=list)
    file_title: Optional[str] = None

    @property
    def unfurl(self) -> bool:
        return self.unfurl_links and self.unfurl_media

    def to_params(self, channel_id: str) -> dict:
        """Render chat.postMessage parameters; text is omitted when None."""
        params = {"channel": channel_id}
        if self.text is not None:
            params["text"] = self.text
        if self.blocks is not None:
            params["blocks"] = self.blocks.items
        if self.thread_ts:
            params["thread_ts"] = self.thread_ts
        params["unfurl_links"] = self.unfurl_links
        params["unfurl_media"] = self.unfurl_media
        return params


def unescape_shell_chars(text: str) -> str:
    r"""Undo shell history escaping: "\!" becomes "!".

    Other backslash sequences are kept so Windows paths and regexes
    survive untouched.
    """
    return text.replace("\\!", "!")


def read_lines(stream: TextIO) -> str:
    """Read a whole stream line by line and join the lines with "\\n".

    Each line loses one trailing line terminator, so a final newline does
    not produce a trailing empty line.
    """
    lines = []
    for line in stream:
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        lines.append(line)
    return "\n".join(lines)


def _read_text(text: str, blocks_stdin: bool, stdin: TextIO) -> str:
    if text != STDIN_SENTINEL:
        return text
    if blocks_stdin:
        raise ConflictingStdinUsage()
    try:
        return read_lines(stdin)
    except (OSError, UnicodeDecodeError) as e:
        raise StdinUnreadable(str(e))


def _load_blocks(source: Optional[BlocksSource], stdin: TextIO) -> Optional[Blocks]:
    if source is None:
        return None
    raw = source.read(stdin)
    if raw == "":
        return None
    return Blocks.parse(raw)


def compose_message(
    channel: str,
    text: str = "",
    thread_ts: str = None,
    blocks_json: str = None,
    blocks_file: str = None,
    blocks_stdin: bool = False,
    simple: bool = False,
    no_unfurl: bool = False,
    files: List[str] = None,
    file_title: str = None,
    stdin: TextIO = None,
) -> OutgoingMessage:
    """Validate and normalize an outgoing message.

    Steps run in order and the first failure stops the rest:

    1. validate and normalize the thread timestamp
    2. reject more than one blocks source
    3. read text from stdin when it is "-"
    4. unescape shell-escaped "!"
    5. load and parse the blocks
    6. require text, blocks or files
    7. wrap plain text in a default section block unless --simple
    8. drop empty text when blocks or files carry the content
    """
    stdin = stdin if stdin is not None else sys.stdin
    files = list(files or [])
    text = text or ""

    if thread_ts:
        validate_timestamp(thread_ts)
        thread_ts = normalize_timestamp(thread_ts)

    source = BlocksSource.select(blocks_json, blocks_file, blocks_stdin)

    text = _read_text(text, blocks_stdin, stdin)
    text = unescape_shell_chars(text)

    blocks = _load_blocks(source, stdin)

    if not text and not blocks and not files:
        raise EmptyMessage()

    if files:
        # Files are shared with text as the comment; blocks are not sent.
        blocks = None
    elif blocks is None and not simple and text:
        blocks = Blocks.default_for(text)

    return OutgoingMessage(
        channel=channel,
        text=text or None,
        blocks=blocks,
        thread_ts=thread_ts or None,
        unfurl_links=not no_unfurl,
        unfurl_media=not no_unfurl,
        files=files,
        file_title=file_title or None,
    )


def compose_update(
    channel: str,
    text: str = "",
    blocks_json: str = None,
    blocks_file: str = None,
    blocks_stdin: bool = False,
    simple: bool = False,
    no_unfurl: bool = False,
    stdin: TextIO = None,
) -> OutgoingMessage:
    """Compose the new content for an edited message (chat.update)."""
    return compose_message(
        channel,
        text,
        blocks_json=blocks_json,
        blocks_file=blocks_file,
        blocks_stdin=blocks_stdin,
        simple=simple,
        no_unfurl=no_unfurl,
        stdin=stdin,
    )
