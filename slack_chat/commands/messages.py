"""Message commands: send, update, delete, react, history, thread."""

import typer
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from ..compose import compose_message, compose_update
from ..output import get_output
from ..upload import upload_and_share
from ..utils import (
    SlackAPIError,
    TransportError,
    UserResolver,
    format_timestamp,
    get_client,
    reporting_errors,
    resolve_channel,
    truncate_text,
    validate_timestamp,
    normalize_timestamp,
    wrap_error,
)

app = typer.Typer(help="Message operations")

HISTORY_WORKERS = 8


def _message_ts(ts: str) -> str:
    validate_timestamp(ts)
    return normalize_timestamp(ts)


@app.command("send")
def send(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    text: str = typer.Argument("", help="Message text, or '-' to read it from stdin"),
    thread: Optional[str] = typer.Option(None, "--thread", help="Thread timestamp for reply"),
    blocks: Optional[str] = typer.Option(None, "--blocks", help="Inline Block Kit JSON array (for simple blocks)"),
    blocks_file: Optional[str] = typer.Option(
        None, "--blocks-file", help="Read blocks from JSON file (recommended for complex payloads)"
    ),
    blocks_stdin: bool = typer.Option(False, "--blocks-stdin", help="Read blocks from stdin (for piping from other tools)"),
    simple: bool = typer.Option(False, "--simple", help="Send as plain text without block formatting"),
    no_unfurl: bool = typer.Option(False, "--no-unfurl", help="Disable link preview unfurling"),
    files: Optional[List[str]] = typer.Option(
        None, "--file", help="File(s) to upload (can be specified multiple times)"
    ),
    file_title: Optional[str] = typer.Option(None, "--file-title", help="Custom title for uploaded file(s)"),
):
    """Send a message to a channel.

    By default, messages are sent using Block Kit formatting. Use --simple
    to send plain text instead. Use "-" as the text to read it from stdin.

    Text is optional when blocks are given via --blocks, --blocks-file or
    --blocks-stdin, or when files are attached with --file. With files,
    the text becomes the comment on the shared files.

    Examples:

        slack-chat messages send general "Hello everyone!"

        echo "Hello" | slack-chat messages send C1234567890 -

        slack-chat messages send C1234567890 --blocks-file ./report.json

        slack-chat messages send "#ops" "Here's the report" --file ./report.pdf

        slack-chat messages send C1234567890 --file ./a.csv --file ./b.csv --thread 1234567890.123456
    """
    out = get_output(ctx)
    with reporting_errors():
        message = compose_message(
            channel,
            text,
            thread_ts=thread,
            blocks_json=blocks,
            blocks_file=blocks_file,
            blocks_stdin=blocks_stdin,
            simple=simple,
            no_unfurl=no_unfurl,
            files=files,
            file_title=file_title,
        )

        with get_client() as client:
            channel_id = resolve_channel(client, channel)

            if message.files:
                uploaded = upload_and_share(
                    client,
                    channel_id,
                    message.files,
                    text=message.text,
                    title=message.file_title,
                    thread_ts=message.thread_ts,
                    progress=lambda name, size: out.message(f"Uploading {name} ({size} bytes)..."),
                )
                count = len(uploaded)
                summary = (
                    f"File uploaded to channel {channel_id}"
                    if count == 1
                    else f"{count} files uploaded to channel {channel_id}"
                )
                out.emit(
                    {"ok": True, "channel": channel_id, "files": [f.to_dict() for f in uploaded]},
                    text=summary,
                )
                return

            try:
                data = client.send_message(
                    channel_id,
                    text=message.text,
                    thread_ts=message.thread_ts,
                    blocks=message.blocks.items if message.blocks is not None else None,
                    unfurl=message.unfurl,
                )
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("send message", e) from e

        result = {"ok": True, "channel": data.get("channel", channel_id), "ts": data.get("ts")}
        if message.thread_ts:
            result["thread_ts"] = message.thread_ts
        out.emit(result, text=f"Message sent (ts: {data.get('ts')})")


@app.command("update")
def update(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    timestamp: str = typer.Argument(..., help="Timestamp of the message to edit"),
    text: str = typer.Argument("", help="New message text, or '-' to read it from stdin"),
    blocks: Optional[str] = typer.Option(None, "--blocks", help="Inline Block Kit JSON array"),
    blocks_file: Optional[str] = typer.Option(None, "--blocks-file", help="Read blocks from JSON file"),
    blocks_stdin: bool = typer.Option(False, "--blocks-stdin", help="Read blocks from stdin"),
    simple: bool = typer.Option(False, "--simple", help="Send as plain text without block formatting"),
    no_unfurl: bool = typer.Option(False, "--no-unfurl", help="Disable link preview unfurling"),
):
    """Edit an existing message.

    Examples:

        slack-chat messages update general 1767815267.099869 "Fixed typo"

        slack-chat messages update C1234567890 1767815267.099869 --blocks-file ./blocks.json
    """
    out = get_output(ctx)
    with reporting_errors():
        ts = _message_ts(timestamp)
        message = compose_update(
            channel,
            text,
            blocks_json=blocks,
            blocks_file=blocks_file,
            blocks_stdin=blocks_stdin,
            simple=simple,
            no_unfurl=no_unfurl,
        )

        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                client.update_message(
                    channel_id,
                    ts,
                    text=message.text,
                    blocks=message.blocks.items if message.blocks is not None else None,
                    unfurl=message.unfurl,
                )
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("update message", e) from e

        out.emit({"ok": True, "channel": channel_id, "ts": ts}, text=f"Message updated (ts: {ts})")


@app.command("delete")
def delete(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    timestamp: str = typer.Argument(..., help="Timestamp of the message to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """Delete a message."""
    out = get_output(ctx)
    with reporting_errors():
        ts = _message_ts(timestamp)
        if not force and not typer.confirm(f"About to delete message {ts} in {channel}\nAre you sure?", default=False):
            out.message("Cancelled.")
            return
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                client.delete_message(channel_id, ts)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("delete message", e) from e

        out.emit({"ok": True, "channel": channel_id, "ts": ts}, text=f"Message deleted (ts: {ts})")


@app.command("react")
def react(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    timestamp: str = typer.Argument(..., help="Message timestamp"),
    emoji: str = typer.Argument(..., help="Emoji name (e.g., 'thumbsup', ':eyes:')"),
):
    """Add an emoji reaction to a message.

    Emoji can be given with or without colons: thumbsup, :thumbsup:

    Examples:

        slack-chat messages react general 1767815267.099869 eyes
    """
    _set_reaction(ctx, channel, timestamp, emoji, remove=False)


@app.command("unreact")
def unreact(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    timestamp: str = typer.Argument(..., help="Message timestamp"),
    emoji: str = typer.Argument(..., help="Emoji name"),
):
    """Remove an emoji reaction from a message."""
    _set_reaction(ctx, channel, timestamp, emoji, remove=True)


def _set_reaction(ctx: typer.Context, channel: str, timestamp: str, emoji: str, remove: bool):
    out = get_output(ctx)
    emoji_name = emoji.strip(":")
    with reporting_errors():
        ts = _message_ts(timestamp)
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                if remove:
                    client.remove_reaction(channel_id, ts, emoji_name)
                else:
                    client.add_reaction(channel_id, ts, emoji_name)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("remove reaction" if remove else "add reaction", e) from e

    verb = "Removed" if remove else "Added"
    out.emit(
        {"ok": True, "channel": channel_id, "timestamp": ts, "emoji": emoji_name},
        text=f"{verb} :{emoji_name}: reaction",
    )


def _row(msg: dict, user: str, text: str) -> dict:
    return {
        "ts": msg.get("ts"),
        "user_id": msg.get("user", ""),
        "user": user,
        "text": text,
        "thread_ts": msg.get("thread_ts"),
        "reply_count": msg.get("reply_count", 0),
        "reactions": msg.get("reactions", []),
    }


def annotate_messages(resolver: UserResolver, messages: list, workers: int = HISTORY_WORKERS) -> list:
    """Resolve authors and mentions for a batch of messages in parallel.

    All workers share one resolver, so each user is looked up at most once
    per run in the common case.
    """

    def annotate(msg: dict) -> dict:
        user_id = msg.get("user", "")
        user = resolver.resolve(user_id) if user_id else msg.get("username", "")
        return _row(msg, user, resolver.resolve_mentions(msg.get("text", "")))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(annotate, messages))


def _message_rows(client, messages: list, raw: bool) -> list:
    if raw:
        return [_row(m, m.get("user", ""), m.get("text", "")) for m in messages]
    return annotate_messages(UserResolver(client), messages)


def _print_messages(out, rows: list, data: dict):
    if out.structured:
        out.emit(data)
    elif out.format == "table":
        out.table(
            ["TIME", "USER", "TEXT"],
            [[format_timestamp(r["ts"]), r["user"], truncate_text(r["text"].replace("\n", " "), 60)] for r in rows],
        )
    else:
        for r in rows:
            replies = f" [{r['reply_count']} replies]" if r["reply_count"] else ""
            out.message(f"[{format_timestamp(r['ts'])}] {r['user']}: {r['text']}{replies}")


@app.command("history")
def history(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of messages to fetch"),
    oldest: Optional[str] = typer.Option(None, "--oldest", help="Only messages after this timestamp"),
    latest: Optional[str] = typer.Option(None, "--latest", help="Only messages before this timestamp"),
    raw: bool = typer.Option(False, "--raw", help="Don't resolve user IDs and mentions"),
):
    """Show recent messages in a channel, oldest first.

    Examples:

        slack-chat messages history general -n 50

        slack-chat messages history C1234567890 --oldest 1767800000 --latest 1767815267
    """
    out = get_output(ctx)
    with reporting_errors():
        oldest = _message_ts(oldest) if oldest else None
        latest = _message_ts(latest) if latest else None
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                messages = client.get_history(channel_id, limit, oldest=oldest, latest=latest)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("get history", e) from e

            rows = _message_rows(client, list(reversed(messages)), raw)

    _print_messages(out, rows, {"channel": channel_id, "message_count": len(rows), "messages": rows})


@app.command("thread")
def thread(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    timestamp: str = typer.Argument(..., help="Timestamp of the thread's parent message"),
    limit: int = typer.Option(100, "--limit", "-n", help="Number of messages to fetch"),
    raw: bool = typer.Option(False, "--raw", help="Don't resolve user IDs and mentions"),
):
    """Show a thread: the parent message followed by its replies."""
    out = get_output(ctx)
    with reporting_errors():
        ts = _message_ts(timestamp)
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                messages = client.get_replies(channel_id, ts, limit)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("get thread", e) from e

            rows = _message_rows(client, messages, raw)

    _print_messages(
        out, rows, {"channel": channel_id, "thread_ts": ts, "message_count": len(rows), "messages": rows}
    )
