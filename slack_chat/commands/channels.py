"""Channel commands."""

import typer

from ..output import get_output
from ..utils import (
    CHANNEL_LIST_LIMIT,
    CHANNEL_TYPES,
    SlackAPIError,
    TransportError,
    get_client,
    reporting_errors,
    resolve_channel,
    truncate_text,
    wrap_error,
)

app = typer.Typer(help="Channel operations")


def _description(ch: dict) -> str:
    return (ch.get("purpose") or {}).get("value", "") or (ch.get("topic") or {}).get("value", "")


@app.command("list")
def channel_list(
    ctx: typer.Context,
    types: str = typer.Option(CHANNEL_TYPES, "--types", help="Comma-separated conversation types"),
    include_archived: bool = typer.Option(False, "--include-archived", help="Include archived channels"),
    limit: int = typer.Option(CHANNEL_LIST_LIMIT, "--limit", "-n", help="Maximum channels to list"),
):
    """List channels.

    Text output is tab-separated: id | name | description
    """
    out = get_output(ctx)
    with reporting_errors():
        with get_client() as client:
            try:
                channels = client.list_channels(types, not include_archived, limit)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("list channels", e) from e

    channels = sorted(channels, key=lambda ch: ch.get("name", "").lower())

    if out.structured:
        out.emit([
            {
                "id": ch.get("id"),
                "name": ch.get("name"),
                "is_private": ch.get("is_private", False),
                "is_archived": ch.get("is_archived", False),
                "num_members": ch.get("num_members"),
            }
            for ch in channels
        ])
    elif out.format == "table":
        out.table(
            ["ID", "NAME", "MEMBERS", "DESCRIPTION"],
            [
                [ch.get("id", ""), ch.get("name", ""), str(ch.get("num_members", "")), truncate_text(_description(ch), 50)]
                for ch in channels
            ],
        )
    else:
        for ch in channels:
            out.message(f"{ch.get('id', '')}\t{ch.get('name', '')}\t{truncate_text(_description(ch), 50)}")


@app.command("get")
def channel_get(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
):
    """Show channel information."""
    out = get_output(ctx)
    with reporting_errors():
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                ch = client.get_channel_info(channel_id)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error(f"get channel {channel}", e) from e

    if out.structured:
        out.emit(ch)
        return

    pairs = [
        ("ID", ch.get("id")),
        ("Name", ch.get("name")),
        ("Private", ch.get("is_private", False)),
        ("Archived", ch.get("is_archived", False)),
        ("Members", ch.get("num_members", 0)),
    ]
    topic = (ch.get("topic") or {}).get("value")
    purpose = (ch.get("purpose") or {}).get("value")
    if topic:
        pairs.append(("Topic", topic))
    if purpose:
        pairs.append(("Purpose", purpose))
    out.key_values(pairs)


@app.command("create")
def channel_create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Channel name"),
    private: bool = typer.Option(False, "--private", help="Create a private channel"),
):
    """Create a channel."""
    out = get_output(ctx)
    name = name.lstrip("#")
    with reporting_errors():
        with get_client() as client:
            try:
                ch = client.create_channel(name, is_private=private)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error(f"create channel {name}", e) from e

    out.emit(
        {"ok": True, "id": ch.get("id"), "name": ch.get("name", name)},
        text=f"Created channel: {ch.get('name', name)} ({ch.get('id')})",
    )


@app.command("archive")
def channel_archive(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """Archive a channel."""
    out = get_output(ctx)
    if not force and not typer.confirm(f"About to archive channel: {channel}\nAre you sure?", default=False):
        out.message("Cancelled.")
        return

    with reporting_errors():
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                client.archive_channel(channel_id)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error(f"archive channel {channel}", e) from e

    out.emit({"ok": True, "channel": channel_id, "archived": True}, text=f"Archived channel: {channel}")


@app.command("unarchive")
def channel_unarchive(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
):
    """Unarchive a channel."""
    out = get_output(ctx)
    with reporting_errors():
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                client.unarchive_channel(channel_id)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error(f"unarchive channel {channel}", e) from e

    out.emit({"ok": True, "channel": channel_id, "archived": False}, text=f"Unarchived channel: {channel}")


@app.command("set-topic")
def channel_set_topic(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    topic: str = typer.Argument(..., help="New topic"),
):
    """Set a channel's topic."""
    _set_field(ctx, channel, "topic", topic)


@app.command("set-purpose")
def channel_set_purpose(
    ctx: typer.Context,
    channel: str = typer.Argument(..., help="Channel name or ID"),
    purpose: str = typer.Argument(..., help="New purpose"),
):
    """Set a channel's purpose."""
    _set_field(ctx, channel, "purpose", purpose)


def _set_field(ctx: typer.Context, channel: str, field: str, value: str):
    out = get_output(ctx)
    with reporting_errors():
        with get_client() as client:
            channel_id = resolve_channel(client, channel)
            try:
                if field == "topic":
                    client.set_channel_topic(channel_id, value)
                else:
                    client.set_channel_purpose(channel_id, value)
            except (SlackAPIError, TransportError) as e:
                raise wrap_error(f"set {field} for channel {channel}", e) from e

    out.emit({"ok": True, "channel": channel_id, field: value}, text=f"Set {field} for channel {channel}")
