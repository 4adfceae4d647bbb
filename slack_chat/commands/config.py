"""Token configuration commands."""

import typer
from typing import Optional

from .. import config as config_module
from ..output import get_output
from ..utils import SlackAPIError, TransportError, get_client, mask_token, reporting_errors, wrap_error

app = typer.Typer(help="Manage the API token")


@app.command("set-token")
def set_token(
    ctx: typer.Context,
    token: Optional[str] = typer.Argument(None, help="Slack API token (prompted for when omitted)"),
):
    """Store the API token in the config file."""
    out = get_output(ctx)
    if token is None:
        token = typer.prompt("Slack API token", hide_input=True)
    with reporting_errors():
        config_module.set_token(token)
    out.emit(
        {"ok": True, "config_file": str(config_module.get_config_file())},
        text=f"Token saved to {config_module.get_config_file()}",
    )


@app.command("show")
def show(ctx: typer.Context):
    """Show the configured token (masked) and where it came from."""
    out = get_output(ctx)
    with reporting_errors():
        token, source = config_module.find_token()
    if not token:
        out.emit({"token": None, "source": None}, text="No token configured.")
        return
    out.emit({"token": mask_token(token), "source": source}, text=f"Token: {mask_token(token)} (from {source})")


@app.command("delete-token")
def delete_token(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """Remove the stored token from the config file."""
    out = get_output(ctx)
    if not force and not typer.confirm("Delete the stored token?", default=False):
        out.message("Cancelled.")
        return
    with reporting_errors():
        deleted = config_module.delete_token()
    if deleted:
        out.emit({"ok": True, "deleted": True}, text="Token deleted.")
    else:
        out.emit({"ok": True, "deleted": False}, text="No stored token to delete.")


@app.command("test")
def check_token(ctx: typer.Context):
    """Check that the configured token works (auth.test)."""
    out = get_output(ctx)
    with reporting_errors():
        with get_client() as client:
            try:
                data = client.auth_test()
            except (SlackAPIError, TransportError) as e:
                raise wrap_error("test token", e) from e

    info = {
        "ok": True,
        "team": data.get("team"),
        "team_id": data.get("team_id"),
        "user": data.get("user"),
        "user_id": data.get("user_id"),
    }
    out.emit(info, text=f"Token is valid: {info['user']} ({info['user_id']}) in {info['team']} ({info['team_id']})")
