import logging

import typer

from . import __version__
from .commands import channels, config, messages
from .output import FORMATS, Output

app = typer.Typer(help="Slack CLI for the Web API")

app.add_typer(messages.app, name="messages")
app.add_typer(channels.app, name="channels")
app.add_typer(config.app, name="config")


def _version_callback(value: bool):
    if value:
        print(f"slack-chat {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    output: str = typer.Option("text", "--output", "-o", help=f"Output format: {', '.join(FORMATS)}"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log API calls to stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Send messages, manage channels and upload files from the terminal."""
    if output not in FORMATS:
        raise typer.BadParameter(f"must be one of: {', '.join(FORMATS)}", param_hint="--output")

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO; keep it quiet unless asked
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)

    ctx.obj = Output(format=output)


def main():
    app()


if __name__ == "__main__":
    main()
