"""Frontload command line interface.

Entry point for the frontload CLI tool: settings validation and inspection.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError

from frontload import __version__
from frontload.contracts.errors import ConfigFileError
from frontload.core.config import FrontloadSettings, load_settings, resolve_config

__all__ = ["app"]

app = typer.Typer(
    name="frontload",
    help="Frontload: coordinated data loading for render trees.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"frontload version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Frontload: coordinated data loading for render trees."""
    from frontload.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")


def _format_validation_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted validation error with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    console.print(Panel(content, title=f"[red bold]{title}[/]", border_style="red"))


def _load_or_exit(settings_path: Path) -> FrontloadSettings:
    try:
        return load_settings(settings_path)
    except ConfigFileError as e:
        _format_validation_error(
            title="File Not Found",
            message=str(e),
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        _format_validation_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None


@app.command()
def validate(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """Validate frontload settings without rendering anything."""
    config = _load_or_exit(Path(settings).expanduser())

    typer.echo("Configuration valid.")
    typer.echo(f"  max_passes: {config.render.max_passes}")
    typer.echo(f"  render logging: {'on' if config.render.logging_enabled else 'off'}")
    typer.echo(f"  provider no_server_render: {config.provider.no_server_render}")
    if config.provider.name:
        typer.echo(f"  provider name: {config.provider.name}")


@app.command("show-config")
def show_config(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """Print the resolved settings (file + environment + defaults) as JSON."""
    config = _load_or_exit(Path(settings).expanduser())
    typer.echo(json.dumps(resolve_config(config), indent=2))


if __name__ == "__main__":
    app()
