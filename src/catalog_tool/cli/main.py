"""Catalog Tool main entry point and command registration."""

from __future__ import annotations

import atexit
from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from catalog_tool.__about__ import __version__
from catalog_tool.cli.commands.catalog import catalog_app
from catalog_tool.cli.commands.config import config_app
from catalog_tool.cli.commands.records import (
    create_command,
    delete_command,
    get_command,
    list_command,
    rpc_command,
    update_command,
)
from catalog_tool.cli.output import OutputFormat  # noqa: TC001
from catalog_tool.core.exceptions import CatalogToolError
from catalog_tool.core.logging import setup_logging
from catalog_tool.core.monitoring import setup_sentry

app = typer.Typer(
    help="Catalog Tool - PostgREST library catalog client",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.add_typer(catalog_app, name="catalog")
app.command("list")(list_command)
app.command("get")(get_command)
app.command("create")(create_command)
app.command("update")(update_command)
app.command("delete")(delete_command)
app.command("rpc")(rpc_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"catalog-tool {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named API profile"),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="REST API base URL"),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="HTTP timeout in seconds"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Shorthand for --format table"),
    ] = False,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Column width for table format"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV output"),
    ] = False,
) -> None:
    """Catalog Tool - PostgREST library catalog client."""
    setup_logging(verbose)
    setup_sentry()

    transaction = sentry_sdk.start_transaction(
        op="cli", name=ctx.invoked_subcommand or "catalog-tool"
    )
    transaction.__enter__()

    def cleanup() -> None:
        transaction.__exit__(None, None, None)
        sentry_sdk.flush(timeout=2)

    atexit.register(cleanup)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile"] = profile
    ctx.obj["url"] = url
    ctx.obj["timeout"] = timeout
    ctx.obj["config_file"] = config_file

    # Format options (global)
    fmt = "table" if table else (format.value if format else None)
    ctx.obj["format"] = fmt
    ctx.obj["compact"] = compact
    ctx.obj["width"] = width
    ctx.obj["no_header"] = no_header


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except CatalogToolError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
