"""Shared CLI plumbing for command modules.

Client creation, async execution, argument parsing and output helpers.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import typer

from catalog_tool.cli.output import get_formatter, write_output
from catalog_tool.core.client import CatalogClient
from catalog_tool.core.config import load_config, resolve_config
from catalog_tool.core.exceptions import InputError
from catalog_tool.core.models import RESERVED_PARAMS, Filter, FilterOp, parse_sort

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from catalog_tool.core.config import ResolvedConfig
    from catalog_tool.core.models import QueryResult, SortKey


def get_resolved_config(ctx: typer.Context) -> ResolvedConfig:
    obj = ctx.ensure_object(dict)
    config = load_config(obj.get("config_file"))
    return resolve_config(
        config,
        profile_name=obj.get("profile"),
        url=obj.get("url"),
        timeout=obj.get("timeout"),
    )


def get_client(ctx: typer.Context) -> CatalogClient:
    obj = ctx.ensure_object(dict)
    return CatalogClient(get_resolved_config(ctx), transport=obj.get("transport"))


def run_with_client(
    ctx: typer.Context, operation: Callable[[CatalogClient], Awaitable[Any]]
) -> Any:
    """Run one async operation against a fresh client and close it afterwards."""
    client = get_client(ctx)

    async def _run() -> Any:
        async with client:
            return await operation(client)

    return asyncio.run(_run())


def format_options(ctx: typer.Context) -> dict[str, Any]:
    """Formatter options; a configured default_format beats TTY detection."""
    obj = ctx.ensure_object(dict)
    fmt = obj.get("format")
    if fmt is None:
        config = get_resolved_config(ctx)
        if config.sources.get("default_format", "default") != "default":
            fmt = config.default_format
    return {
        "format_flag": fmt,
        "compact": obj.get("compact", False),
        "width": obj.get("width", 40),
        "no_header": obj.get("no_header", False),
    }


def output_result(ctx: typer.Context, result: QueryResult) -> None:
    opts = format_options(ctx)
    formatter = get_formatter(**opts)
    write_output(formatter, result)
    if result.total_count is not None:
        typer.echo(f"{result.row_count} of {result.total_count} rows", err=True)


def parse_filter_arg(arg: str) -> tuple[str, Filter]:
    """Parse ``column=op.value``; a bare ``column=value`` means eq."""
    column, sep, rest = arg.partition("=")
    if not sep or not column:
        msg = f"Invalid filter {arg!r}. Expected column=op.value"
        raise InputError(msg)
    if column in RESERVED_PARAMS:
        msg = f"Invalid filter {arg!r}: {column!r} is a reserved query parameter"
        raise InputError(msg)
    op, dot, value = rest.partition(".")
    if dot and op in {o.value for o in FilterOp}:
        return column, Filter(op=FilterOp(op), value=value)
    return column, Filter(op=FilterOp.EQ, value=rest)


def parse_order_arg(order: str | None) -> list[SortKey]:
    if not order:
        return []
    try:
        return parse_sort(order)
    except ValueError as e:
        raise InputError(str(e)) from e
