"""Generic table, view and procedure commands."""

from __future__ import annotations

from typing import Annotated

import typer

from catalog_tool.cli.commands._shared import (
    output_result,
    parse_filter_arg,
    parse_order_arg,
    run_with_client,
)
from catalog_tool.core.body_source import parse_assignments, resolve_body
from catalog_tool.core.exceptions import InputError
from catalog_tool.core.models import QueryDescription, ResourceRef


def _resource(name: str, *, view: bool = False) -> ResourceRef:
    try:
        return ResourceRef.view(name) if view else ResourceRef.table(name)
    except ValueError as e:
        msg = f"Invalid table or view name: {name!r}"
        raise InputError(msg) from e


def list_command(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(help="Table or view name")],
    view: Annotated[
        bool,
        typer.Option("--view", help="Target is a view"),
    ] = False,
    select: Annotated[
        str | None,
        typer.Option("--select", "-s", help="Columns and embedded relations"),
    ] = None,
    where: Annotated[
        list[str] | None,
        typer.Option("--where", "-w", help="Filter as column=op.value (eq, ilike, gte, lte)"),
    ] = None,
    order: Annotated[
        str | None,
        typer.Option("--order", "-o", help="Sort, e.g. title.asc,year.desc"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Maximum rows to return"),
    ] = None,
    offset: Annotated[
        int,
        typer.Option("--offset", min=0, help="Rows to skip"),
    ] = 0,
    count: Annotated[
        bool,
        typer.Option("--count", help="Ask the server for an exact total count"),
    ] = False,
) -> None:
    """List rows of a table or view with filtering, sorting and paging."""
    filters = dict(parse_filter_arg(arg) for arg in where or [])
    desc = QueryDescription(
        target=_resource(target, view=view),
        select=select,
        filters=filters,
        order=parse_order_arg(order),
        limit=limit,
        offset=offset,
        count=count,
    )
    result = run_with_client(ctx, lambda client: client.query(desc))
    output_result(ctx, result)


def get_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    record_id: Annotated[str, typer.Argument(metavar="ID", help="Record id")],
    select: Annotated[
        str | None,
        typer.Option("--select", "-s", help="Columns and embedded relations"),
    ] = None,
) -> None:
    """Fetch one record by id."""
    ref = _resource(table)
    result = run_with_client(
        ctx, lambda client: client.get(ref, record_id, select=select)
    )
    output_result(ctx, result)


def create_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    file: Annotated[
        str | None,
        typer.Argument(help="JSON file with a record or a list of records"),
    ] = None,
    data: Annotated[
        str | None,
        typer.Option("--data", "-d", help="Inline JSON record or list of records"),
    ] = None,
) -> None:
    """Insert one record, or many from a JSON list."""
    ref = _resource(table)
    body = resolve_body(data, file, allow_list=True)
    result = run_with_client(ctx, lambda client: client.create(ref, body))
    output_result(ctx, result)


def update_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    record_id: Annotated[str, typer.Argument(metavar="ID", help="Record id")],
    file: Annotated[
        str | None,
        typer.Argument(help="JSON file with the changed fields"),
    ] = None,
    data: Annotated[
        str | None,
        typer.Option("--data", "-d", help="Inline JSON with the changed fields"),
    ] = None,
) -> None:
    """Update fields of one record by id."""
    ref = _resource(table)
    changes = resolve_body(data, file)
    result = run_with_client(
        ctx, lambda client: client.update(ref, record_id, changes)
    )
    output_result(ctx, result)


def delete_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    record_id: Annotated[str, typer.Argument(metavar="ID", help="Record id")],
) -> None:
    """Delete one record by id."""
    ref = _resource(table)
    run_with_client(ctx, lambda client: client.delete(ref, record_id))
    typer.echo(f"Deleted {table} {record_id}", err=True)


def rpc_command(
    ctx: typer.Context,
    procedure: Annotated[str, typer.Argument(help="Database function name")],
    arg: Annotated[
        list[str] | None,
        typer.Option("--arg", "-a", help="Argument as key=value (repeatable)"),
    ] = None,
    data: Annotated[
        str | None,
        typer.Option("--data", "-d", help="Inline JSON argument record"),
    ] = None,
    file: Annotated[
        str | None,
        typer.Option("--file", help="JSON file with the argument record"),
    ] = None,
) -> None:
    """Call a database function through /rpc."""
    args = parse_assignments(arg or [])
    if data is not None or file is not None:
        args = {**resolve_body(data, file), **args}
    try:
        ResourceRef.procedure(procedure)
    except ValueError as e:
        msg = f"Invalid procedure name: {procedure!r}"
        raise InputError(msg) from e
    result = run_with_client(ctx, lambda client: client.call(procedure, args))
    output_result(ctx, result)
