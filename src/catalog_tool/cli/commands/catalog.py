"""Library catalog commands: books, authors, genres and reports."""

from __future__ import annotations

from typing import Annotated

import typer

from catalog_tool.cli.commands._shared import (
    output_result,
    parse_order_arg,
    run_with_client,
)
from catalog_tool.core.catalog import LibraryCatalog

catalog_app = typer.Typer(help="Library catalog commands")


@catalog_app.callback(invoke_without_command=True)
def catalog_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@catalog_app.command("books")
def books_command(
    ctx: typer.Context,
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Case-insensitive title match"),
    ] = None,
    year: Annotated[
        int | None,
        typer.Option("--year", help="Exact publication year"),
    ] = None,
    year_gte: Annotated[
        int | None,
        typer.Option("--year-gte", help="Published in or after this year"),
    ] = None,
    year_lte: Annotated[
        int | None,
        typer.Option("--year-lte", help="Published in or before this year"),
    ] = None,
    sort: Annotated[
        str,
        typer.Option("--sort", help="Sort, e.g. title.asc or year.desc"),
    ] = "title.asc",
    page: Annotated[
        int,
        typer.Option("--page", min=1, help="Page number"),
    ] = 1,
    page_size: Annotated[
        int,
        typer.Option("--page-size", min=1, help="Rows per page"),
    ] = 10,
) -> None:
    """
    List books with author and genre names.

    Only one year filter reaches the server; when several are given the
    last of --year, --year-gte, --year-lte wins.
    """
    order = parse_order_arg(sort)
    result = run_with_client(
        ctx,
        lambda client: LibraryCatalog(client).list_books(
            title=title,
            year=year,
            year_gte=year_gte,
            year_lte=year_lte,
            order=order,
            limit=page_size,
            offset=(page - 1) * page_size,
        ),
    )
    output_result(ctx, result)


@catalog_app.command("authors")
def authors_command(
    ctx: typer.Context,
    name: Annotated[
        str | None,
        typer.Option("--name", help="Case-insensitive name match"),
    ] = None,
) -> None:
    """List authors ordered by name."""
    result = run_with_client(
        ctx, lambda client: LibraryCatalog(client).list_authors(name=name)
    )
    output_result(ctx, result)


@catalog_app.command("genres")
def genres_command(ctx: typer.Context) -> None:
    """List genres ordered by name."""
    result = run_with_client(ctx, lambda client: LibraryCatalog(client).list_genres())
    output_result(ctx, result)


@catalog_app.command("details")
def details_command(
    ctx: typer.Context,
    order: Annotated[
        str | None,
        typer.Option("--order", "-o", help="Sort, e.g. title.asc"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Maximum rows to return"),
    ] = None,
    offset: Annotated[
        int,
        typer.Option("--offset", min=0, help="Rows to skip"),
    ] = 0,
) -> None:
    """Query the book_details view."""
    sort = parse_order_arg(order)
    result = run_with_client(
        ctx,
        lambda client: LibraryCatalog(client).book_details(
            order=sort, limit=limit, offset=offset
        ),
    )
    output_result(ctx, result)


@catalog_app.command("top-genres")
def top_genres_command(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Number of genres"),
    ] = 5,
) -> None:
    """Genres with the most books (get_top_genres)."""
    result = run_with_client(
        ctx, lambda client: LibraryCatalog(client).top_genres(limit)
    )
    output_result(ctx, result)


@catalog_app.command("search")
def search_command(
    ctx: typer.Context,
    term: Annotated[str, typer.Argument(help="Search term")],
) -> None:
    """Full-text book search (search_books)."""
    result = run_with_client(
        ctx, lambda client: LibraryCatalog(client).search_books(term)
    )
    output_result(ctx, result)


@catalog_app.command("genre-counts")
def genre_counts_command(ctx: typer.Context) -> None:
    """Number of books per genre."""
    result = run_with_client(
        ctx, lambda client: LibraryCatalog(client).book_count_by_genre()
    )
    output_result(ctx, result)
