"""Library catalog operations on top of CatalogClient.

Books, authors and genres are plain tables; book_details is a view;
get_top_genres and search_books are database functions.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from catalog_tool.core.models import (
    FilterOp,
    QueryDescription,
    ResourceRef,
    parse_sort,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from catalog_tool.core.client import CatalogClient
    from catalog_tool.core.models import QueryResult, Record, Scalar, SortKey

BOOKS = ResourceRef.table("books")
AUTHORS = ResourceRef.table("authors")
GENRES = ResourceRef.table("genres")
BOOK_DETAILS = ResourceRef.view("book_details")

BOOK_EMBED_SELECT = "*,author:authors(name),genre:genres(name)"
GENRE_COUNT_SELECT = "genre_id,count()"


def _order(order: str | Sequence[SortKey] | None) -> list[SortKey]:
    if order is None:
        return []
    if isinstance(order, str):
        return parse_sort(order)
    return list(order)


class TableGateway:
    """CRUD operations for one table."""

    def __init__(self, client: CatalogClient, table: ResourceRef) -> None:
        self.client = client
        self.table = table

    def describe(
        self,
        *,
        select: str | None = None,
        order: str | Sequence[SortKey] | None = None,
        limit: int | None = None,
        offset: int = 0,
        count: bool = False,
    ) -> QueryDescription:
        return QueryDescription(
            target=self.table,
            select=select,
            order=_order(order),
            limit=limit,
            offset=offset,
            count=count,
        )

    async def list(self, desc: QueryDescription | None = None) -> QueryResult:
        return await self.client.query(desc or self.describe())

    async def get(self, record_id: Scalar, select: str | None = None) -> Record | None:
        result = await self.client.get(self.table, record_id, select=select)
        return result.first()

    async def create(self, record: Mapping[str, Any]) -> QueryResult:
        return await self.client.create(self.table, dict(record))

    async def bulk_create(self, records: Sequence[Mapping[str, Any]]) -> QueryResult:
        return await self.client.create(self.table, [dict(r) for r in records])

    async def update(
        self, record_id: Scalar, changes: Mapping[str, Any]
    ) -> QueryResult:
        return await self.client.update(self.table, record_id, changes)

    async def delete(self, record_id: Scalar) -> QueryResult:
        return await self.client.delete(self.table, record_id)


class LibraryCatalog:
    """Entry point for catalog operations; takes an explicit client."""

    def __init__(self, client: CatalogClient) -> None:
        self.client = client
        self.books = TableGateway(client, BOOKS)
        self.authors = TableGateway(client, AUTHORS)
        self.genres = TableGateway(client, GENRES)

    async def list_books(
        self,
        *,
        title: str | None = None,
        year: int | None = None,
        year_gte: int | None = None,
        year_lte: int | None = None,
        order: str | Sequence[SortKey] | None = "title.asc",
        limit: int | None = None,
        offset: int = 0,
        select: str | None = BOOK_EMBED_SELECT,
        count: bool = True,
    ) -> QueryResult:
        """List books with their author and genre names embedded.

        year, year_gte and year_lte all filter the year column, so only
        the last one given (in that order) is sent.
        """
        desc = self.books.describe(
            select=select, order=order, limit=limit, offset=offset, count=count
        )
        if title:
            desc = desc.where("title", FilterOp.ILIKE, title)
        if year is not None:
            desc = desc.where("year", FilterOp.EQ, year)
        if year_gte is not None:
            desc = desc.where("year", FilterOp.GTE, year_gte)
        if year_lte is not None:
            desc = desc.where("year", FilterOp.LTE, year_lte)
        return await self.books.list(desc)

    async def list_authors(
        self,
        *,
        name: str | None = None,
        order: str | Sequence[SortKey] | None = "name.asc",
        limit: int | None = None,
        offset: int = 0,
    ) -> QueryResult:
        desc = self.authors.describe(order=order, limit=limit, offset=offset)
        if name:
            desc = desc.where("name", FilterOp.ILIKE, name)
        return await self.authors.list(desc)

    async def list_genres(
        self, *, order: str | Sequence[SortKey] | None = "name.asc"
    ) -> QueryResult:
        return await self.genres.list(self.genres.describe(order=order))

    async def form_choices(self) -> tuple[QueryResult, QueryResult]:
        """Authors and genres for book forms, fetched concurrently."""
        authors, genres = await asyncio.gather(
            self.list_authors(), self.list_genres()
        )
        return authors, genres

    async def book_details(
        self,
        *,
        order: str | Sequence[SortKey] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> QueryResult:
        desc = QueryDescription(
            target=BOOK_DETAILS, order=_order(order), limit=limit, offset=offset
        )
        return await self.client.query(desc)

    async def top_genres(self, limit_count: int = 5) -> QueryResult:
        return await self.client.call("get_top_genres", {"limit_count": limit_count})

    async def search_books(self, search_term: str) -> QueryResult:
        return await self.client.call("search_books", {"search_term": search_term})

    async def book_count_by_genre(self) -> QueryResult:
        """Number of books per genre_id.

        Uses aggregate functions in select, so the server must run with
        aggregates enabled.
        """
        desc = QueryDescription(target=BOOKS, select=GENRE_COUNT_SELECT)
        return await self.client.query(desc)
