"""Async REST client for Catalog Tool.

Wraps an httpx.AsyncClient: sends WireRequests built by the translator,
maps transport failures to the CatalogToolError hierarchy, and parses
responses into QueryResults.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import httpx
import sentry_sdk

from catalog_tool.core.exceptions import ApiError, NetworkError, TimeoutError
from catalog_tool.core.logging import get_logger
from catalog_tool.core.models import ProcedureCall, ResourceRef, WireResponse
from catalog_tool.core.translator import (
    build_create_request,
    build_delete_request,
    build_fetch_one_request,
    build_procedure_request,
    build_query_request,
    build_update_request,
    parse_response,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from catalog_tool.core.config import ResolvedConfig
    from catalog_tool.core.models import (
        QueryDescription,
        QueryResult,
        Record,
        Scalar,
        WireRequest,
    )


class CatalogClient:
    """Async client for a PostgREST-style backend.

    Construct one per application and pass it to whatever needs it.
    Requests issued concurrently share the connection pool and nothing else.
    """

    def __init__(
        self,
        config: ResolvedConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def send(self, request: WireRequest) -> QueryResult:
        """Execute a WireRequest and parse the response."""
        log = get_logger(__name__)
        target = request.target
        log.debug("sending request", method=request.method.value, target=target)
        with sentry_sdk.start_span(
            op="http.client", name=f"{request.method.value} {target}"
        ) as span:
            start_time = time.monotonic()
            try:
                response = await self._http.request(
                    request.method.value,
                    request.path,
                    params=request.params,
                    headers=request.headers,
                    content=request.body,
                )
            except httpx.TimeoutException as e:
                span.set_status("deadline_exceeded")
                log.error("transport timeout", target=target, error=str(e))
                msg = f"Request timed out after {self.config.timeout}s: {request.method.value} {target}"
                raise TimeoutError(msg) from e
            except httpx.TransportError as e:
                span.set_status("unavailable")
                log.error("transport error", target=target, error=str(e))
                msg = f"Network error contacting {self.config.base_url}: {e}"
                raise NetworkError(msg) from e

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("status_code", response.status_code)
            span.set_data("duration_ms", duration_ms)
            log.debug(
                "request complete",
                status=response.status_code,
                duration_ms=f"{duration_ms:.1f}",
            )

            wire = WireResponse(
                status_code=response.status_code,
                headers=dict(response.headers),
                body=response.content,
            )
            try:
                return parse_response(wire)
            except ApiError as e:
                span.set_status("internal_error")
                log.error(
                    "api error",
                    target=target,
                    kind=e.kind.value,
                    status=e.status_code,
                    error=e.message,
                )
                raise

    async def query(self, desc: QueryDescription) -> QueryResult:
        return await self.send(build_query_request(desc))

    async def get(
        self,
        table: str | ResourceRef,
        record_id: Scalar,
        id_column: str = "id",
        select: str | None = None,
    ) -> QueryResult:
        request = build_fetch_one_request(
            _as_table(table), record_id, id_column=id_column, select=select
        )
        return await self.send(request)

    async def create(
        self, table: str | ResourceRef, body: Record | Sequence[Record]
    ) -> QueryResult:
        return await self.send(build_create_request(_as_table(table), body))

    async def update(
        self,
        table: str | ResourceRef,
        record_id: Scalar,
        changes: Mapping[str, Any],
        id_column: str = "id",
    ) -> QueryResult:
        request = build_update_request(
            _as_table(table), record_id, changes, id_column=id_column
        )
        return await self.send(request)

    async def delete(
        self, table: str | ResourceRef, record_id: Scalar, id_column: str = "id"
    ) -> QueryResult:
        request = build_delete_request(_as_table(table), record_id, id_column=id_column)
        return await self.send(request)

    async def call(
        self, procedure: str, args: Mapping[str, Any] | None = None
    ) -> QueryResult:
        call = ProcedureCall(
            procedure=ResourceRef.procedure(procedure), args=dict(args or {})
        )
        return await self.send(build_procedure_request(call))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()


def _as_table(table: str | ResourceRef) -> ResourceRef:
    if isinstance(table, ResourceRef):
        return table
    return ResourceRef.table(table)
