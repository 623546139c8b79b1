"""Translation between query descriptions and the PostgREST wire format.

Building turns a QueryDescription, mutation, or ProcedureCall into a
WireRequest. Parsing turns a WireResponse into a QueryResult or raises
an ApiError. Nothing here performs I/O.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from catalog_tool.core.exceptions import (
    ApiErrorKind,
    HttpStatusError,
    InputError,
    MalformedResponseError,
)
from catalog_tool.core.models import (
    FilterOp,
    Method,
    QueryResult,
    Record,
    ResourceKind,
    WireRequest,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from catalog_tool.core.models import (
        Filter,
        ProcedureCall,
        QueryDescription,
        ResourceRef,
        Scalar,
        SortKey,
        WireResponse,
    )

JSON_CONTENT_TYPE = "application/json"
PREFER_COUNT_EXACT = "count=exact"
PREFER_RETURN_REPRESENTATION = "return=representation"

_TOTAL_COUNT_RE = re.compile(r"/(\d+)$")
_RECORDS = TypeAdapter(list[Record])


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------


def render_value(value: Scalar) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_filter(flt: Filter) -> str:
    value = render_value(flt.value)
    if flt.op == FilterOp.ILIKE:
        return f"{flt.op.value}.*{value}*"
    return f"{flt.op.value}.{value}"


def render_order(order: Sequence[SortKey]) -> str:
    return ",".join(key.render() for key in order)


def encode_body(body: Any) -> bytes:
    """Serialize a request body as strict JSON; NaN and Infinity are rejected."""
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except ValueError as e:
        msg = f"Request body is not valid JSON: {e}"
        raise InputError(msg) from e


def _headers(*prefer: str, has_body: bool = False) -> dict[str, str]:
    headers = {"Accept": JSON_CONTENT_TYPE}
    if has_body:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    if prefer:
        headers["Prefer"] = ",".join(prefer)
    return headers


def _require_table(target: ResourceRef, operation: str) -> None:
    if target.kind != ResourceKind.TABLE:
        msg = f"Cannot {operation} {target.kind.value} {target.name!r}: not a table"
        raise InputError(msg)


def _id_param(record_id: Scalar, id_column: str) -> tuple[str, str]:
    return (id_column, f"{FilterOp.EQ.value}.{render_value(record_id)}")


def build_query_request(desc: QueryDescription) -> WireRequest:
    """Render a read against a table or view.

    Parameters appear as select, filters, order, limit, offset. An offset
    of zero is never sent.
    """
    params: list[tuple[str, str]] = []
    if desc.select:
        params.append(("select", desc.select))
    for column, flt in desc.filters.items():
        params.append((column, render_filter(flt)))
    if desc.order:
        params.append(("order", render_order(desc.order)))
    if desc.limit is not None:
        params.append(("limit", str(desc.limit)))
    if desc.offset:
        params.append(("offset", str(desc.offset)))

    prefer = (PREFER_COUNT_EXACT,) if desc.count else ()
    return WireRequest(
        method=Method.FETCH,
        path=desc.target.path,
        params=params,
        headers=_headers(*prefer),
    )


def build_fetch_one_request(
    table: ResourceRef,
    record_id: Scalar,
    id_column: str = "id",
    select: str | None = None,
) -> WireRequest:
    if table.kind == ResourceKind.PROCEDURE:
        msg = f"Cannot fetch from procedure {table.name!r}"
        raise InputError(msg)
    params = [_id_param(record_id, id_column)]
    if select:
        params.append(("select", select))
    return WireRequest(
        method=Method.FETCH, path=table.path, params=params, headers=_headers()
    )


def build_create_request(
    table: ResourceRef, body: Record | Sequence[Record]
) -> WireRequest:
    """Insert one record, or many when body is a list."""
    _require_table(table, "create in")
    if not isinstance(body, dict):
        body = list(body)
    return WireRequest(
        method=Method.CREATE,
        path=table.path,
        headers=_headers(PREFER_RETURN_REPRESENTATION, has_body=True),
        body=encode_body(body),
    )


def build_update_request(
    table: ResourceRef,
    record_id: Scalar,
    changes: Mapping[str, Any],
    id_column: str = "id",
) -> WireRequest:
    _require_table(table, "update")
    return WireRequest(
        method=Method.UPDATE,
        path=table.path,
        params=[_id_param(record_id, id_column)],
        headers=_headers(PREFER_RETURN_REPRESENTATION, has_body=True),
        body=encode_body(dict(changes)),
    )


def build_delete_request(
    table: ResourceRef, record_id: Scalar, id_column: str = "id"
) -> WireRequest:
    _require_table(table, "delete from")
    return WireRequest(
        method=Method.DELETE,
        path=table.path,
        params=[_id_param(record_id, id_column)],
        headers=_headers(),
    )


def build_procedure_request(call: ProcedureCall) -> WireRequest:
    return WireRequest(
        method=Method.CREATE,
        path=call.procedure.path,
        headers=_headers(has_body=True),
        body=encode_body(call.args),
    )


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def extract_total_count(content_range: str | None) -> int | None:
    """Total from a ``Content-Range: 0-9/42`` header, None when unknown."""
    if not content_range:
        return None
    match = _TOTAL_COUNT_RE.search(content_range.strip())
    return int(match.group(1)) if match else None


def error_from_response(response: WireResponse) -> HttpStatusError:
    status = response.status_code
    try:
        payload = json.loads(response.body)
    except ValueError:
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return HttpStatusError(
            payload["message"],
            status_code=status,
            kind=ApiErrorKind.SERVER,
            code=payload.get("code"),
            details=payload.get("details"),
            hint=payload.get("hint"),
        )
    return HttpStatusError(f"HTTP {status}", status_code=status)


def parse_response(response: WireResponse) -> QueryResult:
    """Convert a wire response into a QueryResult.

    Raises HttpStatusError for non-2xx statuses and MalformedResponseError
    when a success body is not a record or a list of records.
    """
    status = response.status_code
    total_count = extract_total_count(response.header("Content-Range"))

    if not 200 <= status < 300:
        raise error_from_response(response)

    if status == 204:
        return QueryResult(records=[], total_count=total_count, status_code=status)

    try:
        payload = json.loads(response.body)
    except ValueError as e:
        msg = f"Malformed response body (HTTP {status}): {e}"
        raise MalformedResponseError(msg, status_code=status) from e

    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list) or not all(
        isinstance(item, dict) for item in payload
    ):
        msg = (
            f"Malformed response body (HTTP {status}): "
            "expected a record or a list of records"
        )
        raise MalformedResponseError(msg, status_code=status)

    try:
        records = _RECORDS.validate_python(payload)
    except ValidationError as e:
        msg = f"Malformed response body (HTTP {status}): {e}"
        raise MalformedResponseError(msg, status_code=status) from e

    return QueryResult(records=records, total_count=total_count, status_code=status)
