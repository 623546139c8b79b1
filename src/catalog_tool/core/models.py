"""Request and result models for Catalog Tool.

Pydantic models describing what a caller wants from the REST backend
(QueryDescription, ProcedureCall), the wire-level request and response
exchanged with it, and the QueryResult handed back to callers.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

# Values allowed on the right-hand side of a filter.
Scalar = str | int | float | bool | None

Record = dict[str, JsonValue]

# Query parameters with a fixed meaning; never usable as filter columns.
RESERVED_PARAMS = frozenset({"select", "order", "limit", "offset"})


class ResourceKind(StrEnum):
    TABLE = "table"
    VIEW = "view"
    PROCEDURE = "procedure"


class ResourceRef(BaseModel):
    """A table, view, or procedure exposed by the REST backend."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or any(ch in v for ch in "/?&#"):
            msg = f"Invalid resource name: {v!r}"
            raise ValueError(msg)
        return v

    @classmethod
    def table(cls, name: str) -> ResourceRef:
        return cls(kind=ResourceKind.TABLE, name=name)

    @classmethod
    def view(cls, name: str) -> ResourceRef:
        return cls(kind=ResourceKind.VIEW, name=name)

    @classmethod
    def procedure(cls, name: str) -> ResourceRef:
        return cls(kind=ResourceKind.PROCEDURE, name=name)

    @property
    def path(self) -> str:
        if self.kind == ResourceKind.PROCEDURE:
            return f"/rpc/{self.name}"
        return f"/{self.name}"


class FilterOp(StrEnum):
    EQ = "eq"
    ILIKE = "ilike"
    GTE = "gte"
    LTE = "lte"


class Filter(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: FilterOp
    value: Scalar


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, token: str) -> SortKey:
        """Parse ``title``, ``title.desc`` or ``-title``."""
        token = token.strip()
        if token.startswith("-"):
            return cls(column=token[1:], direction=SortDirection.DESC)
        column, sep, direction = token.rpartition(".")
        if sep and direction in (SortDirection.ASC, SortDirection.DESC):
            return cls(column=column, direction=SortDirection(direction))
        return cls(column=token)

    def render(self) -> str:
        return f"{self.column}.{self.direction.value}"


def parse_sort(spec: str) -> list[SortKey]:
    """Parse a comma-separated sort specification like ``title.asc,-year``."""
    keys = [SortKey.parse(part) for part in spec.split(",") if part.strip()]
    for key in keys:
        if not key.column:
            msg = f"Invalid sort specification: {spec!r}"
            raise ValueError(msg)
    return keys


def _check_filter_column(column: str) -> None:
    if not column:
        msg = "Filter column must not be empty"
        raise ValueError(msg)
    if column in RESERVED_PARAMS:
        msg = f"Cannot filter on {column!r}: it is a reserved query parameter"
        raise ValueError(msg)


class QueryDescription(BaseModel):
    """A read against a table or view.

    Only one filter per column is kept: setting a second filter on the
    same column replaces the first.
    """

    target: ResourceRef
    select: str | None = None
    filters: dict[str, Filter] = {}
    order: list[SortKey] = []
    limit: int | None = Field(default=None, gt=0)
    offset: int = Field(default=0, ge=0)
    count: bool = False

    @field_validator("filters")
    @classmethod
    def validate_filter_columns(cls, v: dict[str, Filter]) -> dict[str, Filter]:
        for column in v:
            _check_filter_column(column)
        return v

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: ResourceRef) -> ResourceRef:
        if v.kind == ResourceKind.PROCEDURE:
            msg = f"Procedure {v.name!r} cannot be queried; use a ProcedureCall"
            raise ValueError(msg)
        return v

    def where(self, column: str, op: FilterOp, value: Scalar) -> QueryDescription:
        _check_filter_column(column)
        filters = {**self.filters, column: Filter(op=op, value=value)}
        return self.model_copy(update={"filters": filters})


class ProcedureCall(BaseModel):
    procedure: ResourceRef
    args: Record = {}

    @field_validator("procedure")
    @classmethod
    def validate_procedure(cls, v: ResourceRef) -> ResourceRef:
        if v.kind != ResourceKind.PROCEDURE:
            msg = f"{v.kind.value} {v.name!r} is not a procedure"
            raise ValueError(msg)
        return v


class Method(StrEnum):
    FETCH = "GET"
    CREATE = "POST"
    UPDATE = "PATCH"
    DELETE = "DELETE"


class WireRequest(BaseModel):
    """An HTTP request ready for the transport, relative to the base URL."""

    method: Method
    path: str
    params: list[tuple[str, str]] = []
    headers: dict[str, str] = {}
    body: bytes | None = None

    @property
    def target(self) -> str:
        if not self.params:
            return self.path
        query = "&".join(f"{key}={value}" for key, value in self.params)
        return f"{self.path}?{query}"


class WireResponse(BaseModel):
    status_code: int
    headers: dict[str, str] = {}
    body: bytes = b""

    @field_validator("headers")
    @classmethod
    def lowercase_header_names(cls, v: dict[str, str]) -> dict[str, str]:
        return {key.lower(): value for key, value in v.items()}

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


class QueryResult(BaseModel):
    """Records returned by a successful call.

    total_count is None when the server did not report a total; callers
    must not read that as zero.
    """

    records: list[Record] = []
    total_count: int | None = None
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def row_count(self) -> int:
        return len(self.records)

    def first(self) -> Record | None:
        return self.records[0] if self.records else None

    def columns(self) -> list[str]:
        """Ordered union of keys across all records."""
        seen: dict[str, None] = {}
        for record in self.records:
            for key in record:
                seen.setdefault(key, None)
        return list(seen)
