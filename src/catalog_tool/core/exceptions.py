"""Exception hierarchy for Catalog Tool.

All exceptions carry an exit_code for CLI return value mapping.
API failures additionally carry an ApiErrorKind so callers can tell a
dead network apart from a server that rejected the request.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from catalog_tool.core.exit_codes import ExitCode


class ApiErrorKind(StrEnum):
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"
    SERVER = "server"
    HTTP_STATUS = "http_status"


class CatalogToolError(Exception):
    """Base exception for all Catalog Tool errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputError(CatalogToolError):
    """File not found, invalid parameters."""

    exit_code: int = ExitCode.INPUT_ERROR


class ConfigError(CatalogToolError):
    """Malformed config, missing profile, bad base URL."""

    exit_code: int = ExitCode.CONFIG_ERROR


class ApiError(CatalogToolError):
    """A request to the REST backend failed."""

    exit_code: int = ExitCode.API_ERROR
    kind: ApiErrorKind = ApiErrorKind.HTTP_STATUS

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
        hint: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint


class HttpStatusError(ApiError):
    """Non-2xx response.

    kind is SERVER when the body carried a structured message,
    HTTP_STATUS when the message was derived from the status code.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        kind: ApiErrorKind = ApiErrorKind.HTTP_STATUS,
        code: str | None = None,
        details: Any = None,
        hint: Any = None,
    ) -> None:
        super().__init__(
            message, status_code=status_code, code=code, details=details, hint=hint
        )
        self.kind = kind


class MalformedResponseError(ApiError):
    """Success status, but the body is not a record or a list of records."""

    kind = ApiErrorKind.MALFORMED_RESPONSE


class NetworkError(ApiError):
    """Connection failures, unreachable host."""

    exit_code: int = ExitCode.NETWORK_ERROR
    kind = ApiErrorKind.NETWORK


class TimeoutError(NetworkError):
    """Transport timeout."""

    exit_code: int = ExitCode.TIMEOUT
