"""Uniform result type for every backend call.

The backend answers with a flat object, a bare list, a ``{results: [...]}``
page envelope or an ``{error, message}`` failure envelope depending on the
endpoint. ``ApiResult`` hides those differences from the pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    AUTH = "auth"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"
    NETWORK = "network"


def kind_for_status(status: int) -> ErrorKind:
    if status in (401, 403):
        return ErrorKind.AUTH
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status in (400, 409, 422):
        return ErrorKind.VALIDATION
    return ErrorKind.SERVER


class ApiError(Exception):
    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.SERVER, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status = status

    @property
    def is_not_found(self) -> bool:
        return self.kind == ErrorKind.NOT_FOUND


@dataclass(frozen=True)
class ApiResult:
    ok: bool
    data: Any = None
    error: ErrorKind | None = None
    message: str = ""
    status: int | None = None

    @classmethod
    def success(cls, data: Any, *, status: int | None = 200) -> "ApiResult":
        return cls(ok=True, data=data, status=status)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, *, status: int | None = None, data: Any = None) -> "ApiResult":
        return cls(ok=False, data=data, error=kind, message=message, status=status)

    @property
    def items(self) -> list:
        """Rows of a list response, whether bare or wrapped in {results: [...]}."""
        if not self.ok:
            return []
        data = self.data
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            results = data.get("results")
            if isinstance(results, list):
                return results
            inner = data.get("data")
            if isinstance(inner, list):
                return inner
        return []

    @property
    def total_pages(self) -> int:
        if isinstance(self.data, dict):
            try:
                return max(1, int(self.data.get("total_pages") or 1))
            except (TypeError, ValueError):
                return 1
        return 1

    @property
    def count(self) -> int:
        if isinstance(self.data, dict) and self.data.get("count") is not None:
            try:
                return int(self.data["count"])
            except (TypeError, ValueError):
                pass
        return len(self.items)

    def unwrap(self) -> Any:
        if not self.ok:
            raise ApiError(self.message or "API request failed", kind=self.error or ErrorKind.SERVER, status=self.status)
        return self.data
