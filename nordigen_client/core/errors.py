"""Errors returned by the Nordigen API.

Provider error bodies are decoded into :class:`NordigenError`. A few well
known shapes are unwrapped into more specific subclasses so callers can
``except NotFoundError`` instead of inspecting summaries.
"""
from __future__ import annotations

import json
import re
from typing import Any

ORDER_NOT_EXISTS_RE = re.compile(r"^OrderID \d+ doesn't exist$")


class NordigenError(Exception):
    """Error decoded from a non-2xx Nordigen response."""

    def __init__(
        self,
        summary: str = "",
        detail: str = "",
        type: str = "",
        status_code: int = 0,
        http_status_code: int = 0,
        data: str = "",
    ) -> None:
        self.summary = summary
        self.detail = detail
        self.type = type
        self.status_code = status_code or http_status_code
        self.http_status_code = http_status_code
        self.data = data
        super().__init__(self._message())

    def __reduce__(self):
        return (
            self.__class__,
            (self.summary, self.detail, self.type, self.status_code, self.http_status_code, self.data),
        )

    @classmethod
    def from_response(cls, http_status_code: int, body: str) -> "NordigenError":
        try:
            payload = json.loads(body) if body else None
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            return cls(http_status_code=http_status_code, data=body)

        return cls(
            summary=_as_text(payload.get("summary")),
            detail=_as_text(payload.get("detail")),
            type=_as_text(payload.get("type")),
            status_code=_as_int(payload.get("status_code")),
            http_status_code=http_status_code,
            data=body,
        )

    def _message(self) -> str:
        if self.summary and self.detail:
            return f"nordigen error: {self.status_code}: {self.summary} - {self.detail}"
        if self.summary:
            return f"nordigen error: {self.status_code}, {self.summary}"
        if self.detail:
            return f"nordigen error: {self.status_code}, {self.detail}"
        return f"nordigen error: {self.http_status_code}, {self.data}"

    def unwrap(self) -> "NordigenError":
        """Return the semantic error for recognised shapes, or ``self``."""
        if self.type.lower() == "ratelimiterror":
            return self._as(RateLimitError)
        if self.summary.lower() == "invalid token":
            return self._as(InvalidTokenError)
        if self.detail and ORDER_NOT_EXISTS_RE.match(self.detail):
            return self._as(NotFoundError)
        if self.http_status_code == 404:
            return self._as(NotFoundError)
        return self

    def _as(self, error_cls: type) -> "NordigenError":
        if isinstance(self, error_cls):
            return self
        return error_cls(
            summary=self.summary,
            detail=self.detail,
            type=self.type,
            status_code=self.status_code,
            http_status_code=self.http_status_code,
            data=self.data,
        )


class RateLimitError(NordigenError):
    """Daily request limit set by the institution has been exceeded."""


class InvalidTokenError(NordigenError):
    """The access token was rejected."""


class NotFoundError(NordigenError):
    """The requested resource does not exist."""


def unwrap_error(exc: BaseException) -> BaseException:
    if isinstance(exc, NordigenError):
        return exc.unwrap()
    return exc


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
