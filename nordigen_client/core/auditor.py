from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, Mapping, Protocol

import httpx

logger = logging.getLogger("nordigen_client.audit")

MASK = "***"
SENSITIVE_HEADERS = {"authorization"}
SENSITIVE_FIELDS = {"secret_key", "access", "refresh"}


class Auditor(Protocol):
    """Observes outgoing requests and incoming responses."""

    def id(self) -> str:
        """Return a new request ID shared by a request and its response."""

    def request(self, request_id: str, request: httpx.Request) -> None:
        ...

    def response(self, request_id: str, response: httpx.Response) -> None:
        ...


class LoggingAuditor:
    """Dumps requests and responses to the audit logger at DEBUG level."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self._log = log

    def id(self) -> str:
        return str(uuid.uuid4())

    def request(self, request_id: str, request: httpx.Request) -> None:
        if not self._log.isEnabledFor(logging.DEBUG):
            return
        self._log.debug(
            "%s request %s %s headers=%s body=%s",
            request_id,
            request.method,
            request.url,
            _masked_headers(request.headers),
            _masked_body(request.content),
        )

    def response(self, request_id: str, response: httpx.Response) -> None:
        if not self._log.isEnabledFor(logging.DEBUG):
            return
        self._log.debug(
            "%s response %s headers=%s body=%s",
            request_id,
            response.status_code,
            _masked_headers(response.headers),
            _masked_body(response.content),
        )


def _masked_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        key: (MASK if key.lower() in SENSITIVE_HEADERS else value)
        for key, value in headers.items()
    }


def _masked_body(content: bytes) -> str:
    if not content:
        return ""
    text = content.decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    return json.dumps(_mask_fields(payload), ensure_ascii=False)


def _mask_fields(payload: Any) -> Any:
    if isinstance(payload, dict):
        return {
            key: (MASK if key in SENSITIVE_FIELDS else _mask_fields(value))
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [_mask_fields(item) for item in payload]
    return payload
