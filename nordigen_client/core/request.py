from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Tuple, Union
from urllib.parse import urljoin

import httpx
from pydantic import BaseModel, TypeAdapter

from .auditor import Auditor
from .errors import NordigenError

logger = logging.getLogger(__name__)

QueryValue = Union[str, int, bool, date, Sequence[str], None]


class Authorization(Protocol):
    """Adds authorization to a fully built request.

    ``authorize`` is called after headers, params and body are set and right
    before the request is audited and sent.
    """

    def authorize(self, request: httpx.Request) -> httpx.Request:
        ...


class BearerAuthorization:
    def __init__(self, access_token: str) -> None:
        self.access_token = access_token

    def authorize(self, request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = f"Bearer {self.access_token}"
        return request


class Request:
    """One-shot builder for a single call against the API.

    Usage::

        token = await (
            Request(base_url, http_client, auditor)
            .with_json_body(NewTokenRequest(secret_id=..., secret_key=...))
            .with_result(Token)
            .post("/api/v2/token/new/")
        )
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient,
        auditor: Optional[Auditor] = None,
    ) -> None:
        self.base_url = base_url
        self.client = client
        self.auditor = auditor
        self.auth: Optional[Authorization] = None
        self.headers = httpx.Headers({"accept": "application/json"})
        self.query_params: List[Tuple[str, str]] = []
        self.body: Any = None
        self.result_type: Any = None

    def with_authorization(self, auth: Authorization) -> "Request":
        self.auth = auth
        return self

    def with_header(self, key: str, value: Optional[str]) -> "Request":
        if value:
            self.headers[key] = value
        return self

    def with_headers(self, headers: Mapping[str, Union[str, Sequence[str]]]) -> "Request":
        for key, value in headers.items():
            if isinstance(value, str):
                self.headers[key] = value
            elif value:
                self.headers[key] = value[0]
        return self

    def with_result(self, result_type: Any) -> "Request":
        self.result_type = result_type
        return self

    def with_json_body(self, obj: Any) -> "Request":
        self.body = obj
        self.headers["Content-Type"] = "application/json"
        return self

    def with_query_param(self, key: str, value: QueryValue) -> "Request":
        if value is None:
            return self
        if isinstance(value, bool):
            self.query_params.append((key, "true" if value else "false"))
        elif isinstance(value, str):
            self.query_params.append((key, value))
        elif isinstance(value, int):
            self.query_params.append((key, str(value)))
        elif isinstance(value, date):
            # datetime is a date subclass; only the calendar day is sent
            self.query_params.append((key, value.strftime("%Y-%m-%d")))
        elif isinstance(value, (list, tuple)):
            self.query_params.append((key, ",".join(value)))
        else:
            raise TypeError(f"unsupported query parameter type for {key!r}: {type(value).__name__}")
        return self

    async def get(self, path: str) -> Any:
        return await self._do("GET", path)

    async def post(self, path: str) -> Any:
        return await self._do("POST", path)

    async def delete(self, path: str) -> Any:
        return await self._do("DELETE", path)

    def _encode_body(self) -> Optional[bytes]:
        if self.body is None:
            return None
        if isinstance(self.body, BaseModel):
            return self.body.model_dump_json(by_alias=True, exclude_defaults=True).encode("utf-8")
        return json.dumps(self.body).encode("utf-8")

    async def _do(self, method: str, path: str) -> Any:
        url = urljoin(self.base_url, path)
        request = self.client.build_request(
            method,
            url,
            params=self.query_params or None,
            headers=self.headers,
            content=self._encode_body(),
        )

        if self.auth is not None:
            request = self.auth.authorize(request)

        request_id = ""
        if self.auditor is not None:
            request_id = self.auditor.id()
            self.auditor.request(request_id, request)

        response = await self.client.send(request)
        if self.auditor is not None:
            self.auditor.response(request_id, response)

        if response.status_code >= 300:
            logger.debug("%s %s failed with status %s", method, url, response.status_code)
            raise NordigenError.from_response(response.status_code, response.text)

        return self._decode_result(response)

    def _decode_result(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        payload = response.json()
        if self.result_type is None:
            return payload
        return TypeAdapter(self.result_type).validate_python(payload)
