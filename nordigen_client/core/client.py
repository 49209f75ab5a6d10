from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

import httpx

from ..config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, Settings
from .auditor import Auditor, LoggingAuditor
from .data_models import (
    AccessToken,
    CreateRequisitionOptional,
    Institution,
    NewTokenRequest,
    RefreshTokenRequest,
    Requisition,
    Token,
    Transaction,
    TransactionsResponse,
    build_requisition_request,
)
from .errors import NordigenError
from .request import BearerAuthorization, Request

logger = logging.getLogger(__name__)
DEFAULT_TIMEOUT = httpx.Timeout(DEFAULT_TIMEOUT_SECONDS, connect=5.0)

_DEFAULT_AUDITOR: Any = object()


class NordigenClient:
    """Async client for the Nordigen bank account data API.

    Every call is a single round trip. Provider errors are raised as
    :class:`NordigenError`, already unwrapped into ``RateLimitError``,
    ``InvalidTokenError`` or ``NotFoundError`` where the body allows it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        auditor: Optional[Auditor] = _DEFAULT_AUDITOR,
        token: Optional[Token] = None,
        timeout: Union[float, httpx.Timeout] = DEFAULT_TIMEOUT,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required.")

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.auditor: Optional[Auditor] = LoggingAuditor() if auditor is _DEFAULT_AUDITOR else auditor
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "NordigenClient":
        kwargs.setdefault("base_url", settings.base_url)
        kwargs.setdefault("timeout", httpx.Timeout(settings.timeout, connect=5.0))
        if not settings.audit:
            kwargs.setdefault("auditor", None)
        return cls(**kwargs)

    async def __aenter__(self) -> "NordigenClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Dispose the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _request(self) -> Request:
        return Request(self.base_url, self._client, self.auditor)

    def _authorized_request(self, token: Optional[Token]) -> Request:
        token = token or self.token
        if token is None or not token.access:
            raise ValueError("An access token is required; call new_token() first or pass token=.")
        return self._request().with_authorization(BearerAuthorization(token.access))

    async def _send(self, pending: Any) -> Any:
        try:
            return await pending
        except NordigenError as exc:
            unwrapped = exc.unwrap()
            if unwrapped is exc:
                raise
            raise unwrapped from exc

    async def new_token(self, secret_id: str, secret_key: str) -> Token:
        logger.info("Requesting new access token from %s", self.base_url)
        return await self._send(
            self._request()
            .with_json_body(NewTokenRequest(secret_id=secret_id, secret_key=secret_key))
            .with_result(Token)
            .post("/api/v2/token/new/")
        )

    async def refresh_token(self, refresh: str) -> AccessToken:
        if not refresh:
            raise ValueError("refresh token is required.")
        logger.info("Refreshing access token at %s", self.base_url)
        return await self._send(
            self._request()
            .with_json_body(RefreshTokenRequest(refresh=refresh))
            .with_result(AccessToken)
            .post("/api/v2/token/refresh/")
        )

    async def list_institutions(self, country: str, token: Optional[Token] = None) -> List[Institution]:
        request = self._authorized_request(token)
        logger.info("Listing institutions for country '%s'", country)
        institutions = await self._send(
            request.with_query_param("country", country)
            .with_result(List[Institution])
            .get("/api/v2/institutions/")
        )
        logger.info("Retrieved %d institutions for country '%s'", len(institutions), country)
        return institutions

    async def get_institution(self, institution_id: str, token: Optional[Token] = None) -> Institution:
        _require_id("institution_id", institution_id)
        request = self._authorized_request(token)
        return await self._send(
            request.with_result(Institution).get(f"/api/v2/institutions/{institution_id}/")
        )

    async def create_requisition(
        self,
        redirect_url: str,
        institution_id: str,
        optional: Optional[CreateRequisitionOptional] = None,
        token: Optional[Token] = None,
    ) -> Requisition:
        _require_id("institution_id", institution_id)
        if not redirect_url:
            raise ValueError("redirect_url is required.")
        request = self._authorized_request(token)

        logger.info("Creating requisition for institution '%s'", institution_id)
        requisition = await self._send(
            request.with_json_body(build_requisition_request(str(redirect_url), institution_id, optional))
            .with_result(Requisition)
            .post("/api/v2/requisitions/")
        )
        logger.info("Requisition %s created (status=%s)", requisition.id, requisition.status)
        return requisition

    async def get_requisition(self, requisition_id: str, token: Optional[Token] = None) -> Requisition:
        _require_id("requisition_id", requisition_id)
        request = self._authorized_request(token)
        return await self._send(
            request.with_result(Requisition).get(f"/api/v2/requisitions/{requisition_id}/")
        )

    async def delete_requisition(self, requisition_id: str, token: Optional[Token] = None) -> Dict[str, Any]:
        _require_id("requisition_id", requisition_id)
        request = self._authorized_request(token)
        logger.info("Deleting requisition %s", requisition_id)
        result = await self._send(request.delete(f"/api/v2/requisitions/{requisition_id}/"))
        return result or {}

    async def get_transactions(
        self,
        account_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        token: Optional[Token] = None,
    ) -> TransactionsResponse:
        _require_id("account_id", account_id)
        request = self._authorized_request(token)

        logger.info("Fetching transactions for account '%s'", account_id)
        response = await self._send(
            request.with_query_param("date_from", date_from)
            .with_query_param("date_to", date_to)
            .with_result(TransactionsResponse)
            .get(f"/api/v2/accounts/{account_id}/transactions/")
        )
        logger.info(
            "Fetched %d booked and %d pending transactions for account '%s'",
            len(response.transactions.booked),
            len(response.transactions.pending),
            account_id,
        )
        return response

    async def get_booked_transactions(
        self,
        account_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        token: Optional[Token] = None,
    ) -> List[Transaction]:
        response = await self.get_transactions(account_id, date_from=date_from, date_to=date_to, token=token)
        return response.transactions.booked


def _require_id(name: str, value: str) -> None:
    if not value:
        raise ValueError(f"{name} is required.")
