"""Core package exposing the primary interfaces of the Nordigen client."""

from .auditor import Auditor, LoggingAuditor
from .client import NordigenClient
from .data_models import (
    AccessToken,
    CreateRequisitionOptional,
    CreateRequisitionRequest,
    Institution,
    Requisition,
    Token,
    Transaction,
    TransactionsResponse,
)
from .errors import InvalidTokenError, NordigenError, NotFoundError, RateLimitError, unwrap_error
from .request import Authorization, BearerAuthorization, Request

__all__ = [
    "NordigenClient",
    "Request",
    "Authorization",
    "BearerAuthorization",
    "Auditor",
    "LoggingAuditor",
    "NordigenError",
    "RateLimitError",
    "InvalidTokenError",
    "NotFoundError",
    "unwrap_error",
    "AccessToken",
    "CreateRequisitionOptional",
    "CreateRequisitionRequest",
    "Institution",
    "Requisition",
    "Token",
    "Transaction",
    "TransactionsResponse",
]
