"""Client library for the Nordigen open-banking API."""

from .core import (
    CreateRequisitionOptional,
    Institution,
    InvalidTokenError,
    LoggingAuditor,
    NordigenClient,
    NordigenError,
    NotFoundError,
    RateLimitError,
    Requisition,
    Token,
    Transaction,
)

__version__ = "0.1.0"

__all__ = [
    "NordigenClient",
    "LoggingAuditor",
    "NordigenError",
    "RateLimitError",
    "InvalidTokenError",
    "NotFoundError",
    "CreateRequisitionOptional",
    "Institution",
    "Requisition",
    "Token",
    "Transaction",
]
