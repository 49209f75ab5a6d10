"""Request and response shapes of the Nordigen API."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NewTokenRequest(BaseModel):
    secret_id: str
    secret_key: str


class RefreshTokenRequest(BaseModel):
    refresh: str


class Token(BaseModel):
    """Access/refresh pair; expiries are in seconds."""

    access: str
    access_expires: int
    refresh: str
    refresh_expires: int


class AccessToken(BaseModel):
    access: str
    access_expires: int


class Institution(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    name: str
    bic: Optional[str] = None
    transaction_total_days: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    logo_url: Optional[str] = Field(default=None, alias="logo")


class CreateRequisitionOptional(BaseModel):
    """Optional requisition fields; unset ones are left out of the request."""

    agreement: Optional[str] = None
    reference: Optional[str] = None
    user_language: Optional[str] = None
    ssn: Optional[str] = None
    account_selection: bool = False
    redirect_immediate: bool = False

    @field_validator("agreement", "reference", "user_language", "ssn", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # blank strings count as unset
        return value or None


class CreateRequisitionRequest(CreateRequisitionOptional):
    redirect: str
    institution_id: str


def build_requisition_request(
    redirect: str,
    institution_id: str,
    optional: Optional[CreateRequisitionOptional] = None,
) -> CreateRequisitionRequest:
    extra = optional.model_dump(exclude_defaults=True) if optional else {}
    return CreateRequisitionRequest(redirect=redirect, institution_id=institution_id, **extra)


class Requisition(CreateRequisitionRequest):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: Optional[datetime] = Field(default=None, alias="created")
    status: str = ""
    accounts: List[str] = Field(default_factory=list)
    link: Optional[str] = None
    redirect: str = ""
    institution_id: str = ""


class Transaction(BaseModel):
    """A single booked or pending transaction.

    The API nests amount and currency under ``transactionAmount``; they are
    lifted to top-level fields here.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="internalTransactionId")
    booking_date: Optional[date] = Field(default=None, alias="bookingDate")
    value_date: Optional[date] = Field(default=None, alias="valueDate")
    amount: float
    currency: str
    additional_information: Optional[str] = Field(default=None, alias="additionalInformation")
    creditor_id: Optional[str] = Field(default=None, alias="creditorId")
    creditor_name: Optional[str] = Field(default=None, alias="creditorName")
    debtor_id: Optional[str] = Field(default=None, alias="debtorId")
    debtor_name: Optional[str] = Field(default=None, alias="debtorName")
    remittance_information: Optional[str] = Field(default=None, alias="remittanceInformationUnstructured")

    @model_validator(mode="before")
    @classmethod
    def _flatten_amount(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        amount_payload = data.get("transactionAmount")
        if not isinstance(amount_payload, dict):
            return data
        flattened: Dict[str, Any] = dict(data)
        flattened.setdefault("amount", amount_payload.get("amount"))
        flattened.setdefault("currency", amount_payload.get("currency"))
        return flattened


class TransactionLists(BaseModel):
    booked: List[Transaction] = Field(default_factory=list)
    pending: List[Transaction] = Field(default_factory=list)


class TransactionsResponse(BaseModel):
    transactions: TransactionLists = Field(default_factory=TransactionLists)
