"""Pydantic models for payment sessions and refunds."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from stablecoin_gateway.models.enums import Network, PaymentStatus, RefundStatus, Token

T = TypeVar("T")

IDEMPOTENCY_KEY_MAX_LENGTH = 64


class CreatePaymentSessionParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: int | float = Field(..., gt=0)
    merchant_address: str = Field(..., min_length=1)
    currency: str | None = None
    description: str | None = None
    network: Network | None = None
    token: Token | None = None
    success_url: str | None = None
    cancel_url: str | None = None
    metadata: dict[str, Any] | None = None
    idempotency_key: str | None = Field(None, min_length=1, max_length=IDEMPOTENCY_KEY_MAX_LENGTH)


class ListPaymentSessionsParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: PaymentStatus | None = None
    network: Network | None = None
    limit: int | None = Field(None, ge=1, le=100)
    offset: int | None = Field(None, ge=0)


class CreateRefundParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_session_id: str = Field(..., min_length=1)
    amount: int | float | None = Field(None, gt=0)
    reason: str | None = None
    idempotency_key: str | None = Field(None, min_length=1, max_length=IDEMPOTENCY_KEY_MAX_LENGTH)


class ListRefundsParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: RefundStatus | None = None
    limit: int | None = Field(None, ge=1, le=100)
    offset: int | None = Field(None, ge=0)


class PaymentSession(BaseModel):
    """A payment session as returned by the gateway. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: str
    amount: Decimal | None = None
    currency: str | None = None
    status: str | None = None
    network: str | None = None
    token: str | None = None
    merchant_address: str | None = None
    checkout_url: str | None = None
    description: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    expires_at: datetime | None = None
    updated_at: datetime | None = None


class Refund(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    payment_session_id: str | None = None
    amount: Decimal | None = None
    status: str | None = None
    reason: str | None = None
    tx_hash: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: int | None = None
    limit: int | None = None
    offset: int | None = None
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[T]):
    model_config = ConfigDict(extra="allow")

    data: list[T] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
