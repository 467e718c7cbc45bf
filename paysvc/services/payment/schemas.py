"""API request/response schemas for payment endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from paysvc.services.payment.errors import UnhandledError
from paysvc.services.payment.models import Payment, PaymentStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatePaymentRequest(CamelModel):
    """Payment creation payload.

    Every field is optional at parse time so that the validator can report all
    missing and malformed fields together. Unknown fields such as `status`
    are ignored.
    """

    amount: Decimal | None = None
    currency: str | None = None
    sender_id: str | None = None
    recipient_id: str | None = None
    description: str | None = None


class PaymentResponse(CamelModel):
    """External view of a persisted payment."""

    id: int
    amount: Decimal
    currency: str
    sender_id: str
    recipient_id: str
    status: PaymentStatus
    description: str | None
    created_at: datetime
    updated_at: datetime


class ErrorResponse(BaseModel):
    """Body of every error response."""

    status: int
    message: str
    timestamp: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_response(payment: Payment) -> PaymentResponse:
    """Shape a persisted entity into its response view."""

    if payment.id is None:
        raise UnhandledError("Payment has no id; only persisted payments can be returned")
    return PaymentResponse(
        id=payment.id,
        amount=payment.amount,
        currency=payment.currency,
        sender_id=payment.sender_id,
        recipient_id=payment.recipient_id,
        status=payment.status,
        description=payment.description,
        created_at=_as_utc(payment.created_at),
        updated_at=_as_utc(payment.updated_at),
    )
