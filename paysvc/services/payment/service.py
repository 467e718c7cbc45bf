"""Payment manager.

Turns validated requests into stored payments, and fetches, re-statuses and
deletes them by id. Every entity leaving this layer is shaped into a
`PaymentResponse`.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from paysvc.common.config import settings
from paysvc.common.logging import bind_payment_id, logger
from paysvc.common.metrics import (
    payment_status_updates_total,
    payment_validation_failures_total,
    payments_created_total,
    payments_deleted_total,
)
from paysvc.common.state_machine import validate_transition
from paysvc.services.payment.errors import FieldError, NotFoundError, ValidationError
from paysvc.services.payment.models import Payment, PaymentStatus
from paysvc.services.payment.schemas import CreatePaymentRequest, PaymentResponse, to_response
from paysvc.services.payment.store import Found, PaymentStore
from paysvc.services.payment.validation import validate_create_request


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentService:
    """Owns the create / read / update-status / delete round trip."""

    def __init__(
        self,
        store: PaymentStore,
        clock: Callable[[], datetime] = utc_now,
        enforce_transitions: bool = False,
        service_name: str = settings.service_name,
    ) -> None:
        self.store = store
        self.clock = clock
        self.enforce_transitions = enforce_transitions
        self.service_name = service_name

    def _require(self, payment_id: int) -> Payment:
        bind_payment_id(payment_id)
        lookup = self.store.get_by_id(payment_id)
        if isinstance(lookup, Found):
            return lookup.payment
        logger.info("payment_not_found payment_id=%s", payment_id)
        raise NotFoundError(payment_id)

    def create_payment(self, req: CreatePaymentRequest) -> PaymentResponse:
        """Validate input and store a new payment in `PENDING`."""

        try:
            validated = validate_create_request(req)
        except ValidationError as exc:
            payment_validation_failures_total.labels(service=self.service_name).inc()
            logger.warning("payment_rejected errors=%s", exc.description)
            raise

        now = self.clock()
        payment = Payment(
            amount=validated.amount,
            currency=validated.currency,
            sender_id=validated.sender_id,
            recipient_id=validated.recipient_id,
            description=validated.description,
            status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        response = to_response(self.store.insert(payment))
        bind_payment_id(response.id)
        logger.info(
            "payment_created payment_id=%s amount=%s currency=%s",
            response.id,
            response.amount,
            response.currency,
        )
        payments_created_total.labels(service=self.service_name).inc()
        return response

    def get_payment(self, payment_id: int) -> PaymentResponse:
        return to_response(self._require(payment_id))

    def list_payments(self) -> list[PaymentResponse]:
        return [to_response(payment) for payment in self.store.list_all()]

    def list_payments_by_status(self, status: PaymentStatus) -> list[PaymentResponse]:
        return [to_response(payment) for payment in self.store.list_by_status(status)]

    def list_payments_by_sender(self, sender_id: str) -> list[PaymentResponse]:
        return [to_response(payment) for payment in self.store.list_by_sender(sender_id)]

    def list_payments_by_recipient(self, recipient_id: str) -> list[PaymentResponse]:
        return [to_response(payment) for payment in self.store.list_by_recipient(recipient_id)]

    def update_payment_status(self, payment_id: int, new_status: PaymentStatus) -> PaymentResponse:
        """Overwrite the status of one payment.

        Any status may replace any other unless `enforce_transitions` is set,
        in which case only edges of the lifecycle graph are accepted.
        """

        payment = self._require(payment_id)
        from_status = payment.status
        if self.enforce_transitions:
            try:
                validate_transition(from_status.value, new_status.value)
            except ValueError as exc:
                raise ValidationError([FieldError("status", str(exc))]) from exc

        payment.status = new_status
        payment.updated_at = self.clock()
        saved = self.store.update(payment)
        logger.info(
            "payment_status_updated payment_id=%s from=%s to=%s",
            payment_id,
            from_status.value,
            new_status.value,
        )
        payment_status_updates_total.labels(service=self.service_name, status=new_status.value).inc()
        return to_response(saved)

    def delete_payment(self, payment_id: int) -> None:
        """Remove a payment permanently; no tombstone is kept."""

        bind_payment_id(payment_id)
        if not self.store.exists_by_id(payment_id):
            logger.info("payment_not_found payment_id=%s", payment_id)
            raise NotFoundError(payment_id)
        self.store.delete_by_id(payment_id)
        logger.info("payment_deleted payment_id=%s", payment_id)
        payments_deleted_total.labels(service=self.service_name).inc()
