"""Persistence port for payments and its SQLAlchemy implementation.

The store owns id assignment. Lookups return `Found` or `Absent` instead of
`None` so the not-found branch is an explicit case for the caller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlalchemy import delete, select

from paysvc.services.payment.errors import NotFoundError
from paysvc.services.payment.models import Payment, PaymentStatus


# Autoincrement ids are positive BIGINT-range integers; anything else was never stored.
MAX_PAYMENT_ID = 2**63 - 1


@dataclass(frozen=True)
class Found:
    payment: Payment


@dataclass(frozen=True)
class Absent:
    pass


ABSENT = Absent()

Lookup = Found | Absent


class PaymentStore(ABC):
    """Port for payment persistence.

    Contract:
    - insert() assigns a new unique id and changes nothing else on the entity
    - get_by_id() returns ABSENT for unknown ids (no exception)
    - list queries return an empty list, never fail, when nothing matches
    - ids outside 1..MAX_PAYMENT_ID are never stored and look up as absent
    - update() and delete_by_id() expect the row to exist; callers check first
    - no locking: concurrent writes to one id are last-writer-wins
    """

    @abstractmethod
    def insert(self, payment: Payment) -> Payment:
        """Persist a new payment and return it with its id set."""

    @abstractmethod
    def get_by_id(self, payment_id: int) -> Lookup:
        """Look up one payment."""

    @abstractmethod
    def list_all(self) -> list[Payment]:
        """Return every stored payment."""

    @abstractmethod
    def list_by_status(self, status: PaymentStatus) -> list[Payment]:
        """Return payments whose current status equals `status`."""

    @abstractmethod
    def list_by_sender(self, sender_id: str) -> list[Payment]:
        """Return payments sent by `sender_id`."""

    @abstractmethod
    def list_by_recipient(self, recipient_id: str) -> list[Payment]:
        """Return payments addressed to `recipient_id`."""

    @abstractmethod
    def exists_by_id(self, payment_id: int) -> bool:
        """Whether a payment with this id is stored."""

    @abstractmethod
    def update(self, payment: Payment) -> Payment:
        """Write the full field set of an existing payment."""

    @abstractmethod
    def delete_by_id(self, payment_id: int) -> None:
        """Remove a payment permanently."""


def _storable_id(payment_id: int) -> bool:
    return 1 <= payment_id <= MAX_PAYMENT_ID


class SqlAlchemyPaymentStore(PaymentStore):
    """Relational store backed by the `payments` table, one session per call."""

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory

    def insert(self, payment: Payment) -> Payment:
        with self.session_factory() as db:
            db.add(payment)
            db.commit()
            db.refresh(payment)
            return payment

    def get_by_id(self, payment_id: int) -> Lookup:
        if not _storable_id(payment_id):
            return ABSENT
        with self.session_factory() as db:
            payment = db.get(Payment, payment_id)
            if payment is None:
                return ABSENT
            return Found(payment)

    def _list(self, *criteria) -> list[Payment]:
        with self.session_factory() as db:
            return list(db.execute(select(Payment).where(*criteria).order_by(Payment.id)).scalars())

    def list_all(self) -> list[Payment]:
        return self._list()

    def list_by_status(self, status: PaymentStatus) -> list[Payment]:
        return self._list(Payment.status == status)

    def list_by_sender(self, sender_id: str) -> list[Payment]:
        return self._list(Payment.sender_id == sender_id)

    def list_by_recipient(self, recipient_id: str) -> list[Payment]:
        return self._list(Payment.recipient_id == recipient_id)

    def exists_by_id(self, payment_id: int) -> bool:
        if not _storable_id(payment_id):
            return False
        with self.session_factory() as db:
            return db.execute(select(Payment.id).where(Payment.id == payment_id)).first() is not None

    def update(self, payment: Payment) -> Payment:
        """Copy every column onto the stored row; raise if the row is gone.

        Never inserts, so a payment deleted concurrently stays deleted.
        """

        with self.session_factory() as db:
            current = db.get(Payment, payment.id)
            if current is None:
                raise NotFoundError(payment.id)
            for column in Payment.__table__.columns:
                if not column.primary_key:
                    setattr(current, column.key, getattr(payment, column.key))
            db.commit()
            db.refresh(current)
            return current

    def delete_by_id(self, payment_id: int) -> None:
        with self.session_factory() as db:
            db.execute(delete(Payment).where(Payment.id == payment_id))
            db.commit()
