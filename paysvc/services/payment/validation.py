"""Field-level checks for payment creation requests.

Rules are evaluated in order and all of them run; the caller gets every
violation at once rather than only the first.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from paysvc.services.payment.errors import FieldError, ValidationError
from paysvc.services.payment.schemas import CreatePaymentRequest


MIN_AMOUNT = Decimal("0.01")
# Matches the NUMERIC(19, 2) amount column.
MAX_AMOUNT_INTEGER_DIGITS = 17
MAX_AMOUNT_SCALE = 2
CURRENCY_LENGTH = 3
MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class Rule:
    """A predicate that must hold for `field`, with the message used when it doesn't."""

    field: str
    message: str
    check: Callable[[CreatePaymentRequest], bool]


@dataclass(frozen=True)
class ValidatedPayment:
    """Creation input that passed every rule."""

    amount: Decimal
    currency: str
    sender_id: str
    recipient_id: str
    description: str | None


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def _fits_amount_column(amount: Decimal) -> bool:
    """Whether `amount` is stored exactly, ignoring trailing zeros (100.500 fits)."""

    _, digits, exponent = amount.as_tuple()
    if not isinstance(exponent, int):
        return False
    significant = list(digits)
    while len(significant) > 1 and significant[-1] == 0:
        significant.pop()
        exponent += 1
    integer_digits = max(len(significant) + exponent, 0)
    return exponent >= -MAX_AMOUNT_SCALE and integer_digits <= MAX_AMOUNT_INTEGER_DIGITS


CREATE_PAYMENT_RULES: tuple[Rule, ...] = (
    Rule("amount", "Amount is required", lambda r: r.amount is not None),
    Rule("amount", "Amount must be greater than 0", lambda r: r.amount is None or r.amount > MIN_AMOUNT),
    Rule(
        "amount",
        f"Amount must have at most {MAX_AMOUNT_INTEGER_DIGITS} integer digits and {MAX_AMOUNT_SCALE} decimals",
        lambda r: r.amount is None or _fits_amount_column(r.amount),
    ),
    Rule("currency", "Currency is required", lambda r: _present(r.currency)),
    Rule(
        "currency",
        "Currency must be 3 characters (e.g., USD, EUR)",
        lambda r: r.currency is None or len(r.currency) == CURRENCY_LENGTH,
    ),
    Rule("senderId", "Sender ID is required", lambda r: _present(r.sender_id)),
    Rule("recipientId", "Recipient ID is required", lambda r: _present(r.recipient_id)),
    Rule(
        "description",
        f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
        lambda r: r.description is None or len(r.description) <= MAX_DESCRIPTION_LENGTH,
    ),
)


def collect_errors(req: CreatePaymentRequest) -> list[FieldError]:
    """Return every violated rule, in rule order."""

    return [FieldError(rule.field, rule.message) for rule in CREATE_PAYMENT_RULES if not rule.check(req)]


def validate_create_request(req: CreatePaymentRequest) -> ValidatedPayment:
    """Check a creation request; raise `ValidationError` listing all violations."""

    errors = collect_errors(req)
    if errors:
        raise ValidationError(errors)
    return ValidatedPayment(
        amount=req.amount,
        currency=req.currency,
        sender_id=req.sender_id,
        recipient_id=req.recipient_id,
        description=req.description,
    )
