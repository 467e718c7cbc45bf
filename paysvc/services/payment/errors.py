"""Errors raised by the payment manager and validator.

Each maps to one HTTP status in `main.py`: `ValidationError` to 400,
`NotFoundError` to 404, everything else (including `UnhandledError`) to 500.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One violated rule for one request field."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(Exception):
    """Client input rejected; carries every violated field."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__(self.description)

    @property
    def description(self) -> str:
        return ", ".join(str(error) for error in self.errors)


class NotFoundError(Exception):
    """Referenced payment id does not exist."""

    def __init__(self, payment_id: int) -> None:
        self.payment_id = payment_id
        super().__init__(f"Payment with ID {payment_id} not found")


class UnhandledError(Exception):
    """Programming error that must surface as a 500."""
