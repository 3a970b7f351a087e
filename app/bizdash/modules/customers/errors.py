from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One offending request field; `path` is the key path into the payload."""

    path: tuple[str, ...]
    message: str

    def to_dict(self) -> dict:
        return {"path": list(self.path), "message": self.message}


class CustomerError(Exception):
    """Base class for customer domain errors raised by the service layer."""

    message = "Customer error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def details(self) -> list[FieldError]:
        return []


class ValidationError(CustomerError):
    message = "Validation error"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors)

    @property
    def details(self) -> list[FieldError]:
        return self.errors


class CustomerNotFound(CustomerError):
    message = "Customer not found"

    def __init__(self, customer_id: int) -> None:
        super().__init__()
        self.customer_id = customer_id


class EmailExists(CustomerError):
    message = "Email already exists"

    def __init__(self, email: str) -> None:
        super().__init__()
        self.email = email

    @property
    def details(self) -> list[FieldError]:
        return [FieldError(("email",), "A customer with this email already exists.")]
