"""
Request contracts for the customers API.

Each contract takes the raw decoded request (JSON object or query args),
collects every offending field, and raises a single ValidationError listing
them. Values that pass are handed on untrimmed; the service owns
normalization (trim, lower-case email, blank phone -> None).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from app.bizdash.modules.customers.errors import FieldError, ValidationError
from app.bizdash.modules.customers.utils import is_valid_email
from app.bizdash.utils import parse_int

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

SORT_FIELDS = ("companyName", "contactName", "createdAt")
SORT_ORDERS = ("asc", "desc")

# wire name -> attribute name
FIELD_NAMES = {
    "companyName": "company_name",
    "contactName": "contact_name",
    "email": "email",
    "phone": "phone",
}


@dataclass(frozen=True)
class CustomerCreate:
    company_name: str
    contact_name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class CustomerFilters:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str | None = None
    sort: str = "companyName"
    order: str = "asc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _check_name(payload: Mapping[str, Any], key: str, label: str, errs: list[FieldError]) -> None:
    value = payload.get(key)
    if not isinstance(value, str):
        errs.append(FieldError((key,), f"{label} is required." if value is None else f"{label} must be a string."))
        return
    s = value.strip()
    if not s:
        errs.append(FieldError((key,), f"{label} is required."))
    elif len(s) > NAME_MAX_LENGTH:
        errs.append(FieldError((key,), f"{label} must be at most {NAME_MAX_LENGTH} characters."))


def _check_email(payload: Mapping[str, Any], errs: list[FieldError]) -> None:
    value = payload.get("email")
    if not isinstance(value, str):
        errs.append(FieldError(("email",), "Valid email is required." if value is None else "Email must be a string."))
        return
    s = value.strip()
    if len(s) > EMAIL_MAX_LENGTH:
        errs.append(FieldError(("email",), f"Email must be at most {EMAIL_MAX_LENGTH} characters."))
    elif not is_valid_email(s):
        errs.append(FieldError(("email",), "Valid email is required."))


def _check_phone(payload: Mapping[str, Any], errs: list[FieldError]) -> None:
    value = payload.get("phone")
    if value is None:
        return
    if not isinstance(value, str):
        errs.append(FieldError(("phone",), "Phone must be a string."))
    elif len(value.strip()) > PHONE_MAX_LENGTH:
        errs.append(FieldError(("phone",), f"Phone must be at most {PHONE_MAX_LENGTH} characters."))


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError(
            [FieldError((), "Expected a JSON object.")],
            message="Request body must be a JSON object",
        )
    return payload


def validate_create_payload(payload: Any) -> CustomerCreate:
    data = _require_object(payload)
    errs: list[FieldError] = []
    _check_name(data, "companyName", "Company name", errs)
    _check_name(data, "contactName", "Contact name", errs)
    _check_email(data, errs)
    _check_phone(data, errs)
    if errs:
        raise ValidationError(errs)
    return CustomerCreate(
        company_name=data["companyName"],
        contact_name=data["contactName"],
        email=data["email"],
        phone=data.get("phone"),
    )


def validate_update_payload(payload: Any) -> dict[str, Any]:
    """
    Partial update: only keys present in the payload are validated and
    returned (as attribute names). An empty object is a valid no-op update.
    """
    data = _require_object(payload)
    errs: list[FieldError] = []
    if "companyName" in data:
        _check_name(data, "companyName", "Company name", errs)
    if "contactName" in data:
        _check_name(data, "contactName", "Contact name", errs)
    if "email" in data:
        _check_email(data, errs)
    if "phone" in data:
        _check_phone(data, errs)
    if errs:
        raise ValidationError(errs)
    return {attr: data[key] for key, attr in FIELD_NAMES.items() if key in data}


def parse_list_filters(args: Mapping[str, Any], *, default_limit: int = DEFAULT_PAGE_SIZE) -> CustomerFilters:
    """
    Coerce and range-check list query parameters. Blank values fall back to
    their defaults; present but malformed values are errors.
    """
    errs: list[FieldError] = []

    def _int_arg(key: str, default: int, lo: int, hi: int | None) -> int:
        raw = args.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return default
        n = parse_int(raw)
        if n is None:
            errs.append(FieldError((key,), f"{key} must be an integer."))
            return default
        if n < lo or (hi is not None and n > hi):
            bound = f"between {lo} and {hi}" if hi is not None else f"at least {lo}"
            errs.append(FieldError((key,), f"{key} must be {bound}."))
            return default
        return n

    def _choice_arg(key: str, choices: tuple[str, ...], default: str) -> str:
        raw = str(args.get(key) or "").strip()
        if not raw:
            return default
        if raw not in choices:
            errs.append(FieldError((key,), f"{key} must be one of: {', '.join(choices)}."))
            return default
        return raw

    page = _int_arg("page", 1, 1, None)
    limit = _int_arg("limit", default_limit, 1, MAX_PAGE_SIZE)
    sort = _choice_arg("sort", SORT_FIELDS, "companyName")
    order = _choice_arg("order", SORT_ORDERS, "asc")
    search = str(args.get("search") or "").strip() or None

    if errs:
        raise ValidationError(errs, message="Invalid query parameters")
    return CustomerFilters(page=page, limit=limit, search=search, sort=sort, order=order)
