"""
Customer business rules.

INVARIANTS:
- Email is stored trimmed and lower-cased and is unique across live customers.
- Mutations check existence first; a missing id is CustomerNotFound, never a silent no-op.
- updated_at is refreshed on every update; created_at never changes.

UNIQUENESS:
The email pre-check is a fast path that produces a field-attributed error.
It races with concurrent writers, so the storage unique constraint is the
real guarantee; when it fires, the repository raises DuplicateRecord and it
is reported here as EmailExists as well.
"""

from __future__ import annotations

import logging
from typing import Any

from app.bizdash.modules.customers.errors import CustomerNotFound, EmailExists
from app.bizdash.modules.customers.models import Customer
from app.bizdash.modules.customers.repository import CustomerRepository, DuplicateRecord, Page, RecordNotFound
from app.bizdash.modules.customers.schemas import CustomerCreate, CustomerFilters
from app.bizdash.modules.customers.utils import extract_email_domain, normalize_email, normalize_phone, normalize_text

logger = logging.getLogger(__name__)


def sanitize_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Normalize the supplied subset of fields; absent keys stay absent."""
    clean: dict[str, Any] = {}
    if "company_name" in changes:
        clean["company_name"] = normalize_text(changes["company_name"])
    if "contact_name" in changes:
        clean["contact_name"] = normalize_text(changes["contact_name"])
    if "email" in changes:
        clean["email"] = normalize_email(changes["email"])
    if "phone" in changes:
        clean["phone"] = normalize_phone(changes["phone"])
    return clean


class CustomerService:
    def __init__(self, repository: CustomerRepository) -> None:
        self.repository = repository

    def list_customers(self, filters: CustomerFilters) -> Page:
        return self.repository.find_all(filters)

    def get_customer(self, customer_id: int) -> Customer | None:
        """None means "no such customer"; that is an answer, not a fault."""
        return self.repository.find_by_id(customer_id)

    def create_customer(self, data: CustomerCreate) -> Customer:
        fields = sanitize_changes(
            {
                "company_name": data.company_name,
                "contact_name": data.contact_name,
                "email": data.email,
                "phone": data.phone,
            }
        )
        email = fields["email"]

        if self.repository.find_by_email(email) is not None:
            raise EmailExists(email)

        try:
            c = self.repository.create(fields)
        except DuplicateRecord:
            logger.warning("customer.create lost uniqueness race (domain=%s)", extract_email_domain(email))
            raise EmailExists(email) from None

        logger.info("customer.create id=%s", c.id)
        return c

    def update_customer(self, customer_id: int, changes: dict[str, Any]) -> Customer:
        if self.repository.find_by_id(customer_id) is None:
            raise CustomerNotFound(customer_id)

        clean = sanitize_changes(changes)

        if "email" in clean:
            holder = self.repository.find_by_email(clean["email"])
            if holder is not None and holder.id != customer_id:
                raise EmailExists(clean["email"])

        try:
            c = self.repository.update(customer_id, clean)
        except RecordNotFound:
            # Deleted between the existence check and the write.
            raise CustomerNotFound(customer_id) from None
        except DuplicateRecord:
            logger.warning(
                "customer.update lost uniqueness race id=%s (domain=%s)",
                customer_id,
                extract_email_domain(clean.get("email")),
            )
            raise EmailExists(clean.get("email", "")) from None

        logger.info("customer.update id=%s fields=%s", customer_id, sorted(clean.keys()))
        return c

    def delete_customer(self, customer_id: int) -> None:
        if self.repository.find_by_id(customer_id) is None:
            raise CustomerNotFound(customer_id)
        try:
            self.repository.delete(customer_id)
        except RecordNotFound:
            raise CustomerNotFound(customer_id) from None
        logger.info("customer.delete id=%s", customer_id)
