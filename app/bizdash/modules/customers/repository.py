"""
Customer data access.

Repositories shape data and talk to storage; they hold no business rules.
Reads signal absence with None. Mutations that miss raise RecordNotFound,
and a violated unique constraint surfaces as DuplicateRecord. Classifying
either as a domain error is the service's job.
"""

from __future__ import annotations

import abc
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.bizdash.modules.customers.models import Customer
from app.bizdash.modules.customers.schemas import CustomerFilters
from app.bizdash.utils import utcnow

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "companyName": Customer.company_name,
    "contactName": Customer.contact_name,
    "createdAt": Customer.created_at,
}

SORT_ATTRS = {
    "companyName": "company_name",
    "contactName": "contact_name",
    "createdAt": "created_at",
}

MUTABLE_FIELDS = frozenset({"company_name", "contact_name", "email", "phone"})

# Largest key a BIGINT-backed id or OFFSET can carry.
MAX_STORAGE_INT = 2**63 - 1


class RecordNotFound(LookupError):
    pass


class DuplicateRecord(Exception):
    pass


@dataclass(frozen=True)
class Page:
    data: list[Customer] = field(default_factory=list)
    page: int = 1
    limit: int = 20
    total: int = 0

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


def next_updated_at(previous: datetime | None) -> datetime:
    """Current time, nudged forward so updated_at strictly increases."""
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _check_fields(data: dict[str, Any]) -> None:
    unknown = set(data) - MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown customer fields: {', '.join(sorted(unknown))}")

def _storable_id(customer_id: int) -> bool:
    return 1 <= customer_id <= MAX_STORAGE_INT



class CustomerRepository(abc.ABC):
    @abc.abstractmethod
    def find_all(self, filters: CustomerFilters) -> Page: ...

    @abc.abstractmethod
    def find_by_id(self, customer_id: int) -> Customer | None: ...

    @abc.abstractmethod
    def find_by_email(self, email: str) -> Customer | None:
        """Exact match; callers normalize the email first."""

    @abc.abstractmethod
    def create(self, data: dict[str, Any]) -> Customer: ...

    @abc.abstractmethod
    def update(self, customer_id: int, data: dict[str, Any]) -> Customer: ...

    @abc.abstractmethod
    def delete(self, customer_id: int) -> None: ...


class SqlAlchemyCustomerRepository(CustomerRepository):
    """
    Each call runs in its own short-lived session and commits before
    returning, so every repository call is one storage transaction.
    Returned rows are detached (the sessionmaker uses expire_on_commit=False).
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def find_all(self, filters: CustomerFilters) -> Page:
        q = select(Customer)
        count_q = select(func.count()).select_from(Customer)
        if filters.search:
            cond = or_(
                Customer.company_name.icontains(filters.search, autoescape=True),
                Customer.contact_name.icontains(filters.search, autoescape=True),
            )
            q = q.where(cond)
            count_q = count_q.where(cond)

        column = SORT_COLUMNS[filters.sort]
        ordering = column.desc() if filters.order == "desc" else column.asc()
        q = q.order_by(ordering, Customer.id.asc())

        with self._session_factory() as s:
            total = int(s.scalar(count_q) or 0)
            # A page past the end is empty; its offset may not fit a storage integer.
            rows = []
            if filters.offset < total:
                rows = list(s.scalars(q.offset(filters.offset).limit(filters.limit)).all())
        return Page(data=rows, page=filters.page, limit=filters.limit, total=total)

    @staticmethod
    def _get(s: Session, customer_id: int) -> Customer | None:
        # Ids outside the key range cannot exist, and the driver rejects them.
        if not _storable_id(customer_id):
            return None
        return s.get(Customer, customer_id)

    def find_by_id(self, customer_id: int) -> Customer | None:
        with self._session_factory() as s:
            return self._get(s, customer_id)

    def find_by_email(self, email: str) -> Customer | None:
        with self._session_factory() as s:
            return s.scalars(select(Customer).where(Customer.email == email).limit(1)).first()

    def create(self, data: dict[str, Any]) -> Customer:
        _check_fields(data)
        now = utcnow()
        c = Customer(**data, created_at=now, updated_at=now)
        with self._session_factory() as s:
            s.add(c)
            self._commit(s)
        return c

    def update(self, customer_id: int, data: dict[str, Any]) -> Customer:
        _check_fields(data)
        with self._session_factory() as s:
            c = self._get(s, customer_id)
            if c is None:
                raise RecordNotFound(f"customers.id={customer_id}")
            for attr, value in data.items():
                setattr(c, attr, value)
            c.updated_at = next_updated_at(c.updated_at)
            self._commit(s)
        return c

    def delete(self, customer_id: int) -> None:
        with self._session_factory() as s:
            c = self._get(s, customer_id)
            if c is None:
                raise RecordNotFound(f"customers.id={customer_id}")
            s.delete(c)
            s.commit()

    @staticmethod
    def _commit(s: Session) -> None:
        # Inputs are validated upstream, so the only constraint a customer
        # write can still violate is uq_customers_email.
        try:
            s.commit()
        except IntegrityError as e:
            s.rollback()
            logger.debug("customers write rejected by constraint: %s", e.orig)
            raise DuplicateRecord("customers.email") from e


class InMemoryCustomerRepository(CustomerRepository):
    """
    Dict-backed stand-in with the same contract, including the email
    unique constraint. Used by tests and local experiments.
    """

    def __init__(self) -> None:
        self._rows: dict[int, Customer] = {}
        self._next_id = 1

    @staticmethod
    def _copy(c: Customer) -> Customer:
        return Customer(
            id=c.id,
            company_name=c.company_name,
            contact_name=c.contact_name,
            email=c.email,
            phone=c.phone,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )

    def _email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        return any(c.email == email and c.id != exclude_id for c in self._rows.values())

    def find_all(self, filters: CustomerFilters) -> Page:
        rows = sorted(self._rows.values(), key=lambda c: c.id)
        if filters.search:
            term = filters.search.lower()
            rows = [c for c in rows if term in c.company_name.lower() or term in c.contact_name.lower()]
        attr = SORT_ATTRS[filters.sort]
        # sorted() is stable, so equal keys keep id order in both directions.
        rows = sorted(rows, key=lambda c: getattr(c, attr), reverse=filters.order == "desc")
        window = rows[filters.offset : filters.offset + filters.limit]
        return Page(
            data=[self._copy(c) for c in window],
            page=filters.page,
            limit=filters.limit,
            total=len(rows),
        )

    def find_by_id(self, customer_id: int) -> Customer | None:
        c = self._rows.get(customer_id)
        return self._copy(c) if c is not None else None

    def find_by_email(self, email: str) -> Customer | None:
        for c in self._rows.values():
            if c.email == email:
                return self._copy(c)
        return None

    def create(self, data: dict[str, Any]) -> Customer:
        _check_fields(data)
        if self._email_taken(data.get("email", "")):
            raise DuplicateRecord("customers.email")
        now = utcnow()
        c = Customer(id=self._next_id, **data, created_at=now, updated_at=now)
        self._rows[c.id] = c
        self._next_id += 1
        return self._copy(c)

    def update(self, customer_id: int, data: dict[str, Any]) -> Customer:
        _check_fields(data)
        c = self._rows.get(customer_id)
        if c is None:
            raise RecordNotFound(f"customers.id={customer_id}")
        if "email" in data and self._email_taken(data["email"], exclude_id=customer_id):
            raise DuplicateRecord("customers.email")
        for attr, value in data.items():
            setattr(c, attr, value)
        c.updated_at = next_updated_at(c.updated_at)
        return self._copy(c)

    def delete(self, customer_id: int) -> None:
        if self._rows.pop(customer_id, None) is None:
            raise RecordNotFound(f"customers.id={customer_id}")
