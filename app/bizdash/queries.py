"""
Read-only query helpers for products and sales.

Products and sales have no business rules in this app; these helpers only
shape rows for the dashboard. Functions take an open session as `s`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.bizdash.models import Product, Sale
from app.bizdash.modules.customers.models import Customer


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


def _in_range(stmt, date_range: DateRange | None):
    if date_range is None:
        return stmt
    return stmt.where(Sale.sale_date >= date_range.start, Sale.sale_date <= date_range.end)


def list_products(s: Session, *, category: str | None = None, limit: int = 20, offset: int = 0) -> list[Product]:
    q = select(Product)
    if category:
        q = q.where(Product.category == category)
    q = q.order_by(Product.name.asc(), Product.id.asc()).offset(offset).limit(limit)
    return list(s.scalars(q).all())


def sales_with_details(
    s: Session,
    date_range: DateRange | None = None,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> list[Sale]:
    """Sales newest first; customer and product are loaded with each row."""
    q = _in_range(select(Sale), date_range).order_by(Sale.sale_date.desc(), Sale.id.desc())
    if limit is not None:
        q = q.offset(offset).limit(limit)
    return list(s.scalars(q).all())


def sales_summary(s: Session, date_range: DateRange | None = None) -> dict[str, int]:
    q = _in_range(select(func.count(Sale.id)), date_range)
    return {"totalSales": int(s.scalar(q) or 0)}


def customers_with_sales_count(s: Session, limit: int | None = None) -> list[tuple[Customer, int]]:
    sales_count = func.count(Sale.id)
    q = (
        select(Customer, sales_count.label("sales_count"))
        .outerjoin(Sale, Sale.customer_id == Customer.id)
        .group_by(Customer.id)
        .order_by(sales_count.desc(), Customer.id.asc())
    )
    if limit is not None:
        q = q.limit(limit)
    return [(c, int(n)) for c, n in s.execute(q).all()]


def products_with_sales_count(s: Session, limit: int | None = None) -> list[tuple[Product, int]]:
    sales_count = func.count(Sale.id)
    q = (
        select(Product, sales_count.label("sales_count"))
        .outerjoin(Sale, Sale.product_id == Product.id)
        .group_by(Product.id)
        .order_by(sales_count.desc(), Product.id.asc())
    )
    if limit is not None:
        q = q.limit(limit)
    return [(p, int(n)) for p, n in s.execute(q).all()]


def recent_sales(s: Session, limit: int = 10) -> list[Sale]:
    q = select(Sale).order_by(Sale.created_at.desc(), Sale.id.desc()).limit(limit)
    return list(s.scalars(q).all())


def count_rows(s: Session) -> dict[str, int]:
    return {
        "customers": int(s.scalar(select(func.count(Customer.id))) or 0),
        "products": int(s.scalar(select(func.count(Product.id))) or 0),
        "sales": int(s.scalar(select(func.count(Sale.id))) or 0),
    }
