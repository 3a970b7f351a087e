from datetime import datetime

from flask import Blueprint, jsonify, request

from app.bizdash.db import db_session
from app.bizdash.models import Product, Sale
from app.bizdash.queries import (
    DateRange,
    count_rows,
    customers_with_sales_count,
    list_products,
    products_with_sales_count,
    recent_sales,
    sales_summary,
    sales_with_details,
)
from app.bizdash.utils import isoformat, money, parse_int

bp = Blueprint("routes", __name__)
dashboard_bp = Blueprint("dashboard", __name__)

MAX_PAGE = 10_000


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB access, minimal overhead.
    """
    return "ok", 200


def _product_dict(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "category": p.category,
        "price": money(p.price),
    }


def _sale_dict(sale: Sale) -> dict:
    return {
        "id": sale.id,
        "customerId": sale.customer_id,
        "companyName": sale.customer.company_name if sale.customer else None,
        "product": _product_dict(sale.product) if sale.product else None,
        "amount": money(sale.amount),
        "quantity": sale.quantity,
        "status": sale.status.value,
        "saleDate": isoformat(sale.sale_date),
    }


def _bounded_int(key: str, default: int, lo: int, hi: int) -> int:
    n = parse_int(request.args.get(key))
    if n is None:
        return default
    return min(max(n, lo), hi)


def _date_range() -> DateRange | None:
    start = (request.args.get("start") or "").strip()
    end = (request.args.get("end") or "").strip()
    if not start and not end:
        return None
    try:
        return DateRange(
            start=datetime.fromisoformat(start) if start else datetime.min,
            end=datetime.fromisoformat(end) if end else datetime.max,
        )
    except ValueError:
        return None


@dashboard_bp.get("/dashboard/summary")
def dashboard_summary():
    s = db_session()
    recent = _bounded_int("recent", 10, 1, 50)
    return jsonify(
        {
            **count_rows(s),
            "topCustomers": [
                {"id": c.id, "companyName": c.company_name, "salesCount": n}
                for c, n in customers_with_sales_count(s, limit=5)
            ],
            "topProducts": [
                {**_product_dict(p), "salesCount": n}
                for p, n in products_with_sales_count(s, limit=5)
            ],
            "recentSales": [_sale_dict(x) for x in recent_sales(s, limit=recent)],
        }
    )


@dashboard_bp.get("/products")
def products_list():
    s = db_session()
    page = _bounded_int("page", 1, 1, MAX_PAGE)
    limit = _bounded_int("limit", 20, 1, 100)
    category = (request.args.get("category") or "").strip() or None
    rows = list_products(s, category=category, limit=limit, offset=(page - 1) * limit)
    return jsonify({"data": [_product_dict(p) for p in rows], "page": page, "limit": limit})


@dashboard_bp.get("/sales")
def sales_list():
    """Sales newest first; `start`/`end` are ISO dates, an unparsable range is ignored."""
    s = db_session()
    page = _bounded_int("page", 1, 1, MAX_PAGE)
    limit = _bounded_int("limit", 20, 1, 100)
    date_range = _date_range()
    rows = sales_with_details(s, date_range, limit=limit, offset=(page - 1) * limit)
    return jsonify(
        {
            "data": [_sale_dict(x) for x in rows],
            "page": page,
            "limit": limit,
            **sales_summary(s, date_range),
        }
    )
