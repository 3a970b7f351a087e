#!/usr/bin/env python
"""
Sample data for local development and demos.

Customers are keyed by email and products by name, so re-running only adds
what is missing. Sales are generated only while the sales table is empty
(or when --reset is given, which clears all three tables first).

Usage:
    python scripts/seed.py
    python scripts/seed.py --sales 500 --reset

Environment:
    DATABASE_URL: SQLAlchemy URL (defaults to sqlite:///bizdash.db)
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.bizdash.models import Product, Sale, SaleStatus  # noqa: E402
from app.bizdash.modules.customers.models import Customer  # noqa: E402
from app.bizdash.modules.customers.utils import normalize_email  # noqa: E402
from app.bizdash.utils import utcnow  # noqa: E402

logger = logging.getLogger(__name__)

# (company_name, contact_name, email, phone)
SAMPLE_CUSTOMERS = [
    ("Acme Corporation", "John Smith", "john.smith@acme.com", "+1-555-0123"),
    ("TechStart Solutions", "Sarah Johnson", "sarah@techstart.com", "+1-555-0456"),
    ("Global Industries", "Michael Chen", "mchen@global.com", "+1-555-0789"),
    ("Innovate Labs", "Emily Rodriguez", "emily@innovatelabs.com", "+1-555-0234"),
    ("Digital Dynamics", "David Wilson", "david@digitaldynamics.com", "+1-555-0567"),
    ("Future Systems", "Lisa Thompson", "lisa@futuresystems.com", "+1-555-0890"),
    ("CloudFirst Inc", "Robert Taylor", "robert@cloudfirst.com", "+1-555-0345"),
    ("DataStream Corp", "Jennifer Lee", "jennifer@datastream.com", "+1-555-0678"),
    ("NextGen Technologies", "Christopher Brown", "chris@nextgen.com", "+1-555-0901"),
    ("Smart Solutions LLC", "Amanda Davis", "amanda@smartsolutions.com", "+1-555-0456"),
    ("Enterprise Partners", "Mark Anderson", "mark@enterprisepartners.com", "+1-555-0789"),
    ("Tech Innovators", "Rachel Green", "rachel@techinnovators.com", "+1-555-0123"),
    ("Digital Solutions", "Kevin Martinez", "kevin@digitalsolutions.com", "+1-555-0456"),
    ("Modern Systems", "Nicole White", "nicole@modernsystems.com", "+1-555-0789"),
    ("Agile Enterprises", "Brian Johnson", "brian@agileenterprises.com", "+1-555-0234"),
    ("Cloud Dynamics", "Stephanie Miller", "stephanie@clouddynamics.com", "+1-555-0567"),
    ("Innovation Hub", "Daniel Garcia", "daniel@innovationhub.com", "+1-555-0890"),
    ("Tech Pioneers", "Michelle Clark", "michelle@techpioneers.com", "+1-555-0345"),
    ("Strategic Systems", "Jason Rodriguez", "jason@strategicsystems.com", "+1-555-0678"),
    ("Digital Transformation", "Kimberly Lewis", "kimberly@digitaltransformation.com", "+1-555-0901"),
]

# (name, description, price, category)
SAMPLE_PRODUCTS = [
    ("Professional Software License", "Annual enterprise software license with full feature access", "2999.99", "Software"),
    ("Strategic Consulting Services", "Comprehensive business consulting and strategic planning package", "5000.00", "Services"),
    ("Enterprise Hardware Package", "Complete hardware setup and installation for enterprise environments", "1299.99", "Hardware"),
    ("Cloud Infrastructure Setup", "Full cloud migration and infrastructure configuration", "3500.00", "Services"),
    ("Security Software Suite", "Comprehensive cybersecurity solution with threat monitoring", "4200.00", "Software"),
    ("Data Analytics Platform", "Advanced analytics and business intelligence platform", "6800.00", "Software"),
    ("Mobile App Development", "Custom mobile application development and deployment", "8500.00", "Services"),
    ("Network Infrastructure", "Enterprise-grade networking equipment and configuration", "2200.00", "Hardware"),
    ("Training and Support", "Comprehensive staff training and ongoing technical support", "1800.00", "Services"),
    ("Backup and Recovery System", "Automated backup solution with disaster recovery capabilities", "3200.00", "Software"),
    ("Video Conferencing Solution", "Enterprise video conferencing and collaboration platform", "1500.00", "Software"),
    ("Custom Integration Services", "API integration and custom software development services", "4500.00", "Services"),
    ("Server Hardware Package", "High-performance server hardware with installation", "5500.00", "Hardware"),
    ("Digital Marketing Suite", "Complete digital marketing automation and analytics platform", "2800.00", "Software"),
    ("IT Maintenance Contract", "Annual IT maintenance and support contract", "2000.00", "Services"),
]

DEFAULT_SALES_COUNT = 250


def reset(s: Session) -> None:
    s.execute(delete(Sale))
    s.execute(delete(Product))
    s.execute(delete(Customer))
    s.flush()


def seed(s: Session, *, sales_count: int = DEFAULT_SALES_COUNT, rng: random.Random | None = None) -> dict[str, int]:
    """Insert missing sample rows; returns how many rows of each kind were added."""
    rng = rng or random.Random()
    now = utcnow()
    added = {"customers": 0, "products": 0, "sales": 0}

    for company_name, contact_name, email, phone in SAMPLE_CUSTOMERS:
        email = normalize_email(email)
        if s.scalars(select(Customer).where(Customer.email == email)).first() is None:
            s.add(Customer(company_name=company_name, contact_name=contact_name, email=email, phone=phone, created_at=now, updated_at=now))
            added["customers"] += 1

    for name, description, price, category in SAMPLE_PRODUCTS:
        if s.scalars(select(Product).where(Product.name == name)).first() is None:
            s.add(Product(name=name, description=description, price=Decimal(price), category=category, created_at=now, updated_at=now))
            added["products"] += 1
    s.flush()

    if (s.scalar(select(func.count(Sale.id))) or 0) == 0 and sales_count > 0:
        customers = list(s.scalars(select(Customer).order_by(Customer.id)).all())
        products = list(s.scalars(select(Product).order_by(Product.id)).all())
        if customers and products:
            window = timedelta(days=365)
            for _ in range(sales_count):
                product = rng.choice(products)
                quantity = rng.randint(1, 5)
                s.add(
                    Sale(
                        customer_id=rng.choice(customers).id,
                        product_id=product.id,
                        amount=(Decimal(product.price) * quantity).quantize(Decimal("0.01")),
                        quantity=quantity,
                        sale_date=now - window * rng.random(),
                        status=rng.choice(list(SaleStatus)),
                        created_at=now,
                        updated_at=now,
                    )
                )
            added["sales"] = sales_count
    s.flush()
    return added


def main() -> int:
    from scripts._db_utils import database_url_from_env, script_session

    parser = argparse.ArgumentParser(description="Seed sample customers, products and sales.")
    parser.add_argument("--sales", type=int, default=DEFAULT_SALES_COUNT, help="sales rows to generate when the table is empty")
    parser.add_argument("--reset", action="store_true", help="delete all customers, products and sales first")
    parser.add_argument("--random-seed", type=int, default=None, help="make generated sales reproducible")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    db_url = database_url_from_env()
    with script_session(db_url) as s:
        if args.reset:
            logger.info("Clearing existing customers, products and sales...")
            reset(s)
        added = seed(s, sales_count=args.sales, rng=random.Random(args.random_seed))

    logger.info("Seed complete: customers=%s products=%s sales=%s", added["customers"], added["products"], added["sales"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
