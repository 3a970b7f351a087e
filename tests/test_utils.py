from datetime import datetime
from decimal import Decimal

import pytest

from app.bizdash.modules.customers.utils import (
    extract_email_domain,
    is_valid_email,
    normalize_email,
    normalize_phone,
)
from app.bizdash.utils import isoformat, money, parse_int, utcnow


def test_normalize_email():
    assert normalize_email("  JOHN@Acme.COM ") == "john@acme.com"
    assert normalize_email(None) == ""


def test_normalize_phone():
    assert normalize_phone("  ") is None
    assert normalize_phone(None) is None
    assert normalize_phone(" 555-0100 ") == "555-0100"


def test_is_valid_email():
    assert is_valid_email("john.smith@acme.co.uk")
    assert is_valid_email(" a+tag@b.io ")
    assert not is_valid_email("john@acme")
    assert not is_valid_email("john@.acme.com")
    assert not is_valid_email(None)


def test_extract_email_domain():
    assert extract_email_domain("John@ACME.com") == "acme.com"
    assert extract_email_domain("nope") is None
    assert extract_email_domain(None) is None


@pytest.mark.parametrize(
    "raw, expected",
    [("12", 12), (" 7 ", 7), ("-3", -3), (5, 5), ("", None), (None, None), ("1.5", None), ("abc", None), (True, None),
     ("0_1", None), ("+1", None), ("١٢", None), ("--1", None)],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_money():
    assert money(Decimal("2999.9")) == "2999.90"
    assert money(None) is None


def test_utcnow_is_naive():
    assert utcnow().tzinfo is None
    assert isoformat(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
    assert isoformat(None) is None
