from __future__ import annotations

import re

# Pragmatic address check: one "@", no whitespace, a dotted domain with a 2+ char TLD.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s.]+(?:\.[^@\s.]+)*\.[A-Za-z]{2,}$")


def normalize_text(value: str | None) -> str:
    return (value or "").strip()


def normalize_email(email: str | None) -> str:
    """
    Canonical form used for storage and uniqueness checks.

    Examples:
        >>> normalize_email("  JOHN@Acme.COM ")
        'john@acme.com'
    """
    return normalize_text(email).lower()


def normalize_phone(phone: str | None) -> str | None:
    """Trimmed phone, or None when blank."""
    return normalize_text(phone) or None


def is_valid_email(email: str | None) -> bool:
    s = (email or "").strip()
    if not s or ".." in s:
        return False
    return bool(_EMAIL_RE.match(s))


def extract_email_domain(email: str | None) -> str | None:
    s = normalize_email(email)
    if "@" not in s:
        return None
    domain = s.rsplit("@", 1)[1]
    return domain or None
