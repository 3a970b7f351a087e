from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

# ASCII digits only: no "+", no "_" separators, no other scripts' digits.
_INT_RE = re.compile(r"-?[0-9]+")


def utcnow() -> datetime:
    """Naive UTC timestamp; all DateTime columns are timezone=False."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def money(value: Decimal | None) -> str | None:
    """Render Numeric(10, 2) values as fixed two-decimal strings for JSON."""
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


def parse_int(raw: Any) -> int | None:
    """Parse an integer from a URL segment or query value; None if it is not one."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    s = str(raw if raw is not None else "").strip()
    if not _INT_RE.fullmatch(s):
        return None
    try:
        return int(s)
    except ValueError:
        # Past the interpreter's int-from-string digit limit.
        return None
