from __future__ import annotations
from datetime import datetime, date
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional
import math
import time
import requests

ZERO = Decimal("0")
CENTS = Decimal("0.01")
# amounts at or beyond 10**18 are treated as unusable; keeps sums inside the default context
MAX_AMOUNT = Decimal("1e18")
UNKNOWN_LABEL = "Unknown"

# ─────────────────────────────
# Date helpers
# ─────────────────────────────
def parse_record_date(raw: Any) -> Optional[date]:
    """
    Accepts a date, datetime or ISO string; returns the calendar date or None.
    Timestamps keep their own wall-clock date (no zone conversion).
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None
    raw = raw.strip()
    try:
        # Fast path for YYYY-MM-DD
        if len(raw) == 10 and raw[4] == "-" and raw[7] == "-":
            y, m, d = raw.split("-")
            return date(int(y), int(m), int(d))
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None

def month_label(d: Optional[date]) -> str:
    """'Mar 2024' style bucket label."""
    if d is None:
        return UNKNOWN_LABEL
    return d.strftime("%b %Y")

def day_label(d: Optional[date]) -> str:
    """'Jan 1' style axis label (no zero padding)."""
    if d is None:
        return UNKNOWN_LABEL
    return d.strftime("%b ") + str(d.day)

# ─────────────────────────────
# Math / display helpers
# ─────────────────────────────
def parse_amount(raw: Any) -> Optional[Decimal]:
    """Numeric or numeric-looking string -> Decimal; None when unusable."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        # whole string must parse: '12abc' is unusable, not 12
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or abs(value) >= MAX_AMOUNT:
        return None
    return value

def parse_count(raw: Any) -> int:
    """Attendance-style integer field; anything missing, fractional or unusable is 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    amount = parse_amount(raw)
    if amount is None or amount != amount.to_integral_value():
        return 0
    return int(amount)

def round_half_up(value: Decimal) -> int:
    # matches the reporting UI: 0.5 always rounds towards +inf
    return math.floor(value + Decimal("0.5"))

def whole_percent(numer: Any, denom: Any) -> int:
    if not denom:
        return 0
    return round_half_up(Decimal(numer) / Decimal(denom) * 100)

def to_cents(amount: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS)

def capitalize_label(value: str) -> str:
    """First character upper-cased, the rest untouched ('building_fund' -> 'Building_fund')."""
    return value[:1].upper() + value[1:]

# ─────────────────────────────
# HTTP helpers
# ─────────────────────────────
def request_json(method: str, url: str, *, headers=None, params=None, json_body=None,
                 timeout: int = 30, retries: int = 0, backoff: float = 0.6) -> Any:
    """Tiny wrapper with optional naive retries + exponential backoff."""
    attempt = 0
    while True:
        try:
            r = requests.request(method.upper(), url, headers=headers, params=params, json=json_body, timeout=timeout)
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError):
            if attempt >= retries:
                raise
            time.sleep(backoff * (2 ** attempt))
            attempt += 1

def auth_headers(api_key: str, bearer: Optional[str] = None) -> Dict[str, str]:
    # The store wants the project key on every call; the bearer is the user's
    # access token when signed in, the project key otherwise.
    return {
        "apikey": api_key,
        "Authorization": f"Bearer {bearer or api_key}",
        "Accept": "application/json",
    }
