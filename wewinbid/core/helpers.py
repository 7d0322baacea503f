import math
import string
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

_BASE36_DIGITS = string.digits + string.ascii_uppercase


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float, ndigits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_tender_reference() -> str:
    """Default tender reference, e.g. WW-M1ABCDEF."""
    return f"WW-{to_base36(int(time.time() * 1000))}"


def days_until(moment: datetime, now: Optional[datetime] = None) -> int:
    """Whole days remaining until `moment`, rounded up."""
    now = now or utcnow()
    return math.ceil((moment - now).total_seconds() / 86400)


def percentage(part: float, whole: float, ndigits: int = 1) -> float:
    if not whole:
        return 0
    return round_half_up(part / whole * 100, ndigits)
