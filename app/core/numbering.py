import random
import time
from typing import Optional

from app.core.constants import QUOTE_NUMBER_PREFIX, TICKET_PREFIX


def generate_ticket_number(now_ms: Optional[int] = None) -> str:
    """``EG`` followed by the last eight digits of the epoch in milliseconds.

    Not checked against the store: two submissions in the same
    millisecond get the same number.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{TICKET_PREFIX}{str(now_ms)[-8:].zfill(8)}"


def generate_quote_number() -> str:
    """``EG-`` followed by six random digits; callers check uniqueness."""
    return f"{QUOTE_NUMBER_PREFIX}{random.randint(100000, 999999)}"
