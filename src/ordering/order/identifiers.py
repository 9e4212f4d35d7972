"""Business order identifiers: ``KNV`` + YYMMDD + 4-digit random suffix, e.g. ``KNV2504123456``."""

import random
import re
from collections.abc import Callable
from datetime import UTC, datetime

from shared.errors import Internal

MAX_ATTEMPTS = 50

ORDER_ID_PATTERN = re.compile(r"^[A-Z]+\d{6}\d{4}$")

_random = random.SystemRandom()


def format_order_id(prefix: str, when: datetime, suffix: int) -> str:
    return f"{prefix}{when:%y%m%d}{suffix:04d}"


def generate_order_id(
    prefix: str = "KNV",
    now: datetime | None = None,
    exists: Callable[[str], bool] | None = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> str:
    """Draw an order id for today, redrawing while ``exists`` reports a collision."""
    when = now or datetime.now(UTC)
    for _ in range(max_attempts):
        candidate = format_order_id(prefix, when, _random.randint(0, 9999))
        if exists is None or not exists(candidate):
            return candidate

    raise Internal("Could not generate a unique order id", attempts=max_attempts)
