"""Human-readable order numbers: ``AMP-<YYYYMMDD>-<6 upper-case hex>``."""

import re
from datetime import UTC, datetime
from uuid import uuid4

ORDER_NUMBER_PREFIX = "AMP"
ORDER_NUMBER_PATTERN = re.compile(r"^AMP-\d{8}-[0-9A-F]{6}$")


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{uuid4().hex[:6].upper()}"
