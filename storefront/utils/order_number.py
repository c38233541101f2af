# storefront/utils/order_number.py
import re
import secrets
import string
from datetime import datetime, timezone

_ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 5

ORDER_NUMBER_RE = re.compile(r"^ORD-\d{8}-[A-Z0-9]{5}$")


def generate_order_number(now: datetime | None = None) -> str:
    """ORD-YYYYMMDD-XXXXX, UTC date plus a random base36 suffix."""
    now = now or datetime.now(timezone.utc)
    date_str = now.astimezone(timezone.utc).strftime("%Y%m%d")
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"ORD-{date_str}-{suffix}"
