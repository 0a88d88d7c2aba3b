# orders/services/order_numbers.py

"""
Order numbers: <PREFIX>-<UTC yyyyMMddHHmmssfff>

Two orders created in the same millisecond get a "-2", "-3", ... suffix.
"""

from __future__ import annotations

from datetime import timezone as dt_timezone

from django.conf import settings

from orders.models import Order


def base_order_number(now) -> str:
    prefix = getattr(settings, "ORDER_NUMBER_PREFIX", "ORD") or "ORD"
    utc = now.astimezone(dt_timezone.utc)
    return f"{prefix}-{utc:%Y%m%d%H%M%S}{utc.microsecond // 1000:03d}"


def next_order_number(now) -> str:
    base = base_order_number(now)
    candidate = base
    n = 1
    while Order.objects.filter(order_number=candidate).exists():
        n += 1
        candidate = f"{base}-{n}"
    return candidate
