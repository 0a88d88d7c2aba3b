# orders/services/reports.py

"""
SALES REPORTS (PAID ORDERS ONLY)

Day bucketing uses the UTC date of the order's last update, which for a paid
order is the moment it was paid. Date ranges are inclusive of both end days.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Optional

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate

from core.clock import resolve_clock
from core.money import ZERO, money
from orders.models import Order, OrderLine

DEFAULT_WINDOW_DAYS = 30


def resolve_range(*, date_from: Optional[date], date_to: Optional[date], clock=None) -> tuple[datetime, datetime]:
    """[start, end) as aware UTC datetimes; defaults to the last 30 days."""
    today = resolve_clock(clock).now().astimezone(dt_timezone.utc).date()
    end_day = date_to or today
    start_day = date_from or (today - timedelta(days=DEFAULT_WINDOW_DAYS))

    start = datetime.combine(start_day, time.min, tzinfo=dt_timezone.utc)
    end = datetime.combine(end_day, time.min, tzinfo=dt_timezone.utc) + timedelta(days=1)
    return start, end


def _paid_orders(start: datetime, end: datetime):
    return Order.objects.filter(status=Order.STATUS_PAID, updated_at__gte=start, updated_at__lt=end)


def sales_by_day(*, date_from=None, date_to=None, clock=None) -> list[dict]:
    start, end = resolve_range(date_from=date_from, date_to=date_to, clock=clock)

    rows = (
        _paid_orders(start, end)
        .annotate(day=TruncDate("updated_at", tzinfo=dt_timezone.utc))
        .values("day")
        .annotate(
            orders_count=Count("id"),
            subtotal=Sum("subtotal"),
            discount_total=Sum("discount_total"),
            tax_total=Sum("tax_total"),
            grand_total=Sum("grand_total"),
        )
        .order_by("day")
    )

    return [
        {
            "date": row["day"],
            "orders_count": row["orders_count"],
            "subtotal": money(row["subtotal"] or ZERO),
            "discount_total": money(row["discount_total"] or ZERO),
            "tax_total": money(row["tax_total"] or ZERO),
            "grand_total": money(row["grand_total"] or ZERO),
        }
        for row in rows
    ]


def sales_by_product(*, date_from=None, date_to=None, category_id=None, clock=None) -> list[dict]:
    start, end = resolve_range(date_from=date_from, date_to=date_to, clock=clock)

    qs = OrderLine.objects.filter(
        order__status=Order.STATUS_PAID,
        order__updated_at__gte=start,
        order__updated_at__lt=end,
    )
    if category_id is not None:
        qs = qs.filter(product__category_id=category_id)

    rows = (
        qs.values("product_id", "product_name_snapshot")
        .annotate(quantity_sold=Sum("quantity"), revenue=Sum("line_total"))
        .order_by("-revenue", "product_id")
    )

    return [
        {
            "product_id": row["product_id"],
            "product_name": row["product_name_snapshot"],
            "quantity_sold": int(row["quantity_sold"] or 0),
            "revenue": money(row["revenue"] or ZERO),
        }
        for row in rows
    ]


def discount_impact(*, date_from=None, date_to=None, clock=None) -> list[dict]:
    start, end = resolve_range(date_from=date_from, date_to=date_to, clock=clock)

    rows = (
        _paid_orders(start, end)
        .annotate(day=TruncDate("updated_at", tzinfo=dt_timezone.utc))
        .values("day")
        .annotate(discount_total=Sum("discount_total"))
        .order_by("day")
    )

    return [{"date": row["day"], "discount_total": money(row["discount_total"] or ZERO)} for row in rows]
