# orders/services/order_calculator.py

"""
======================================================
PATH: orders/services/order_calculator.py
======================================================
ORDER PRICING RECALCULATOR

The ONLY code allowed to write order/line pricing fields.

Per line:
    line_discount = best discount (discounts.services.discount_engine)
    line_total    = clamp(unit_price * quantity - line_discount, 0, unit_price * quantity)

Per order:
    subtotal       = sum(unit_price * quantity)
    discount_total = sum(line_discount)
    tax_total      = 0
    grand_total    = max(0, subtotal - discount_total + tax_total)

recalculate() mutates in memory only; save_pricing() persists exactly the
pricing fields. Running recalculate twice without an intervening change
yields identical values.
"""

from __future__ import annotations

from typing import Sequence

from core.clock import resolve_clock
from core.exceptions import NotFoundError
from core.money import ZERO, money
from discounts.services.discount_engine import (
    best_discount_for_line,
    load_active_discounts,
    order_has_coupon,
)
from orders.models import Order, OrderLine


class LineProductMissingError(NotFoundError):
    """Product for an order line no longer exists."""


def recalculate(order: Order, lines: Sequence[OrderLine], *, clock=None) -> Order:
    clock = resolve_clock(clock)

    discounts = load_active_discounts(clock=clock)
    has_coupon = order_has_coupon(order)

    subtotal = ZERO
    discount_total = ZERO

    for line in lines:
        if line.product_id is None or line.product is None:
            raise LineProductMissingError(
                f"Product for line '{line.product_name_snapshot}' no longer exists."
            )

        gross = money(line.gross_amount)
        discount = best_discount_for_line(order, line, discounts=discounts, has_coupon=has_coupon)
        discount = min(max(money(discount), ZERO), gross)

        line.line_discount = discount
        line.line_total = min(max(gross - discount, ZERO), gross)

        subtotal += gross
        discount_total += discount

    order.subtotal = money(subtotal)
    order.discount_total = money(discount_total)
    order.tax_total = ZERO
    order.grand_total = max(ZERO, order.subtotal - order.discount_total + order.tax_total)
    order.updated_at = clock.now()

    return order


def save_pricing(order: Order, lines: Sequence[OrderLine]) -> None:
    if lines:
        OrderLine.objects.bulk_update(list(lines), ["line_discount", "line_total"])

    order.save(update_fields=["subtotal", "discount_total", "tax_total", "grand_total", "updated_at"])
