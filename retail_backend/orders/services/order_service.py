# orders/services/order_service.py

"""
======================================================
PATH: orders/services/order_service.py
======================================================
ORDER MUTATION SERVICE

Every operation:
- runs in one transaction
- locks the order row first (select_for_update), so pricing work on one
  order is serialized
- requires the order to be UNPAID
- re-prices the order from the lines as stored, then persists pricing

Input validation (quantity, coupon code) happens before any read.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from catalog.models import Product
from core.clock import resolve_clock
from core.exceptions import NotFoundError, ValidationFailedError
from core.money import to_int_qty
from customers.models import Customer
from discounts.services.coupon_redemption import normalize_code, redeem_coupon, release_coupon
from orders.models import Order, OrderLine
from orders.services.order_calculator import recalculate, save_pricing
from orders.services.order_lifecycle import ensure_mutable
from orders.services.order_numbers import next_order_number

logger = logging.getLogger("orders")

ORDER_NUMBER_ATTEMPTS = 5


class OrderNotFoundError(NotFoundError):
    """Order not found."""


class OrderLineNotFoundError(NotFoundError):
    """Order line not found."""


class ProductUnavailableError(NotFoundError):
    """Product not found or inactive."""


# ============================================================
# HELPERS
# ============================================================


def _positive_qty(value) -> int:
    try:
        qty = to_int_qty(value)
    except ValueError as exc:
        raise ValidationFailedError(str(exc)) from exc
    if qty <= 0:
        raise ValidationFailedError("Quantity must be > 0.")
    return qty


def get_locked_order(order_id) -> Order:
    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError()
    return order


def load_lines(order: Order) -> list[OrderLine]:
    return list(OrderLine.objects.filter(order_id=order.pk).select_related("product").order_by("id"))


def reprice(order: Order, *, clock=None) -> Order:
    """Recalculate from the lines currently stored and persist pricing."""
    lines = load_lines(order)
    recalculate(order, lines, clock=clock)
    save_pricing(order, lines)
    return order


# ============================================================
# OPERATIONS
# ============================================================


@transaction.atomic
def create_order(*, customer_id=None, clock=None) -> Order:
    if customer_id is not None and not Customer.objects.filter(pk=customer_id).exists():
        raise NotFoundError("Customer not found.")

    now = resolve_clock(clock).now()

    for attempt in range(ORDER_NUMBER_ATTEMPTS):
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    order_number=next_order_number(now),
                    customer_id=customer_id,
                    status=Order.STATUS_UNPAID,
                    created_at=now,
                    updated_at=now,
                )
            break
        except IntegrityError:
            # another request took the same number between check and insert
            if attempt == ORDER_NUMBER_ATTEMPTS - 1:
                raise

    logger.info("Order created", extra={"order_id": order.id, "order_number": order.order_number})
    return order


@transaction.atomic
def add_line(*, order_id, product_id, quantity, clock=None) -> OrderLine:
    qty = _positive_qty(quantity)

    order = get_locked_order(order_id)
    ensure_mutable(order)

    product = Product.objects.filter(pk=product_id, is_active=True).first()
    if product is None:
        raise ProductUnavailableError()

    line = OrderLine.objects.create(
        order=order,
        product=product,
        product_name_snapshot=product.name,
        unit_price=product.unit_price,
        quantity=qty,
        line_total=product.unit_price * qty,
    )

    reprice(order, clock=clock)
    line.refresh_from_db()
    return line


@transaction.atomic
def update_line(*, order_id, line_id, quantity, clock=None) -> OrderLine:
    qty = _positive_qty(quantity)

    order = get_locked_order(order_id)
    ensure_mutable(order)

    line = OrderLine.objects.filter(pk=line_id, order_id=order.pk).first()
    if line is None:
        raise OrderLineNotFoundError()

    line.quantity = qty
    line.save(update_fields=["quantity"])

    reprice(order, clock=clock)
    line.refresh_from_db()
    return line


@transaction.atomic
def remove_line(*, order_id, line_id, clock=None) -> Order:
    order = get_locked_order(order_id)
    ensure_mutable(order)

    deleted, _ = OrderLine.objects.filter(pk=line_id, order_id=order.pk).delete()
    if not deleted:
        raise OrderLineNotFoundError()

    # lines are re-read from storage inside reprice()
    return reprice(order, clock=clock)


@transaction.atomic
def apply_coupon(*, order_id, code, customer_id=None, clock=None) -> Order:
    code = normalize_code(code)
    if not code:
        raise ValidationFailedError("Coupon code is required.")

    order = get_locked_order(order_id)
    ensure_mutable(order)

    redeem_coupon(order=order, code=code, customer_id=customer_id, clock=clock)

    return reprice(order, clock=clock)


@transaction.atomic
def remove_coupon(*, order_id, clock=None) -> Order:
    order = get_locked_order(order_id)
    ensure_mutable(order)

    release_coupon(order=order)

    return reprice(order, clock=clock)
