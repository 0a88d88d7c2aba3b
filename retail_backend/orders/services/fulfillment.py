# orders/services/fulfillment.py

"""
FULFILLMENT (APPLICATION SERVICE)

Purpose:
- pay_order:  turn an UNPAID order into a PAID sale, debiting stock.
- void_order: cancel an UNPAID order. No stock effect.

Hard rules for pay_order (one transaction, all or nothing):
1) lock the order; it must be UNPAID with at least one line
2) re-price from current discounts and persist pricing
3) lock inventory rows in ascending product id
4) check every product's on-hand against the summed requested quantity
   BEFORE any debit
5) debit snapshots, one ORDER ledger entry per line (ref_id = order id)
6) flip to PAID and append one status history row

Any failure rolls back every step; the order stays UNPAID with its previous
totals and stock is untouched.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from django.db import transaction

from core.clock import resolve_clock
from core.exceptions import InsufficientStockError, InvalidStateError
from inventory.models import StockLedgerEntry
from inventory.services.ledger import append_ledger_entry, lock_inventory_items
from inventory.services.stock_adjustments import InventoryMissingError
from orders.models import Order, OrderStatusHistory
from orders.services.order_calculator import recalculate, save_pricing
from orders.services.order_lifecycle import validate_transition
from orders.services.order_service import get_locked_order, load_lines

logger = logging.getLogger("orders")

ORDER_PAID_REASON = "Order paid"


class EmptyOrderError(InvalidStateError):
    """Order has no lines."""


class OutOfStockError(InsufficientStockError):
    """Insufficient stock."""

    def __init__(self, *, product_id, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for '{product_name}'. Available: {available}, requested: {requested}."
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


def _user_or_none(user):
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return user


def _append_history(*, order: Order, from_status: str, to_status: str, changed_by, reason: str = "", at) -> OrderStatusHistory:
    return OrderStatusHistory.objects.create(
        order=order,
        from_status=from_status,
        to_status=to_status,
        changed_by=_user_or_none(changed_by),
        reason=reason or "",
        changed_at=at,
    )


@transaction.atomic
def pay_order(*, order_id, changed_by=None, clock=None) -> Order:
    clock = resolve_clock(clock)

    order = get_locked_order(order_id)
    validate_transition(order=order, target_status=Order.STATUS_PAID)

    lines = load_lines(order)
    if not lines:
        raise EmptyOrderError("Cannot pay an order with no lines.")

    # 1) price against the discounts valid right now
    recalculate(order, lines, clock=clock)
    save_pricing(order, lines)

    # 2) requested quantity per product (a product may appear on several lines)
    requested: "OrderedDict[int, int]" = OrderedDict()
    names: dict[int, str] = {}
    for line in lines:
        requested[line.product_id] = requested.get(line.product_id, 0) + int(line.quantity)
        names.setdefault(line.product_id, line.product_name_snapshot)

    items = lock_inventory_items(requested.keys())

    # 3) check everything before touching anything
    for product_id in sorted(requested):
        item = items.get(product_id)
        if item is None:
            raise InventoryMissingError(f"Inventory missing for product '{names[product_id]}'.")
        if item.quantity_on_hand < requested[product_id]:
            raise OutOfStockError(
                product_id=product_id,
                product_name=names[product_id],
                available=item.quantity_on_hand,
                requested=requested[product_id],
            )

    # 4) debit + ledger
    now = clock.now()
    for line in lines:
        append_ledger_entry(
            product_id=line.product_id,
            ref_type=StockLedgerEntry.RefType.ORDER,
            ref_id=order.id,
            quantity_delta=-int(line.quantity),
            reason=ORDER_PAID_REASON,
            occurred_at=now,
        )

    for product_id in sorted(requested):
        item = items[product_id]
        item.quantity_on_hand = item.quantity_on_hand - requested[product_id]
        item.updated_at = now
        item.save(update_fields=["quantity_on_hand", "updated_at"])

    # 5) status flip + history
    previous = order.status
    order.status = Order.STATUS_PAID
    order.updated_at = now
    order.save(update_fields=["status", "updated_at"])

    _append_history(order=order, from_status=previous, to_status=order.status, changed_by=changed_by, at=now)

    logger.info(
        "Order paid",
        extra={"order_id": order.id, "order_number": order.order_number, "grand_total": str(order.grand_total)},
    )
    return order


@transaction.atomic
def void_order(*, order_id, changed_by=None, reason: str = "", clock=None) -> Order:
    now = resolve_clock(clock).now()

    order = get_locked_order(order_id)
    validate_transition(order=order, target_status=Order.STATUS_VOIDED)

    previous = order.status
    order.status = Order.STATUS_VOIDED
    order.updated_at = now
    order.save(update_fields=["status", "updated_at"])

    reason = (reason or "").strip()[:200]
    _append_history(
        order=order,
        from_status=previous,
        to_status=order.status,
        changed_by=changed_by,
        reason=reason,
        at=now,
    )

    logger.info("Order voided", extra={"order_id": order.id, "order_number": order.order_number})
    return order
