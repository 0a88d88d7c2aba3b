# inventory/services/stock_adjustments.py

"""
STOCK ADJUSTMENTS SERVICE

Purpose:
- Manual corrections to a product's on-hand quantity.
- Every adjustment writes an immutable StockAdjustment plus a matching
  StockLedgerEntry(ADJUSTMENT, ref_id=adjustment.id).

Rules:
- quantity_delta must be a non-zero integer
- the product must already have an inventory snapshot
- negative deltas are NOT checked against on-hand; the result may go
  below zero (logged as a warning). Only payment enforces sufficiency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from audit.services import record_audit
from core.clock import resolve_clock
from core.exceptions import NotFoundError, ValidationFailedError
from core.money import to_int_qty
from inventory.models import InventoryItem, StockAdjustment, StockLedgerEntry
from inventory.services.ledger import append_ledger_entry

logger = logging.getLogger("inventory")


class StockAdjustmentError(ValidationFailedError):
    """Invalid stock adjustment request."""


class InventoryMissingError(NotFoundError):
    """Inventory record not found for this product."""


@dataclass(frozen=True)
class AdjustmentResult:
    item: InventoryItem
    adjustment: StockAdjustment
    ledger_entry: StockLedgerEntry
    quantity_delta: int


def _to_int_delta(value) -> int:
    try:
        delta = to_int_qty(value, field_name="quantity_delta")
    except ValueError as exc:
        raise StockAdjustmentError(str(exc)) from exc

    if delta == 0:
        raise StockAdjustmentError("quantity_delta cannot be 0")

    return delta


def _user_or_none(user):
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return user


@transaction.atomic
def adjust_stock(
    *,
    product_id,
    quantity_delta,
    note: str | None = None,
    user=None,
    clock=None,
) -> AdjustmentResult:
    """
    Apply a signed delta to a product's on-hand quantity.

    quantity_delta:
      +N -> stock in
      -N -> stock out (may leave the snapshot negative)
    """
    delta = _to_int_delta(quantity_delta)
    now = resolve_clock(clock).now()

    item = InventoryItem.objects.select_for_update().filter(product_id=product_id).first()
    if item is None:
        raise InventoryMissingError()

    note = (note or "").strip()[:200]
    actor = _user_or_none(user)

    adjustment = StockAdjustment.objects.create(
        product_id=item.product_id,
        quantity_delta=delta,
        note=note,
        created_by=actor,
        created_at=now,
    )

    entry = append_ledger_entry(
        product_id=item.product_id,
        ref_type=StockLedgerEntry.RefType.ADJUSTMENT,
        ref_id=adjustment.id,
        quantity_delta=delta,
        reason=note or "Manual adjustment",
        occurred_at=now,
    )

    before = int(item.quantity_on_hand)
    item.quantity_on_hand = before + delta
    item.updated_at = now
    item.save(update_fields=["quantity_on_hand", "updated_at"])

    if item.quantity_on_hand < 0:
        logger.warning(
            "Manual adjustment left stock negative",
            extra={"product_id": item.product_id, "quantity_on_hand": item.quantity_on_hand},
        )

    record_audit(
        entity_name="InventoryItem",
        entity_id=item.id,
        action="Adjust",
        user=actor,
        changes={
            "product_id": item.product_id,
            "before": before,
            "delta": delta,
            "after": item.quantity_on_hand,
            "note": note,
        },
    )

    return AdjustmentResult(
        item=item,
        adjustment=adjustment,
        ledger_entry=entry,
        quantity_delta=delta,
    )
