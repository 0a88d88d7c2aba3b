# inventory/services/ledger.py

"""
LEDGER PRIMITIVES

Shared by manual adjustments and order payment.
Callers must already be inside transaction.atomic.
"""

from __future__ import annotations

from typing import Iterable

from inventory.models import InventoryItem, StockLedgerEntry


def lock_inventory_items(product_ids: Iterable[int]) -> dict[int, InventoryItem]:
    """
    Lock the snapshot rows for the given products, in ascending product id.

    A fixed lock order means two payments touching overlapping products
    can never wait on each other in a cycle.
    Missing products are simply absent from the result.
    """
    ids = sorted({int(pid) for pid in product_ids})
    items = (
        InventoryItem.objects.select_for_update()
        .filter(product_id__in=ids)
        .order_by("product_id")
    )
    return {item.product_id: item for item in items}


def append_ledger_entry(*, product_id, ref_type, ref_id, quantity_delta: int, reason: str, occurred_at) -> StockLedgerEntry:
    return StockLedgerEntry.objects.create(
        product_id=product_id,
        ref_type=ref_type,
        ref_id=ref_id,
        quantity_delta=quantity_delta,
        reason=reason or "",
        occurred_at=occurred_at,
    )
