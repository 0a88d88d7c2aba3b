from .ledger import append_ledger_entry, lock_inventory_items
from .stock_adjustments import (
    AdjustmentResult,
    InventoryMissingError,
    StockAdjustmentError,
    adjust_stock,
)

__all__ = [
    "append_ledger_entry",
    "lock_inventory_items",
    "adjust_stock",
    "AdjustmentResult",
    "InventoryMissingError",
    "StockAdjustmentError",
]
