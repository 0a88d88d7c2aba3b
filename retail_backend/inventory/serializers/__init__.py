from .inventory import (
    InventoryItemSerializer,
    StockAdjustmentCreateSerializer,
    StockAdjustmentSerializer,
    StockLedgerEntrySerializer,
)

__all__ = [
    "InventoryItemSerializer",
    "StockAdjustmentCreateSerializer",
    "StockAdjustmentSerializer",
    "StockLedgerEntrySerializer",
]
