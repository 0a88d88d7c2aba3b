from .inventory import InventoryItemViewSet, StockAdjustView, StockLedgerViewSet

__all__ = ["InventoryItemViewSet", "StockAdjustView", "StockLedgerViewSet"]
