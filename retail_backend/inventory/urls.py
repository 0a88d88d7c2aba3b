# inventory/urls.py

from django.urls import path
from rest_framework.routers import DefaultRouter

from inventory.views import InventoryItemViewSet, StockAdjustView, StockLedgerViewSet

app_name = "inventory"

router = DefaultRouter()
router.register(r"items", InventoryItemViewSet, basename="inventory-item")
router.register(r"ledger", StockLedgerViewSet, basename="stock-ledger")

urlpatterns = [
    path("adjust/", StockAdjustView.as_view(), name="adjust"),
] + router.urls
