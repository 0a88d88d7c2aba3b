# inventory/admin.py

from django.contrib import admin

from inventory.models import InventoryItem, StockAdjustment, StockLedgerEntry


class ReadOnlyAdmin(admin.ModelAdmin):
    """Stock rows change only through inventory services."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(InventoryItem)
class InventoryItemAdmin(ReadOnlyAdmin):
    list_display = ("product", "quantity_on_hand", "updated_at")
    search_fields = ("product__name",)


@admin.register(StockLedgerEntry)
class StockLedgerEntryAdmin(ReadOnlyAdmin):
    list_display = ("occurred_at", "product", "ref_type", "ref_id", "quantity_delta", "reason")
    list_filter = ("ref_type",)
    search_fields = ("product__name", "reason")


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "product", "quantity_delta", "note", "created_by")
    search_fields = ("product__name", "note")
