# orders/admin.py

from django.contrib import admin

from orders.models import Order, OrderLine, OrderStatusHistory


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "product_name_snapshot",
        "unit_price",
        "quantity",
        "line_discount",
        "line_total",
    )

    def has_add_permission(self, request, obj=None):
        return False


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields = ("from_status", "to_status", "changed_by", "reason", "changed_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Orders are read-only in admin; all changes go through orders.services."""

    list_display = ("order_number", "status", "customer", "grand_total", "created_at")
    list_filter = ("status",)
    search_fields = ("order_number",)
    readonly_fields = (
        "order_number",
        "customer",
        "status",
        "subtotal",
        "discount_total",
        "tax_total",
        "grand_total",
        "is_active",
        "created_at",
        "updated_at",
    )
    inlines = [OrderLineInline, OrderStatusHistoryInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
