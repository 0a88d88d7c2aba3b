# discounts/admin.py

from django.contrib import admin

from discounts.models import Coupon, CouponRedemption, Discount, DiscountCategory, DiscountProduct


class DiscountCategoryInline(admin.TabularInline):
    model = DiscountCategory
    extra = 0


class DiscountProductInline(admin.TabularInline):
    model = DiscountProduct
    extra = 0
    raw_id_fields = ("product",)


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "value", "scope", "priority", "is_active", "starts_at", "ends_at")
    list_filter = ("type", "scope", "is_active")
    search_fields = ("name",)
    inlines = [DiscountCategoryInline, DiscountProductInline]


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "discount", "usage_limit_total", "usage_limit_per_customer", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code",)


@admin.register(CouponRedemption)
class CouponRedemptionAdmin(admin.ModelAdmin):
    list_display = ("coupon", "order", "customer", "redeemed_at")
    search_fields = ("coupon__code", "order__order_number")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
