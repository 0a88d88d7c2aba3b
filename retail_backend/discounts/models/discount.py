# discounts/models/discount.py

"""
DISCOUNT CATALOG

A Discount is a time-boxed promotion with a scope:
- GLOBAL   -> every line
- CATEGORY -> lines whose product belongs to a linked category
- PRODUCT  -> lines whose product is linked
- COUPON   -> lines of an order that carries a coupon redemption

At most one discount is applied per line (see discounts.services.discount_engine).

is_stackable, min_basket_subtotal and max_total_discount are stored for the
back office but are not read by pricing.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Discount(models.Model):
    class Type(models.TextChoices):
        PERCENT = "Percent", "Percent"
        AMOUNT = "Amount", "Fixed Amount"

    class Scope(models.TextChoices):
        GLOBAL = "Global", "Global"
        CATEGORY = "Category", "Category"
        PRODUCT = "Product", "Product"
        COUPON = "Coupon", "Coupon"

    name = models.CharField(max_length=150)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.PERCENT)
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Percent (0-100) if Percent; currency amount if Amount.",
    )
    scope = models.CharField(max_length=20, choices=Scope.choices, default=Scope.GLOBAL)

    is_stackable = models.BooleanField(default=False)
    priority = models.IntegerField(default=0, help_text="Lower wins when amounts tie.")

    starts_at = models.DateTimeField(null=True, blank=True)
    ends_at = models.DateTimeField(null=True, blank=True)

    min_basket_subtotal = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    max_total_discount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["priority", "name", "id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(value__gte=0), name="discount_value_gte_0"),
        ]

    def clean(self):
        if self.value is None or Decimal(self.value) < 0:
            raise ValidationError("value must be non-negative")
        if self.starts_at and self.ends_at and self.starts_at > self.ends_at:
            raise ValidationError("starts_at must not be after ends_at")

    def is_current(self, now) -> bool:
        """Inclusive validity window; a missing bound is unbounded."""
        if self.starts_at is not None and self.starts_at > now:
            return False
        if self.ends_at is not None and self.ends_at < now:
            return False
        return True

    def __str__(self):
        return f"{self.name} ({self.type} {self.value}, {self.scope})"


class DiscountCategory(models.Model):
    discount = models.ForeignKey(Discount, on_delete=models.CASCADE, related_name="category_links")
    category = models.ForeignKey("catalog.Category", on_delete=models.CASCADE, related_name="discount_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["discount", "category"], name="uniq_discount_category"),
        ]

    def __str__(self):
        return f"{self.discount_id} -> category {self.category_id}"


class DiscountProduct(models.Model):
    discount = models.ForeignKey(Discount, on_delete=models.CASCADE, related_name="product_links")
    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="discount_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["discount", "product"], name="uniq_discount_product"),
        ]

    def __str__(self):
        return f"{self.discount_id} -> product {self.product_id}"
