# catalog/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .category import Category


class Product(models.Model):
    """
    A sellable product.

    STOCK MODEL:
    - Product itself does NOT store stock.
    - Stock lives in inventory.InventoryItem (one row per product),
      created together with the product.
    - unit_price is the current price; order lines snapshot it.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(max_length=1000, blank=True, default="")

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="catalog_product_unit_price_gte_0",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.unit_price is None or Decimal(self.unit_price) < 0:
            raise ValidationError("Unit price must be non-negative")
        if not (self.name or "").strip():
            raise ValidationError("Product name is required")
