# inventory/models/inventory_item.py

from django.db import models
from django.utils import timezone


class InventoryItem(models.Model):
    """
    Current on-hand quantity for one product (snapshot).

    - Exactly one row per product, created with the product.
    - Mutated only by inventory services and order payment,
      always under select_for_update, always paired with a ledger entry.
    - Payment never drives it negative; manual adjustments may.
    """

    product = models.OneToOneField(
        "catalog.Product",
        on_delete=models.CASCADE,
        related_name="inventory_item",
    )
    quantity_on_hand = models.IntegerField(default=0)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["product_id"]

    def __str__(self):
        return f"{self.product} | on hand {self.quantity_on_hand}"
