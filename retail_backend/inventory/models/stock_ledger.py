# inventory/models/stock_ledger.py

"""
STOCK LEDGER (APPEND-ONLY)

Every change to InventoryItem.quantity_on_hand has exactly one entry here.

GUARANTEES:
- Created ONCE, never edited, never deleted
- quantity_delta is signed: +in, -out, never zero
- ref_type + ref_id point at the cause (an order or a stock adjustment)
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class StockLedgerEntry(models.Model):
    class RefType(models.TextChoices):
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"
        ORDER = "ORDER", "Order"

    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="stock_ledger",
    )

    ref_type = models.CharField(max_length=30, choices=RefType.choices)
    ref_id = models.BigIntegerField()
    quantity_delta = models.IntegerField()
    reason = models.CharField(max_length=200, blank=True, default="")

    occurred_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["occurred_at", "id"]
        indexes = [
            models.Index(fields=["product", "occurred_at"], name="ledger_product_time_idx"),
            models.Index(fields=["ref_type", "ref_id"], name="ledger_ref_idx"),
        ]

    def clean(self):
        if self.quantity_delta == 0:
            raise ValidationError("quantity_delta cannot be zero")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Stock ledger entries are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Stock ledger entries are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.product_id} | {self.ref_type}#{self.ref_id} | {self.quantity_delta:+d}"
