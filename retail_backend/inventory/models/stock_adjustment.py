# inventory/models/stock_adjustment.py

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class StockAdjustment(models.Model):
    """
    Manual stock correction (count, damage, receipt).
    Immutable; the matching ledger entry references it by id.
    """

    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="stock_adjustments",
    )
    quantity_delta = models.IntegerField()
    note = models.CharField(max_length=200, blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_adjustments",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Stock adjustments are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Stock adjustments cannot be deleted")

    def __str__(self):
        return f"{self.product_id} | {self.quantity_delta:+d}"
