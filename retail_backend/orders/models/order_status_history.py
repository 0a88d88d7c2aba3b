# orders/models/order_status_history.py

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class OrderStatusHistory(models.Model):
    """
    Append-only status trail. One row per transition.
    changed_by is NULL when the actor is unknown.
    """

    order = models.ForeignKey("orders.Order", on_delete=models.CASCADE, related_name="status_history")
    from_status = models.CharField(max_length=20)
    to_status = models.CharField(max_length=20)

    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_status_changes",
    )
    reason = models.CharField(max_length=200, blank=True, default="")
    changed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["changed_at", "id"]
        verbose_name_plural = "order status history"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Order status history is append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Order status history cannot be deleted")

    def __str__(self):
        return f"{self.order_id}: {self.from_status} -> {self.to_status}"
