# orders/models/order.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Order(models.Model):
    """
    A basket that becomes a sale.

    GUARANTEES:
    - Created UNPAID with no lines and zero totals
    - Totals are written only by orders.services.order_calculator
    - grand_total == max(0, subtotal - discount_total + tax_total), tax_total == 0
    - Once PAID or VOIDED, status and pricing fields never change
    """

    STATUS_UNPAID = "Unpaid"
    STATUS_PAID = "Paid"
    STATUS_VOIDED = "Voided"

    STATUS_CHOICES = [
        (STATUS_UNPAID, "Unpaid"),
        (STATUS_PAID, "Paid"),
        (STATUS_VOIDED, "Voided"),
    ]

    TERMINAL_STATUSES = {STATUS_PAID, STATUS_VOIDED}

    _IMMUTABLE_FIELDS_WHEN_TERMINAL = (
        "status",
        "customer_id",
        "subtotal",
        "discount_total",
        "tax_total",
        "grand_total",
    )

    order_number = models.CharField(max_length=40, unique=True)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_UNPAID, db_index=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(subtotal__gte=0), name="order_subtotal_gte_0"),
            models.CheckConstraint(condition=models.Q(discount_total__gte=0), name="order_discount_total_gte_0"),
            models.CheckConstraint(condition=models.Q(grand_total__gte=0), name="order_grand_total_gte_0"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def _validate_immutable(self, previous: "Order"):
        if previous.status not in self.TERMINAL_STATUSES:
            return

        for field in self._IMMUTABLE_FIELDS_WHEN_TERMINAL:
            if getattr(self, field) != getattr(previous, field):
                raise ValidationError(
                    f"Order is immutable once {previous.status}. Field '{field}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} | {self.status} | {self.grand_total}"
