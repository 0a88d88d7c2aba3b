# orders/models/order_line.py

from decimal import Decimal

from django.db import models


class OrderLine(models.Model):
    """
    One product/quantity entry in an order.

    product_name_snapshot and unit_price are captured when the line is added
    and never follow later catalog changes. product is SET_NULL so a deleted
    product is detected at re-pricing time instead of silently dropping the line.
    """

    order = models.ForeignKey("orders.Order", on_delete=models.CASCADE, related_name="lines")
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        related_name="order_lines",
    )

    product_name_snapshot = models.CharField(max_length=200)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()

    line_discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    line_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gt=0), name="order_line_quantity_gt_0"),
            models.CheckConstraint(condition=models.Q(line_discount__gte=0), name="order_line_discount_gte_0"),
            models.CheckConstraint(condition=models.Q(line_total__gte=0), name="order_line_total_gte_0"),
        ]

    @property
    def gross_amount(self) -> Decimal:
        return Decimal(self.unit_price) * int(self.quantity or 0)

    def __str__(self):
        return f"{self.product_name_snapshot} x {self.quantity}"
