# discounts/models/coupon.py

from django.db import models
from django.utils import timezone

from .discount import Discount


class Coupon(models.Model):
    """
    Redeemable code for a Coupon-scope discount.
    Codes are unique and case-sensitive.
    """

    discount = models.ForeignKey(Discount, on_delete=models.CASCADE, related_name="coupons")
    code = models.CharField(max_length=40, unique=True)

    usage_limit_total = models.PositiveIntegerField(null=True, blank=True)
    usage_limit_per_customer = models.PositiveIntegerField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return self.code


class CouponRedemption(models.Model):
    """
    A coupon consumed by an order. One per order (order is unique).
    Created on apply, deleted on remove; payment leaves it in place.
    """

    coupon = models.ForeignKey(Coupon, on_delete=models.PROTECT, related_name="redemptions")
    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="coupon_redemption",
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="coupon_redemptions",
    )
    redeemed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-redeemed_at", "-id"]
        indexes = [
            models.Index(fields=["coupon", "customer"], name="redemption_coupon_cust_idx"),
        ]

    def __str__(self):
        return f"{self.coupon} -> order {self.order_id}"
