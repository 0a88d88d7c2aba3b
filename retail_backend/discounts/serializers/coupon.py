# discounts/serializers/coupon.py

from rest_framework import serializers

from discounts.models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    discount_name = serializers.CharField(source="discount.name", read_only=True)
    redemption_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Coupon
        fields = [
            "id",
            "discount",
            "discount_name",
            "code",
            "is_active",
            "usage_limit_total",
            "usage_limit_per_customer",
            "redemption_count",
        ]
        read_only_fields = fields


class CouponWriteSerializer(serializers.Serializer):
    discount_id = serializers.IntegerField(min_value=1, required=False)
    code = serializers.CharField(max_length=40, allow_blank=True)
    usage_limit_total = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    usage_limit_per_customer = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    is_active = serializers.BooleanField(required=False, default=True)
