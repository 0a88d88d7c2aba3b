# orders/serializers/order.py

"""
ORDER SERIALIZERS

Read serializers expose server-computed totals; clients never send money.
Write serializers only validate request shape; rules live in orders.services.
"""

from rest_framework import serializers

from orders.models import Order, OrderLine, OrderStatusHistory


class OrderLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderLine
        fields = [
            "id",
            "product",
            "product_name_snapshot",
            "unit_price",
            "quantity",
            "line_discount",
            "line_total",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    line_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "customer",
            "subtotal",
            "discount_total",
            "tax_total",
            "grand_total",
            "line_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderDetailSerializer(serializers.ModelSerializer):
    lines = OrderLineSerializer(many=True, read_only=True)
    coupon_code = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "status",
            "subtotal",
            "discount_total",
            "tax_total",
            "grand_total",
            "coupon_code",
            "is_active",
            "created_at",
            "updated_at",
            "lines",
        ]
        read_only_fields = fields

    def get_coupon_code(self, obj):
        redemption = getattr(obj, "coupon_redemption", None)
        return redemption.coupon.code if redemption is not None else None


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    changed_by_email = serializers.EmailField(source="changed_by.email", read_only=True, default=None)

    class Meta:
        model = OrderStatusHistory
        fields = ["id", "from_status", "to_status", "changed_by", "changed_by_email", "reason", "changed_at"]
        read_only_fields = fields


class CreateOrderSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)


class AddLineSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField()

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be > 0.")
        return value


class UpdateLineSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be > 0.")
        return value


class ApplyCouponSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=40, allow_blank=True)
    customer_id = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)


class VoidOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
