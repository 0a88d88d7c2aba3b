# inventory/serializers/inventory.py

from rest_framework import serializers

from inventory.models import InventoryItem, StockAdjustment, StockLedgerEntry


class InventoryItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    is_active = serializers.BooleanField(source="product.is_active", read_only=True)

    class Meta:
        model = InventoryItem
        fields = ["id", "product", "product_name", "is_active", "quantity_on_hand", "updated_at"]
        read_only_fields = fields


class StockLedgerEntrySerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = StockLedgerEntry
        fields = [
            "id",
            "product",
            "product_name",
            "ref_type",
            "ref_id",
            "quantity_delta",
            "reason",
            "occurred_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockAdjustment
        fields = ["id", "product", "quantity_delta", "note", "created_by", "created_at"]
        read_only_fields = fields


class StockAdjustmentCreateSerializer(serializers.Serializer):
    """
    Write contract for POST /api/inventory/adjust/

    quantity_delta:
      +N -> stock in
      -N -> stock out
    """

    product_id = serializers.IntegerField(min_value=1)
    quantity_delta = serializers.IntegerField()
    note = serializers.CharField(required=False, allow_blank=True, max_length=200, default="")

    def validate_quantity_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("quantity_delta cannot be 0")
        return value
