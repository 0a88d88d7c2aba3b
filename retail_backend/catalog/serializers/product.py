# catalog/serializers/product.py

"""
PRODUCT SERIALIZERS

- ProductSerializer is read-only and includes quantity_on_hand
  from the product's inventory snapshot.
- Writes go through catalog.services (inventory snapshot + audit).
"""

from rest_framework import serializers

from catalog.models import Product


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    quantity_on_hand = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "category",
            "category_name",
            "name",
            "description",
            "unit_price",
            "is_active",
            "quantity_on_hand",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_quantity_on_hand(self, obj) -> int:
        item = getattr(obj, "inventory_item", None)
        return item.quantity_on_hand if item is not None else 0


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    category = serializers.IntegerField(required=False, allow_null=True, default=None)


class ProductActiveSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
