# discounts/serializers/discount.py

from rest_framework import serializers

from discounts.models import Discount


class DiscountListSerializer(serializers.ModelSerializer):
    category_count = serializers.IntegerField(read_only=True)
    product_count = serializers.IntegerField(read_only=True)
    coupon_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Discount
        fields = [
            "id",
            "name",
            "type",
            "value",
            "scope",
            "is_active",
            "priority",
            "starts_at",
            "ends_at",
            "category_count",
            "product_count",
            "coupon_count",
        ]
        read_only_fields = fields


class DiscountDetailSerializer(serializers.ModelSerializer):
    category_ids = serializers.SerializerMethodField()
    product_ids = serializers.SerializerMethodField()

    class Meta:
        model = Discount
        fields = [
            "id",
            "name",
            "type",
            "value",
            "scope",
            "is_stackable",
            "is_active",
            "priority",
            "starts_at",
            "ends_at",
            "min_basket_subtotal",
            "max_total_discount",
            "category_ids",
            "product_ids",
        ]
        read_only_fields = fields

    def get_category_ids(self, obj) -> list[int]:
        return sorted(link.category_id for link in obj.category_links.all())

    def get_product_ids(self, obj) -> list[int]:
        return sorted(link.product_id for link in obj.product_links.all())


class DiscountWriteSerializer(serializers.Serializer):
    """
    Request shape only; business validation lives in discount_admin.
    type / scope are matched case-insensitively there.
    """

    name = serializers.CharField(max_length=150)
    type = serializers.CharField(max_length=20)
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    scope = serializers.CharField(max_length=20)
    is_stackable = serializers.BooleanField(required=False, default=False)
    priority = serializers.IntegerField(required=False, default=0)
    starts_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    ends_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    min_basket_subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    max_total_discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )


class ActiveFlagSerializer(serializers.Serializer):
    value = serializers.BooleanField(default=True)


class DiscountLinkCategorySerializer(serializers.Serializer):
    category_id = serializers.IntegerField(min_value=1)


class DiscountLinkProductSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
