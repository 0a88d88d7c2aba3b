# customers/serializers.py

from rest_framework import serializers

from customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = ["id", "first_name", "last_name", "full_name", "email", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "full_name", "created_at", "updated_at"]

    def validate_first_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("First name is required")
        return value

    def validate_last_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Last name is required")
        return value

    def validate_email(self, value):
        value = (value or "").strip().lower()
        return value or None
