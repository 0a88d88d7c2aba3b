# audit/serializers.py

from rest_framework import serializers

from audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source="user.email", read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "user",
            "user_email",
            "entity_name",
            "entity_id",
            "action",
            "changes_json",
            "occurred_at",
        ]
        read_only_fields = fields
