# audit/views/audit_log.py

from django_filters import rest_framework as filters
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from audit.models import AuditLog
from audit.serializers import AuditLogSerializer
from permissions.roles import CAP_AUDIT_VIEW, HasCapability


class AuditLogFilter(filters.FilterSet):
    entity = filters.CharFilter(field_name="entity_name", lookup_expr="iexact")
    entity_id = filters.CharFilter(field_name="entity_id")
    action = filters.CharFilter(field_name="action", lookup_expr="iexact")
    user = filters.UUIDFilter(field_name="user_id")
    date_from = filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="gte")
    date_to = filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="lte")

    class Meta:
        model = AuditLog
        fields = ["entity", "entity_id", "action", "user", "date_from", "date_to"]


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only audit trail.
    """

    queryset = AuditLog.objects.select_related("user").all()
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_AUDIT_VIEW
    filterset_class = AuditLogFilter
