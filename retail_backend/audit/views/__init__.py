from .audit_log import AuditLogViewSet

__all__ = ["AuditLogViewSet"]
