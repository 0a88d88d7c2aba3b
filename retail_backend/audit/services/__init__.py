from .audit_log import record_audit

__all__ = ["record_audit"]
