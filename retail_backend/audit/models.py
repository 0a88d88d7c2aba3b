# audit/models.py

"""
AUDIT LOG (APPEND-ONLY)

One row per audited business action (entity + action + JSON changes).
Written after the audited transaction commits; never updated or deleted.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class AuditLog(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )

    entity_name = models.CharField(max_length=100, db_index=True)
    entity_id = models.CharField(max_length=64)
    action = models.CharField(max_length=50)
    changes_json = models.TextField(null=True, blank=True)

    occurred_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-occurred_at", "-id"]
        indexes = [
            models.Index(fields=["entity_name", "entity_id"], name="audit_entity_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Audit log entries are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Audit log entries cannot be deleted")

    def __str__(self):
        return f"{self.entity_name}#{self.entity_id} {self.action}"
