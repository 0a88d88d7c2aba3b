# audit/tests/test_audit_log.py

from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from audit.models import AuditLog
from audit.services import record_audit
from audit.services.audit_log import TRUNCATION_MARKER

User = get_user_model()


class RecordAuditTests(TestCase):
    """
    GUARANTEES:
    - Rows are written only once the surrounding transaction commits
    - Oversized change payloads are truncated with a marker
    - A failing write never propagates to the caller
    """

    def test_written_on_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            record_audit(entity_name="Order", entity_id=7, action="Create", changes={"a": 1})

        self.assertFalse(AuditLog.objects.exists())
        self.assertEqual(len(callbacks), 1)

        callbacks[0]()
        log = AuditLog.objects.get()
        self.assertEqual(log.entity_id, "7")
        self.assertEqual(log.changes_json, '{"a":1}')

    @override_settings(AUDIT_MAX_CHANGES_LENGTH=10)
    def test_changes_truncated(self):
        with self.captureOnCommitCallbacks(execute=True):
            record_audit(entity_name="Order", entity_id=1, action="Update", changes={"note": "x" * 50})

        log = AuditLog.objects.get()
        self.assertTrue(log.changes_json.endswith(TRUNCATION_MARKER))
        self.assertEqual(len(log.changes_json), 10 + len(TRUNCATION_MARKER))

    @override_settings(AUDIT_LOG_ENABLED=False)
    def test_disabled_writes_nothing(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            record_audit(entity_name="Order", entity_id=1, action="Create")

        self.assertEqual(callbacks, [])
        self.assertFalse(AuditLog.objects.exists())

    def test_write_failure_is_swallowed(self):
        with mock.patch.object(AuditLog.objects, "create", side_effect=RuntimeError("db down")):
            with self.assertLogs("audit", level="ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    record_audit(entity_name="Order", entity_id=1, action="Create")

        self.assertFalse(AuditLog.objects.exists())

    def test_rows_are_immutable(self):
        with self.captureOnCommitCallbacks(execute=True):
            record_audit(entity_name="Order", entity_id=1, action="Create")

        log = AuditLog.objects.get()
        log.action = "Tampered"
        with self.assertRaises(ValidationError):
            log.save()
        with self.assertRaises(ValidationError):
            log.delete()


class AuditLogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            role=User.ROLE_ADMIN,
        )
        self.manager = User.objects.create_user(
            email="manager@example.com",
            password="pass12345",
            role=User.ROLE_MANAGER,
        )
        with self.captureOnCommitCallbacks(execute=True):
            record_audit(entity_name="Order", entity_id=1, action="Create", user=self.admin)
            record_audit(entity_name="Product", entity_id=2, action="Create", user=self.admin)

    def test_admin_can_filter_by_entity(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.get("/api/audit-logs/", {"entity": "Order"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["entity_name"], "Order")

    def test_manager_lacks_audit_capability(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.get("/api/audit-logs/")

        self.assertEqual(res.status_code, 403)
