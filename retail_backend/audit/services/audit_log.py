# audit/services/audit_log.py

"""
======================================================
PATH: audit/services/audit_log.py
======================================================
AUDIT LOG SERVICE (BEST-EFFORT)

Rules:
- Audit rows are written AFTER the surrounding transaction commits,
  so a rolled-back operation never leaves an audit trail behind.
- Changes are serialised to compact JSON and truncated at
  AUDIT_MAX_CHANGES_LENGTH characters.
- A failing audit write is logged and swallowed; it never aborts
  the business operation it describes.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from audit.models import AuditLog

logger = logging.getLogger("audit")

TRUNCATION_MARKER = "...(truncated)"


def _serialize_changes(changes: Any, *, entity_name: str, action: str) -> Optional[str]:
    if changes is None:
        return None

    try:
        payload = json.dumps(changes, cls=DjangoJSONEncoder, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        logger.warning(
            "Audit serialization failed",
            extra={"entity": entity_name, "action": action, "error": type(exc).__name__},
        )
        return json.dumps(f"[unserializable:{type(exc).__name__}]")

    limit = int(getattr(settings, "AUDIT_MAX_CHANGES_LENGTH", 20000))
    if len(payload) > limit:
        payload = payload[:limit] + TRUNCATION_MARKER
    return payload


def _user_or_none(user):
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return user


def _write(*, entity_name: str, entity_id: str, action: str, user, changes_json: Optional[str]) -> None:
    try:
        AuditLog.objects.create(
            user=user,
            entity_name=entity_name,
            entity_id=entity_id,
            action=action,
            changes_json=changes_json,
        )
    except Exception:
        logger.exception(
            "Audit write failed",
            extra={"entity": entity_name, "entity_id": entity_id, "action": action},
        )


def record_audit(
    *,
    entity_name: str,
    entity_id,
    action: str,
    user=None,
    changes: Any = None,
) -> None:
    """
    Schedule an audit row for the current transaction.

    Outside a transaction the row is written immediately.
    """
    if not getattr(settings, "AUDIT_LOG_ENABLED", True):
        return

    changes_json = _serialize_changes(changes, entity_name=entity_name, action=action)
    params = {
        "entity_name": entity_name,
        "entity_id": str(entity_id),
        "action": action,
        "user": _user_or_none(user),
        "changes_json": changes_json,
    }

    transaction.on_commit(lambda: _write(**params))
