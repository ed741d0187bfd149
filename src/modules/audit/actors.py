"""Audit actor resolution for HTTP requests.

The authenticated user becomes the audit actor; anonymous requests
(and management commands) fall back to the system actor.
"""

from __future__ import annotations

from typing import Any, Optional

from modules.audit.django_sink import DjangoAuditSink
from modules.audit.dtos import AuditActor
from modules.audit.recorder import AuditRecorder
from modules.audit.sinks import CompositeAuditSink, LoggingAuditSink


def actor_from_user(user: Any) -> Optional[AuditActor]:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    name = user.get_full_name() or user.get_username()
    return AuditActor(
        id=str(user.pk),
        name=name,
        role="ADMIN" if user.is_superuser else "STAFF",
    )


def request_recorder(request: Any) -> AuditRecorder:
    """Recorder persisting to ``audit_events`` and mirroring to the log."""
    user = getattr(request, "user", None)
    return AuditRecorder(
        CompositeAuditSink(DjangoAuditSink(), LoggingAuditSink()),
        actor_provider=lambda: actor_from_user(user),
    )
