"""Audit sink backed by the ``audit_events`` table."""

from __future__ import annotations

from django.db import transaction

from modules.audit.dtos import AuditEventDTO
from modules.audit.models import AuditEvent


class DjangoAuditSink:
    """Writes each event inside its own savepoint.

    A failing insert rolls back only the savepoint, so the surrounding
    order/stock transaction stays usable.
    """

    def record(self, event: AuditEventDTO) -> None:
        payload = event.as_payload()
        entity = payload["entity"] or {}
        with transaction.atomic():
            AuditEvent.objects.create(
                id=event.id,
                ts=event.ts,
                action=event.action,
                entity_type=entity.get("type", ""),
                entity_id=entity.get("id", ""),
                entity_label=entity.get("label", ""),
                actor_id=event.actor.id,
                actor_name=event.actor.name,
                actor_role=event.actor.role or "",
                changes=payload["changes"],
                metadata=payload["metadata"],
            )
