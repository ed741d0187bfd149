"""Persistent audit trail.

``AuditEvent`` rows are append-only: ``save`` refuses updates and
``delete`` is disabled.  Field-level changes and free-form metadata are
stored as JSON exactly as produced by ``AuditEventDTO.as_payload``.
"""

from __future__ import annotations

from django.db import models

from modules.audit.constants import AuditAction, AuditEntityType
from modules.core.models import BaseModel


class AuditEvent(BaseModel):
    ts = models.DateTimeField(db_index=True)
    action = models.CharField(max_length=50, choices=AuditAction.choices)
    entity_type = models.CharField(
        max_length=20, choices=AuditEntityType.choices, blank=True, default=""
    )
    entity_id = models.CharField(max_length=64, blank=True, default="")
    entity_label = models.CharField(max_length=255, blank=True, default="")
    actor_id = models.CharField(max_length=64)
    actor_name = models.CharField(max_length=255)
    actor_role = models.CharField(max_length=50, blank=True, default="")
    changes = models.JSONField(default=list, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "audit_events"
        ordering = ["ts", "created_at"]
        indexes = [
            models.Index(
                fields=["entity_type", "entity_id"],
                name="audit_entity_idx",
            ),
            models.Index(fields=["action"], name="audit_action_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        if not self._state.adding:
            raise RuntimeError("Audit events are append-only.")
        super().save(*args, **kwargs)

    def delete(self, using=None, keep_parents=False):
        raise RuntimeError("Audit events are append-only.")

    def __str__(self) -> str:
        return f"{self.action} {self.entity_type}:{self.entity_label} by {self.actor_name}"
