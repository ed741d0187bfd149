"""Integration tests for the persistent audit trail."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from modules.audit.constants import AuditAction, AuditEntityType
from modules.audit.django_sink import DjangoAuditSink
from modules.audit.dtos import AuditActor, AuditChange, AuditEntity
from modules.audit.models import AuditEvent
from modules.audit.recorder import AuditRecorder
from shared.domain.clock import FrozenClock

pytestmark = pytest.mark.integration

INSTANT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def recorder():
    return AuditRecorder(
        DjangoAuditSink(),
        actor_provider=lambda: AuditActor(id="42", name="Marta", role="STAFF"),
        clock=FrozenClock(INSTANT),
    )


def test_event_is_persisted(recorder):
    event = recorder.record(
        AuditAction.ORDER_STATUS_CHANGED,
        entity=AuditEntity(type=AuditEntityType.ORDER, id="abc", label="ORD-000001"),
        changes=[AuditChange(field="status", from_="PLACED", to="PAID")],
        metadata={"source": "test"},
    )

    row = AuditEvent.objects.get(id=event.id)
    assert row.ts == INSTANT
    assert row.action == AuditAction.ORDER_STATUS_CHANGED
    assert (row.entity_type, row.entity_id, row.entity_label) == (
        "order",
        "abc",
        "ORD-000001",
    )
    assert (row.actor_id, row.actor_name, row.actor_role) == ("42", "Marta", "STAFF")
    assert row.changes == [{"field": "status", "from": "PLACED", "to": "PAID"}]
    assert row.metadata == {"source": "test"}


def test_event_without_entity(recorder):
    event = recorder.record(AuditAction.STOCK_ADJUSTED)

    row = AuditEvent.objects.get(id=event.id)
    assert (row.entity_type, row.entity_id, row.entity_label) == ("", "", "")


class TestAppendOnly:
    def test_update_is_refused(self, recorder):
        event = recorder.record(AuditAction.ORDER_CREATED)
        row = AuditEvent.objects.get(id=event.id)
        row.actor_name = "Someone else"

        with pytest.raises(RuntimeError, match="append-only"):
            row.save()

    def test_delete_is_refused(self, recorder):
        event = recorder.record(AuditAction.ORDER_CREATED)

        with pytest.raises(RuntimeError, match="append-only"):
            AuditEvent.objects.get(id=event.id).delete()
