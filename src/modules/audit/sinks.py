"""Audit sink contract and the non-persistent sinks.

A sink is fire-and-forget: callers never inspect what ``record``
returns, and ``AuditRecorder`` shields them from sink failures.
"""

from __future__ import annotations

from typing import List, Protocol

import structlog

from modules.audit.constants import AuditAction
from modules.audit.dtos import AuditEventDTO

logger = structlog.get_logger(__name__)


class IAuditSink(Protocol):
    """Append-only audit event recorder."""

    def record(self, event: AuditEventDTO) -> None: ...


class InMemoryAuditSink:
    """Keeps events in a list, oldest first."""

    def __init__(self) -> None:
        self._events: List[AuditEventDTO] = []

    def record(self, event: AuditEventDTO) -> None:
        self._events.append(event)

    @property
    def events(self) -> List[AuditEventDTO]:
        return list(self._events)

    def actions(self) -> List[AuditAction]:
        return [event.action for event in self._events]

    def clear(self) -> None:
        self._events.clear()


class LoggingAuditSink:
    """Emits each event as a structured log line."""

    def record(self, event: AuditEventDTO) -> None:
        payload = event.as_payload()
        logger.info(
            "audit.event",
            audit_id=payload["id"],
            action=payload["action"],
            entity=payload["entity"],
            actor=payload["actor"],
            changes=payload["changes"],
            metadata=payload["metadata"],
        )


class CompositeAuditSink:
    """Fans an event out to several sinks in order."""

    def __init__(self, *sinks: IAuditSink) -> None:
        self._sinks = sinks

    def record(self, event: AuditEventDTO) -> None:
        for sink in self._sinks:
            sink.record(event)
