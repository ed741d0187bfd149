"""Audit recorder used by the application services.

Builds ``AuditEventDTO`` instances (actor, timestamp) and hands them to
the configured sink.  Sink failures are logged and swallowed: the audit
trail is a side channel and must never fail the mutation it describes.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional

import structlog

from modules.audit.constants import AuditAction
from modules.audit.dtos import AuditActor, AuditChange, AuditEntity, AuditEventDTO
from modules.audit.sinks import IAuditSink
from shared.domain.clock import Clock, SystemClock

logger = structlog.get_logger(__name__)

ActorProvider = Callable[[], Optional[AuditActor]]


def system_actor() -> AuditActor:
    return AuditActor.system()


class AuditRecorder:
    def __init__(
        self,
        sink: IAuditSink,
        actor_provider: Optional[ActorProvider] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._sink = sink
        self._actor_provider = actor_provider or system_actor
        self._clock = clock or SystemClock()

    def record(
        self,
        action: AuditAction,
        entity: Optional[AuditEntity] = None,
        changes: Optional[Iterable[AuditChange]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditEventDTO]:
        """Record one event; returns it, or ``None`` if the sink failed."""
        try:
            event = AuditEventDTO(
                ts=self._clock.now(),
                action=action,
                actor=self._resolve_actor(),
                entity=entity,
                changes=list(changes or []),
                metadata=metadata or {},
            )
            self._sink.record(event)
        except Exception:
            logger.exception(
                "audit.record_failed",
                action=str(action),
                entity_id=entity.id if entity else None,
            )
            return None
        return event

    def _resolve_actor(self) -> AuditActor:
        actor = self._actor_provider()
        return actor if actor is not None else AuditActor.system()
