"""Audit event DTOs.

Immutable Pydantic v2 models describing a single append-only audit
record.  ``AuditChange`` serialises its ``from_`` field as ``from`` so
the stored payload reads ``{"field": ..., "from": ..., "to": ...}``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import uuid6
from pydantic import BaseModel, ConfigDict, Field

from modules.audit.constants import (
    SYSTEM_ACTOR_ID,
    SYSTEM_ACTOR_NAME,
    SYSTEM_ACTOR_ROLE,
    AuditAction,
    AuditEntityType,
)


class AuditActor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: Optional[str] = None

    @classmethod
    def system(cls) -> AuditActor:
        return cls(id=SYSTEM_ACTOR_ID, name=SYSTEM_ACTOR_NAME, role=SYSTEM_ACTOR_ROLE)


class AuditEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: AuditEntityType
    id: str
    label: str


class AuditChange(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str
    from_: Any = Field(default=None, alias="from")
    to: Any = None


class AuditEventDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    ts: datetime
    action: AuditAction
    actor: AuditActor
    entity: Optional[AuditEntity] = None
    changes: List[AuditChange] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def as_payload(self) -> Dict[str, Any]:
        """JSON-safe representation used by persistent and logging sinks."""
        return self.model_dump(mode="json", by_alias=True)
