# mic_core/incidents/types.py
"""
Read shapes consumed and produced by the aggregation engine.

Rows are built once from ORM objects (with client + incident type joined)
and are immutable afterwards; every aggregate is a new value.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional, Tuple
from uuid import UUID


@dataclass(frozen=True)
class IncidentTypeInfo:
    id: Optional[int]
    name: str
    category: Optional[str] = None
    severity_level: Optional[int] = None
    color_code: Optional[str] = None
    requires_notification: bool = False
    is_active: bool = True

    @classmethod
    def from_model(cls, obj) -> "IncidentTypeInfo":
        return cls(
            id=obj.id,
            name=obj.name,
            category=obj.category or None,
            severity_level=obj.severity_level,
            color_code=obj.color_code or None,
            requires_notification=bool(obj.requires_notification),
            is_active=bool(obj.is_active),
        )


UNKNOWN_TYPE = IncidentTypeInfo(id=None, name="Onbekend")


@dataclass(frozen=True)
class IncidentLogRow:
    id: int
    client_id: Optional[UUID]
    incident_type_id: Optional[int]
    log_date: date
    count: int
    client_name: Optional[str] = None
    incident_type: IncidentTypeInfo = UNKNOWN_TYPE
    user_id: Optional[int] = None
    location: Optional[str] = None
    time_of_day: Optional[time] = None
    severity: Optional[int] = None
    notes: Optional[str] = None
    triggered_by: Optional[str] = None
    intervention_successful: bool = True
    created_at: Optional[datetime] = None

    # set only on grouped rows that merged more than one raw row
    combined_log_ids: Optional[Tuple[int, ...]] = None

    @property
    def member_ids(self) -> Tuple[int, ...]:
        return self.combined_log_ids if self.combined_log_ids else (self.id,)

    @classmethod
    def from_model(cls, log) -> "IncidentLogRow":
        """
        Expects select_related("client", "incident_type"); tolerates either
        relation being absent.
        """
        client = getattr(log, "client", None)
        itype = getattr(log, "incident_type", None)
        return cls(
            id=log.id,
            client_id=log.client_id,
            incident_type_id=log.incident_type_id,
            log_date=log.log_date,
            count=log.count,
            client_name=client.full_name if client is not None else None,
            incident_type=IncidentTypeInfo.from_model(itype) if itype is not None else UNKNOWN_TYPE,
            user_id=log.user_id,
            location=log.location or None,
            time_of_day=log.time_of_day,
            severity=log.severity,
            notes=log.notes,
            triggered_by=log.triggered_by,
            intervention_successful=bool(log.intervention_successful),
            created_at=log.created_at,
        )


@dataclass(frozen=True)
class TypeTotal:
    name: str
    count: int
    category: Optional[str]
    severity_level: Optional[int]
    color_code: Optional[str]
    color: str
    logs: Tuple[IncidentLogRow, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    label: str
    count: int
    color: str


@dataclass(frozen=True)
class CategoryGroup:
    name: str
    label: str
    color: str
    types: Tuple[TypeTotal, ...]


@dataclass(frozen=True)
class NamedCount:
    name: str
    count: int


@dataclass(frozen=True)
class HourBucket:
    hour: str
    count: int


@dataclass(frozen=True)
class DailyPoint:
    date: date
    count: int


@dataclass(frozen=True)
class Summary:
    total_incidents: int
    unique_clients: int
    unique_days: int
    intervention_success_rate: int
