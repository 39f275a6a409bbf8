from __future__ import annotations

import uuid
import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ticketdesk.domain.models import (
    AssignmentType,
    RequestPriority,
    RequestStatus,
    TicketStatus,
    WorkspaceType,
)
from ticketdesk.extensions import db

JSONType = JSON().with_variant(JSONB, 'postgresql')
Money = Numeric(10, 2)


class TimestampedBase(db.Model):
    """Abstract base providing id/created/updated columns."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class WorkspaceRecord(TimestampedBase):
    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    organization_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    type: Mapped[WorkspaceType] = mapped_column(
        SqlEnum(WorkspaceType, name="workspace_type", native_enum=False),
        nullable=False,
        default=WorkspaceType.CUSTOM,
    )
    access_key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    # Catalog documents; see ticketdesk.domain.serialization for the shape
    teams: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)
    ticket_values: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)

    events: Mapped[list["EventRecord"]] = relationship(
        back_populates="workspace", cascade="all, delete-orphan"
    )
    people: Mapped[list["PersonRecord"]] = relationship(
        back_populates="workspace", cascade="all, delete-orphan"
    )
    requests: Mapped[list["TicketRequestRecord"]] = relationship(
        back_populates="workspace", cascade="all, delete-orphan"
    )


class EventRecord(TimestampedBase):
    __tablename__ = "events"

    workspace_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    team_id: Mapped[str] = mapped_column(String(64), nullable=False)
    opponent: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    is_playoff: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    workspace: Mapped[WorkspaceRecord] = relationship(back_populates="events")
    tickets: Mapped[list["TicketRecord"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="TicketRecord.position",
    )

    __table_args__ = (
        Index("ix_events_workspace_date", "workspace_id", "date"),
    )


class TicketRecord(TimestampedBase):
    __tablename__ = "tickets"

    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    seat_type: Mapped[str] = mapped_column(String(255), nullable=False)
    custom_name: Mapped[str | None] = mapped_column(String(255))
    section: Mapped[str | None] = mapped_column(String(64))
    row: Mapped[str | None] = mapped_column(String(64))
    seat: Mapped[str | None] = mapped_column(String(64))
    value: Mapped[Decimal] = mapped_column(Money, default=0, nullable=False)
    source: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(255))
    assigned_company: Mapped[str | None] = mapped_column(String(255))
    assignment_type: Mapped[AssignmentType | None] = mapped_column(
        SqlEnum(AssignmentType, name="assignment_type", native_enum=False)
    )
    status: Mapped[TicketStatus | None] = mapped_column(
        SqlEnum(TicketStatus, name="ticket_status", native_enum=False)
    )
    price: Mapped[Decimal] = mapped_column(Money, default=0, nullable=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    event: Mapped[EventRecord] = relationship(back_populates="tickets")


class PersonRecord(TimestampedBase):
    __tablename__ = "people"

    workspace_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(64))

    workspace: Mapped[WorkspaceRecord] = relationship(back_populates="people")
    assignment_history: Mapped[list["AssignmentHistoryRecord"]] = relationship(
        back_populates="person",
        cascade="all, delete-orphan",
        order_by="AssignmentHistoryRecord.position",
    )


class AssignmentHistoryRecord(TimestampedBase):
    __tablename__ = "assignment_history"

    person_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Snapshot; the event may since have been deleted
    event_id: Mapped[str] = mapped_column(String(36), nullable=False)
    event_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    date: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    seat_type: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    assignment_type: Mapped[AssignmentType | None] = mapped_column(
        SqlEnum(AssignmentType, name="history_assignment_type", native_enum=False)
    )
    price: Mapped[Decimal] = mapped_column(Money, default=0, nullable=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    person: Mapped[PersonRecord] = relationship(back_populates="assignment_history")


class TicketRequestRecord(db.Model):
    __tablename__ = "ticket_requests"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    workspace_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    user_company: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    user_phone: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    priority: Mapped[RequestPriority] = mapped_column(
        SqlEnum(RequestPriority, name="request_priority", native_enum=False),
        default=RequestPriority.WANT,
        nullable=False,
    )
    message: Mapped[str | None] = mapped_column(Text)
    requested_quantities: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        SqlEnum(RequestStatus, name="request_status", native_enum=False),
        default=RequestStatus.PENDING,
        nullable=False,
    )
    requested_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    processed_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True))
    processed_by: Mapped[str | None] = mapped_column(String(255))
    assigned_ticket_id: Mapped[str | None] = mapped_column(String(36))

    workspace: Mapped[WorkspaceRecord] = relationship(back_populates="requests")


__all__ = [
    "JSONType",
    "TimestampedBase",
    "WorkspaceRecord",
    "EventRecord",
    "TicketRecord",
    "PersonRecord",
    "AssignmentHistoryRecord",
    "TicketRequestRecord",
]
