"""SQLAlchemy-backed stores scoped to a workspace."""

from __future__ import annotations

from datetime import timezone
from functools import wraps

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ticketdesk.domain import (
    ZERO,
    AssignmentHistory,
    Event,
    Person,
    StoreError,
    Ticket,
    TicketRequest,
    Workspace,
)
from ticketdesk.domain import serialization as codec
from ticketdesk.extensions import db
from ticketdesk.models import (
    AssignmentHistoryRecord,
    EventRecord,
    PersonRecord,
    TicketRecord,
    TicketRequestRecord,
    WorkspaceRecord,
)
from ticketdesk.stores.interfaces import EventStore, PersonStore, RequestStore, WorkspaceStore


def _store_operation(func):
    """Roll back and report database failures as StoreError."""

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"{type(self).__name__}.{func.__name__} failed: {e}")
            raise StoreError(f"Database operation failed: {func.__name__}") from e

    return wrapper


def _aware(value):
    # SQLite drops tzinfo on round trip
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _sync_children(current: list, incoming: list, factory, apply) -> list:
    """Update children in place by id, create new ones, drop the rest."""
    existing = {child.id: child for child in current}
    result = []
    for position, item in enumerate(incoming):
        record = existing.get(item.id) or factory(id=item.id)
        apply(record, item, position)
        result.append(record)
    return result


# ---------------------------------------------------------------- events

def _apply_ticket(record: TicketRecord, ticket: Ticket, position: int) -> None:
    record.position = position
    record.seat_type = ticket.seat_type
    record.custom_name = ticket.custom_name
    record.section = ticket.section
    record.row = ticket.row
    record.seat = ticket.seat
    record.value = ticket.value
    record.source = ticket.source
    record.assigned_to = ticket.assigned_to
    record.assigned_company = ticket.assigned_company
    record.assignment_type = ticket.assignment_type
    record.status = ticket.status
    record.price = ticket.price
    record.confirmed = ticket.confirmed
    record.parking = ticket.parking
    record.created_at = ticket.created_at
    record.updated_at = ticket.updated_at


def _ticket_from_record(record: TicketRecord, event_id: str) -> Ticket:
    return Ticket(
        id=record.id,
        event_id=event_id,
        seat_type=record.seat_type,
        custom_name=record.custom_name,
        section=record.section,
        row=record.row,
        seat=record.seat,
        value=record.value if record.value is not None else ZERO,
        source=record.source or "",
        assigned_to=record.assigned_to,
        assigned_company=record.assigned_company,
        assignment_type=record.assignment_type,
        status=record.status,
        price=record.price if record.price is not None else ZERO,
        confirmed=bool(record.confirmed),
        parking=bool(record.parking),
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
    )


def _event_from_record(record: EventRecord) -> Event:
    return Event(
        id=record.id,
        team_id=record.team_id,
        opponent=record.opponent,
        date=record.date,
        time=record.time,
        is_playoff=bool(record.is_playoff),
        tickets=tuple(_ticket_from_record(t, record.id) for t in record.tickets),
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
    )


class SqlEventStore(EventStore):
    def __init__(self, workspace_id: str) -> None:
        self.workspace_id = workspace_id

    def _record(self, event_id: str) -> EventRecord | None:
        record = db.session.get(EventRecord, event_id)
        if record is None or record.workspace_id != self.workspace_id:
            return None
        return record

    @_store_operation
    def list_events(self) -> list[Event]:
        stmt = (
            select(EventRecord)
            .filter_by(workspace_id=self.workspace_id)
            .order_by(EventRecord.created_at, EventRecord.id)
        )
        return [_event_from_record(r) for r in db.session.scalars(stmt)]

    @_store_operation
    def get_event(self, event_id: str) -> Event | None:
        record = self._record(event_id)
        return _event_from_record(record) if record else None

    @_store_operation
    def save_event(self, event: Event) -> Event:
        record = self._record(event.id)
        if record is None:
            record = EventRecord(id=event.id, workspace_id=self.workspace_id)
            db.session.add(record)
        record.team_id = event.team_id
        record.opponent = event.opponent
        record.date = event.date
        record.time = event.time
        record.is_playoff = event.is_playoff
        record.created_at = event.created_at
        record.updated_at = event.updated_at
        record.tickets = _sync_children(
            record.tickets, list(event.tickets or ()), TicketRecord, _apply_ticket
        )
        db.session.commit()
        return event

    @_store_operation
    def delete_event(self, event_id: str) -> bool:
        record = self._record(event_id)
        if record is None:
            return False
        db.session.delete(record)
        db.session.commit()
        return True


# ---------------------------------------------------------------- people

def _apply_history(record: AssignmentHistoryRecord, entry: AssignmentHistory, position: int) -> None:
    record.position = position
    record.event_id = entry.event_id
    record.event_name = entry.event_name
    record.date = entry.date
    record.seat_type = entry.seat_type
    record.assignment_type = entry.assignment_type
    record.price = entry.price
    record.confirmed = entry.confirmed
    record.created_at = entry.created_at
    record.updated_at = entry.created_at


def _person_from_record(record: PersonRecord) -> Person:
    return Person(
        id=record.id,
        name=record.name,
        company=record.company or "",
        email=record.email,
        phone=record.phone,
        assignment_history=tuple(
            AssignmentHistory(
                id=h.id,
                event_id=h.event_id,
                event_name=h.event_name,
                date=h.date,
                seat_type=h.seat_type,
                assignment_type=h.assignment_type,
                price=h.price if h.price is not None else ZERO,
                confirmed=bool(h.confirmed),
                created_at=_aware(h.created_at),
            )
            for h in record.assignment_history
        ),
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
    )


class SqlPersonStore(PersonStore):
    def __init__(self, workspace_id: str) -> None:
        self.workspace_id = workspace_id

    def _record(self, person_id: str) -> PersonRecord | None:
        record = db.session.get(PersonRecord, person_id)
        if record is None or record.workspace_id != self.workspace_id:
            return None
        return record

    @_store_operation
    def list_people(self) -> list[Person]:
        stmt = (
            select(PersonRecord)
            .filter_by(workspace_id=self.workspace_id)
            .order_by(PersonRecord.created_at, PersonRecord.id)
        )
        return [_person_from_record(r) for r in db.session.scalars(stmt)]

    @_store_operation
    def get_person(self, person_id: str) -> Person | None:
        record = self._record(person_id)
        return _person_from_record(record) if record else None

    @_store_operation
    def save_person(self, person: Person) -> Person:
        record = self._record(person.id)
        if record is None:
            record = PersonRecord(id=person.id, workspace_id=self.workspace_id)
            db.session.add(record)
        record.name = person.name
        record.company = person.company
        record.email = person.email
        record.phone = person.phone
        record.created_at = person.created_at
        record.updated_at = person.updated_at
        record.assignment_history = _sync_children(
            record.assignment_history,
            list(person.assignment_history),
            AssignmentHistoryRecord,
            _apply_history,
        )
        db.session.commit()
        return person

    @_store_operation
    def delete_person(self, person_id: str) -> bool:
        record = self._record(person_id)
        if record is None:
            return False
        db.session.delete(record)
        db.session.commit()
        return True


# ---------------------------------------------------------------- requests

def _request_from_record(record: TicketRequestRecord) -> TicketRequest:
    return TicketRequest(
        id=record.id,
        event_id=record.event_id,
        user_id=record.user_id,
        user_name=record.user_name,
        user_email=record.user_email or "",
        user_company=record.user_company or "",
        user_phone=record.user_phone or "",
        priority=record.priority,
        message=record.message,
        requested_quantities=tuple(record.requested_quantities or ()),
        status=record.status,
        requested_at=_aware(record.requested_at),
        processed_at=_aware(record.processed_at),
        processed_by=record.processed_by,
        assigned_ticket_id=record.assigned_ticket_id,
    )


class SqlRequestStore(RequestStore):
    def __init__(self, workspace_id: str) -> None:
        self.workspace_id = workspace_id

    def _record(self, request_id: str) -> TicketRequestRecord | None:
        record = db.session.get(TicketRequestRecord, request_id)
        if record is None or record.workspace_id != self.workspace_id:
            return None
        return record

    @_store_operation
    def list_requests(self) -> list[TicketRequest]:
        stmt = (
            select(TicketRequestRecord)
            .filter_by(workspace_id=self.workspace_id)
            .order_by(TicketRequestRecord.requested_at, TicketRequestRecord.id)
        )
        return [_request_from_record(r) for r in db.session.scalars(stmt)]

    @_store_operation
    def get_request(self, request_id: str) -> TicketRequest | None:
        record = self._record(request_id)
        return _request_from_record(record) if record else None

    @_store_operation
    def save_request(self, ticket_request: TicketRequest) -> TicketRequest:
        record = self._record(ticket_request.id)
        if record is None:
            record = TicketRequestRecord(id=ticket_request.id, workspace_id=self.workspace_id)
            db.session.add(record)
        for field in (
            "event_id", "user_id", "user_name", "user_email", "user_company", "user_phone",
            "priority", "message", "status", "requested_at", "processed_at", "processed_by",
            "assigned_ticket_id",
        ):
            setattr(record, field, getattr(ticket_request, field))
        record.requested_quantities = list(ticket_request.requested_quantities)
        db.session.commit()
        return ticket_request

    @_store_operation
    def delete_request(self, request_id: str) -> bool:
        record = self._record(request_id)
        if record is None:
            return False
        db.session.delete(record)
        db.session.commit()
        return True


# ---------------------------------------------------------------- workspaces

def _workspace_from_record(record: WorkspaceRecord) -> Workspace:
    return Workspace(
        id=record.id,
        name=record.name,
        organization_name=record.organization_name or "",
        type=record.type,
        access_key=record.access_key,
        teams=tuple(codec.team_from_dict(t) for t in record.teams or ()),
        ticket_values=tuple(codec.ticket_value_from_dict(tv) for tv in record.ticket_values or ()),
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
    )


class SqlWorkspaceStore(WorkspaceStore):
    @_store_operation
    def list_workspaces(self) -> list[Workspace]:
        stmt = select(WorkspaceRecord).order_by(WorkspaceRecord.created_at, WorkspaceRecord.id)
        return [_workspace_from_record(r) for r in db.session.scalars(stmt)]

    @_store_operation
    def get_workspace(self, workspace_id: str) -> Workspace | None:
        record = db.session.get(WorkspaceRecord, workspace_id)
        return _workspace_from_record(record) if record else None

    @_store_operation
    def get_workspace_by_key(self, access_key: str) -> Workspace | None:
        record = db.session.scalars(
            select(WorkspaceRecord).filter_by(access_key=access_key)
        ).first()
        return _workspace_from_record(record) if record else None

    @_store_operation
    def save_workspace(self, workspace: Workspace) -> Workspace:
        record = db.session.get(WorkspaceRecord, workspace.id)
        if record is None:
            record = WorkspaceRecord(id=workspace.id)
            db.session.add(record)
        record.name = workspace.name
        record.organization_name = workspace.organization_name
        record.type = workspace.type
        record.access_key = workspace.access_key
        record.teams = [codec.team_to_dict(t) for t in workspace.teams]
        record.ticket_values = [codec.ticket_value_to_dict(tv) for tv in workspace.ticket_values]
        record.created_at = workspace.created_at
        record.updated_at = workspace.updated_at
        db.session.commit()
        return workspace

    @_store_operation
    def delete_workspace(self, workspace_id: str) -> bool:
        record = db.session.get(WorkspaceRecord, workspace_id)
        if record is None:
            return False
        db.session.delete(record)
        db.session.commit()
        return True
