"""Conversion between domain models and JSON-safe dictionaries.

Used by the JSON file stores, the HTTP API and the exporters. Parsers raise
``ValueError``/``KeyError``/``TypeError`` on malformed input; callers decide
whether that is a client error or a record to drop.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Type, TypeVar

from ticketdesk.domain.models import (
    ZERO,
    AssignmentHistory,
    AssignmentType,
    Event,
    Person,
    RequestPriority,
    RequestStatus,
    SeatType,
    Team,
    Ticket,
    TicketRequest,
    TicketStatus,
    TicketValue,
    Workspace,
    WorkspaceType,
)

E = TypeVar("E", bound=Enum)


# ---------------------------------------------------------------- parsing

def parse_money(value: Any) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_optional_datetime(value: Any) -> datetime | None:
    return parse_datetime(value) if value else None


def parse_enum(enum_cls: Type[E], value: Any) -> E | None:
    """Parse an enum by value; empty strings and None mean 'unset'."""
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    return enum_cls(value)


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _enum_value(value: Enum | None) -> str:
    return value.value if value is not None else ""


def _money(value: Decimal | None) -> str:
    return str(value if value is not None else ZERO)


def _iso(value: date | time | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# ---------------------------------------------------------------- workspace

def seat_type_to_dict(seat_type: SeatType) -> dict:
    return {"id": seat_type.id, "name": seat_type.name, "description": seat_type.description}


def seat_type_from_dict(data: Mapping[str, Any]) -> SeatType:
    return SeatType(
        id=str(data.get("id") or data["name"]),
        name=str(data["name"]),
        description=data.get("description"),
    )


def team_to_dict(team: Team) -> dict:
    return {
        "id": team.id,
        "name": team.name,
        "sport": team.sport,
        "color": team.color,
        "enabled": team.enabled,
        "seat_types": [seat_type_to_dict(s) for s in team.seat_types],
    }


def team_from_dict(data: Mapping[str, Any]) -> Team:
    return Team(
        id=str(data["id"]),
        name=str(data["name"]),
        sport=str(data.get("sport", "")),
        color=str(data.get("color", "")),
        enabled=parse_bool(data.get("enabled", True)),
        seat_types=tuple(seat_type_from_dict(s) for s in data.get("seat_types") or ()),
    )


def ticket_value_to_dict(tv: TicketValue) -> dict:
    return {
        "team_id": tv.team_id,
        "seat_type": tv.seat_type,
        "value": _money(tv.value),
        "season": tv.season,
        "source": tv.source,
    }


def ticket_value_from_dict(data: Mapping[str, Any]) -> TicketValue:
    return TicketValue(
        team_id=str(data["team_id"]),
        seat_type=str(data["seat_type"]),
        value=parse_money(data.get("value")),
        season=data.get("season"),
        source=data.get("source") or "",
    )


def workspace_to_dict(workspace: Workspace, include_key: bool = True) -> dict:
    data = {
        "id": workspace.id,
        "name": workspace.name,
        "organization_name": workspace.organization_name,
        "type": workspace.type.value,
        "teams": [team_to_dict(t) for t in workspace.teams],
        "ticket_values": [ticket_value_to_dict(tv) for tv in workspace.ticket_values],
        "created_at": _iso(workspace.created_at),
        "updated_at": _iso(workspace.updated_at),
    }
    if include_key:
        data["access_key"] = workspace.access_key
    return data


def workspace_from_dict(data: Mapping[str, Any]) -> Workspace:
    return Workspace(
        id=str(data["id"]),
        name=str(data["name"]),
        organization_name=str(data.get("organization_name", "")),
        type=WorkspaceType(data.get("type", WorkspaceType.CUSTOM.value)),
        access_key=str(data["access_key"]),
        teams=tuple(team_from_dict(t) for t in data.get("teams") or ()),
        ticket_values=tuple(ticket_value_from_dict(tv) for tv in data.get("ticket_values") or ()),
        created_at=parse_datetime(data["created_at"]),
        updated_at=parse_datetime(data["updated_at"]),
    )


# ---------------------------------------------------------------- events

def ticket_to_dict(ticket: Ticket) -> dict:
    return {
        "id": ticket.id,
        "event_id": ticket.event_id,
        "seat_type": ticket.seat_type,
        "custom_name": ticket.custom_name,
        "section": ticket.section,
        "row": ticket.row,
        "seat": ticket.seat,
        "value": _money(ticket.value),
        "source": ticket.source,
        "assigned_to": ticket.assigned_to,
        "assigned_company": ticket.assigned_company,
        "assignment_type": _enum_value(ticket.assignment_type),
        "status": _enum_value(ticket.status),
        "price": _money(ticket.price),
        "confirmed": ticket.confirmed,
        "parking": ticket.parking,
        "created_at": _iso(ticket.created_at),
        "updated_at": _iso(ticket.updated_at),
    }


def ticket_from_dict(data: Mapping[str, Any]) -> Ticket:
    return Ticket(
        id=str(data["id"]),
        event_id=str(data["event_id"]),
        seat_type=str(data["seat_type"]),
        custom_name=data.get("custom_name"),
        section=data.get("section"),
        row=data.get("row"),
        seat=data.get("seat"),
        value=parse_money(data.get("value")),
        source=data.get("source") or "",
        assigned_to=data.get("assigned_to") or None,
        assigned_company=data.get("assigned_company") or None,
        assignment_type=parse_enum(AssignmentType, data.get("assignment_type")),
        status=parse_enum(TicketStatus, data.get("status")),
        price=parse_money(data.get("price")),
        confirmed=parse_bool(data.get("confirmed", False)),
        parking=parse_bool(data.get("parking", False)),
        created_at=parse_datetime(data["created_at"]),
        updated_at=parse_datetime(data["updated_at"]),
    )


def event_to_dict(event: Event) -> dict:
    return {
        "id": event.id,
        "team_id": event.team_id,
        "opponent": event.opponent,
        "date": _iso(event.date),
        "time": _iso(event.time),
        "is_playoff": event.is_playoff,
        "tickets": [ticket_to_dict(t) for t in event.tickets or ()],
        "created_at": _iso(event.created_at),
        "updated_at": _iso(event.updated_at),
    }


def event_from_dict(data: Mapping[str, Any]) -> Event:
    """Parse a stored event; a missing or non-list ticket collection raises."""
    tickets = data["tickets"]
    if not isinstance(tickets, list):
        raise TypeError("Event tickets must be a list")
    return Event(
        id=str(data["id"]),
        team_id=str(data["team_id"]),
        opponent=str(data["opponent"]),
        date=parse_date(data["date"]),
        time=parse_time(data["time"]),
        is_playoff=parse_bool(data.get("is_playoff", False)),
        tickets=tuple(ticket_from_dict(t) for t in tickets),
        created_at=parse_datetime(data["created_at"]),
        updated_at=parse_datetime(data["updated_at"]),
    )


# ---------------------------------------------------------------- people

def history_to_dict(entry: AssignmentHistory) -> dict:
    return {
        "id": entry.id,
        "event_id": entry.event_id,
        "event_name": entry.event_name,
        "date": entry.date,
        "seat_type": entry.seat_type,
        "assignment_type": _enum_value(entry.assignment_type),
        "price": _money(entry.price),
        "confirmed": entry.confirmed,
        "created_at": _iso(entry.created_at),
    }


def history_from_dict(data: Mapping[str, Any]) -> AssignmentHistory:
    return AssignmentHistory(
        id=str(data["id"]),
        event_id=str(data["event_id"]),
        event_name=str(data.get("event_name", "")),
        date=str(data.get("date", "")),
        seat_type=str(data.get("seat_type", "")),
        assignment_type=parse_enum(AssignmentType, data.get("assignment_type")),
        price=parse_money(data.get("price")),
        confirmed=parse_bool(data.get("confirmed", False)),
        created_at=parse_datetime(data["created_at"]),
    )


def person_to_dict(person: Person) -> dict:
    return {
        "id": person.id,
        "name": person.name,
        "company": person.company,
        "email": person.email,
        "phone": person.phone,
        "assignment_history": [history_to_dict(h) for h in person.assignment_history],
        "created_at": _iso(person.created_at),
        "updated_at": _iso(person.updated_at),
    }


def person_from_dict(data: Mapping[str, Any]) -> Person:
    return Person(
        id=str(data["id"]),
        name=str(data["name"]),
        company=str(data.get("company") or ""),
        email=data.get("email"),
        phone=data.get("phone"),
        assignment_history=tuple(history_from_dict(h) for h in data.get("assignment_history") or ()),
        created_at=parse_datetime(data["created_at"]),
        updated_at=parse_datetime(data["updated_at"]),
    )


# ---------------------------------------------------------------- requests

def request_to_dict(request: TicketRequest) -> dict:
    return {
        "id": request.id,
        "event_id": request.event_id,
        "user_id": request.user_id,
        "user_name": request.user_name,
        "user_email": request.user_email,
        "user_company": request.user_company,
        "user_phone": request.user_phone,
        "priority": request.priority.value,
        "message": request.message,
        "requested_quantities": list(request.requested_quantities),
        "status": request.status.value,
        "requested_at": _iso(request.requested_at),
        "processed_at": _iso(request.processed_at),
        "processed_by": request.processed_by,
        "assigned_ticket_id": request.assigned_ticket_id,
    }


def request_from_dict(data: Mapping[str, Any]) -> TicketRequest:
    return TicketRequest(
        id=str(data["id"]),
        event_id=str(data["event_id"]),
        user_id=str(data["user_id"]),
        user_name=str(data["user_name"]),
        user_email=data.get("user_email") or "",
        user_company=data.get("user_company") or "",
        user_phone=data.get("user_phone") or "",
        priority=RequestPriority(data.get("priority", RequestPriority.WANT.value)),
        message=data.get("message"),
        requested_quantities=tuple(int(q) for q in data.get("requested_quantities") or ()),
        status=RequestStatus(data.get("status", RequestStatus.PENDING.value)),
        requested_at=parse_datetime(data["requested_at"]),
        processed_at=parse_optional_datetime(data.get("processed_at")),
        processed_by=data.get("processed_by"),
        assigned_ticket_id=data.get("assigned_ticket_id"),
    )
