"""Event and ticket inventory service."""
from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Iterator, Mapping

from ticketdesk.domain import (
    ZERO,
    AssignmentType,
    Event,
    EventStats,
    SeatType,
    Ticket,
    TicketStatus,
    Workspace,
)
from ticketdesk.domain.serialization import (
    parse_bool,
    parse_date,
    parse_enum,
    parse_money,
    parse_time,
)
from ticketdesk.services.calendar import current_season, event_wall_clock, is_past_event, utc_now
from ticketdesk.stores.interfaces import EventStore

REQUIRED_EVENT_FIELDS = ("team_id", "opponent", "date", "time")
EVENT_UPDATE_FIELDS = ("team_id", "opponent", "date", "time", "is_playoff")
ASSIGNMENT_FIELDS = (
    "assigned_to",
    "assigned_company",
    "assignment_type",
    "status",
    "price",
    "confirmed",
    "value",
    "source",
    "parking",
)


def get_event_stats(event: Event | None) -> EventStats:
    """Ticket counts and confirmed revenue for one event.

    A missing event or ticket collection yields zeros and is never sold out.
    """
    if event is None or event.tickets is None:
        return EventStats()

    tickets = event.tickets
    assigned = [t for t in tickets if t.is_assigned]
    sold = [t for t in assigned if t.assignment_type is AssignmentType.SOLD]
    revenue = sum(
        (t.price for t in sold if t.status is TicketStatus.CONFIRMED),
        ZERO,
    )
    available = len(tickets) - len(assigned)
    return EventStats(
        total_tickets=len(tickets),
        assigned_tickets=len(assigned),
        available_tickets=available,
        sold_tickets=len(sold),
        confirmed_revenue=revenue,
        is_sold_out=available == 0,
    )


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _coerce_assignment(changes: Mapping[str, Any]) -> dict[str, Any]:
    fields = {key: changes[key] for key in ASSIGNMENT_FIELDS if key in changes}
    if "assigned_to" in fields:
        fields["assigned_to"] = _clean_text(fields["assigned_to"])
    if "assigned_company" in fields:
        fields["assigned_company"] = _clean_text(fields["assigned_company"])
    if "assignment_type" in fields:
        fields["assignment_type"] = parse_enum(AssignmentType, fields["assignment_type"])
    if "status" in fields:
        fields["status"] = parse_enum(TicketStatus, fields["status"])
    for key in ("price", "value"):
        if key in fields:
            fields[key] = parse_money(fields[key])
    for key in ("confirmed", "parking"):
        if key in fields:
            fields[key] = parse_bool(fields[key])
    if "source" in fields:
        fields["source"] = fields["source"] or ""
    return fields


def apply_assignment(ticket: Ticket, changes: Mapping[str, Any], now: datetime) -> Ticket:
    """Merge assignment changes into a ticket and re-derive its price.

    Sold tickets keep an explicit price, else the ticket value when the sale is
    being recorded, else their current price. Every other assignment costs 0
    and a newly given non-sold type clears ``confirmed``.
    """
    fields = _coerce_assignment(changes)
    updated = replace(ticket, **fields, updated_at=now)

    if "assignment_type" in fields and fields["assignment_type"] is AssignmentType.SOLD:
        price = fields.get("price", updated.value)
    elif updated.assignment_type is AssignmentType.SOLD:
        price = fields.get("price", ticket.price)
    else:
        price = ZERO
    confirmed = updated.confirmed
    if (
        "assignment_type" in fields
        and fields["assignment_type"] is not AssignmentType.SOLD
        and "confirmed" not in fields
    ):
        confirmed = False
    status = updated.status
    if updated.is_assigned and updated.assignment_type is not None and status is None:
        status = TicketStatus.TENTATIVE

    if not updated.is_assigned:
        return replace(
            updated,
            assigned_company=None,
            assignment_type=None,
            status=None,
            price=ZERO,
            confirmed=False,
        )
    return replace(updated, price=price, confirmed=confirmed, status=status)


class FilteredEvents:
    """Restartable view over the store; every iteration re-reads it."""

    def __init__(
        self,
        store: EventStore,
        search: str | None = None,
        team_id: str | None = None,
        show_past_events: bool = False,
        now: datetime | None = None,
    ) -> None:
        self.store = store
        self.search = (search or "").strip().lower()
        self.team_id = team_id or None
        self.show_past_events = show_past_events
        self.now = now

    def matches(self, event: Event) -> bool:
        if self.team_id and event.team_id != self.team_id:
            return False
        if not self.show_past_events and is_past_event(event, self.now):
            return False
        if self.search:
            if self.search in event.opponent.lower():
                return True
            return any(
                self.search in (t.assigned_to or "").lower()
                or self.search in (t.assigned_company or "").lower()
                for t in event.tickets or ()
            )
        return True

    def __iter__(self) -> Iterator[Event]:
        return (event for event in self.store.list_events() if self.matches(event))

    def sorted(self) -> list[Event]:
        return sorted(self, key=event_wall_clock)


class EventInventory:
    """Service for event and ticket operations within one workspace."""

    def __init__(
        self,
        store: EventStore,
        workspace: Workspace | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.workspace = workspace
        self.clock = clock or utc_now

    # Events

    def create_event(
        self,
        event_data: Mapping[str, Any],
        fallback_seat_types: Iterable[Any] = (),
        now: datetime | None = None,
    ) -> Event | None:
        """Create an event and seed its tickets from the workspace catalog.

        Tickets come from the ticket values configured for the event's team in
        the current season; without any, from ``fallback_seat_types``. Returns
        None when a required field is missing.
        """
        if any(not event_data.get(key) for key in REQUIRED_EVENT_FIELDS):
            return None

        now = now or self.clock()
        event_id = str(uuid.uuid4())
        team_id = str(event_data["team_id"])
        seeds = self._seat_seeds(team_id, fallback_seat_types, now)
        tickets = tuple(
            Ticket(
                id=str(uuid.uuid4()),
                event_id=event_id,
                seat_type=label,
                section=label,
                row="1",
                seat=str(position),
                value=value,
                source=source,
                created_at=now,
                updated_at=now,
            )
            for position, (label, value, source) in enumerate(seeds, start=1)
        )
        event = Event(
            id=event_id,
            team_id=team_id,
            opponent=str(event_data["opponent"]).strip(),
            date=parse_date(event_data["date"]),
            time=parse_time(event_data["time"]),
            is_playoff=parse_bool(event_data.get("is_playoff", False)),
            tickets=tickets,
            created_at=now,
            updated_at=now,
        )
        return self.store.save_event(event)

    def _seat_seeds(
        self, team_id: str, fallback_seat_types: Iterable[Any], now: datetime
    ) -> list[tuple[str, Decimal, str]]:
        configured = (
            self.workspace.ticket_values_for(team_id, current_season(now))
            if self.workspace
            else []
        )
        if configured:
            return [
                (tv.seat_type or f"Seat {index}", tv.value or ZERO, tv.source or "")
                for index, tv in enumerate(configured, start=1)
            ]
        if isinstance(fallback_seat_types, (str, Mapping)):
            raise ValueError("Seat types must be a list")
        seeds = []
        for seat_type in fallback_seat_types:
            if isinstance(seat_type, str):
                name, value, source = seat_type, None, None
            elif isinstance(seat_type, Mapping):
                name, value, source = seat_type.get("name"), seat_type.get("value"), seat_type.get("source")
            elif isinstance(seat_type, SeatType):
                name, value, source = seat_type.name, None, None
            else:
                raise ValueError(f"Invalid seat type: {seat_type!r}")
            if not name or not str(name).strip():
                raise ValueError("Seat types need a name")
            seeds.append((str(name), parse_money(value), source or ""))
        return seeds

    def update_event(self, event_id: str, changes: Mapping[str, Any]) -> Event | None:
        event = self.store.get_event(event_id)
        if event is None:
            return None
        fields: dict[str, Any] = {}
        for key in EVENT_UPDATE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == "date":
                value = parse_date(value)
            elif key == "time":
                value = parse_time(value)
            elif key == "is_playoff":
                value = parse_bool(value)
            else:
                value = str(value).strip()
            fields[key] = value
        return self.store.save_event(replace(event, **fields, updated_at=self.clock()))

    def delete_event(self, event_id: str) -> bool:
        return self.store.delete_event(event_id)

    def get_event(self, event_id: str) -> Event | None:
        return self.store.get_event(event_id)

    def list_events(self) -> list[Event]:
        return self.store.list_events()

    def get_filtered_events(
        self,
        search: str | None = None,
        team_id: str | None = None,
        show_past_events: bool = False,
        now: datetime | None = None,
    ) -> FilteredEvents:
        return FilteredEvents(self.store, search, team_id, show_past_events, now)

    def get_event_stats(self, event: Event | None) -> EventStats:
        return get_event_stats(event)

    # Tickets

    def update_ticket_assignment(
        self, event_id: str, ticket_id: str, changes: Mapping[str, Any]
    ) -> Ticket | None:
        event = self.store.get_event(event_id)
        if event is None:
            return None
        ticket = event.get_ticket(ticket_id)
        if ticket is None:
            return None
        now = self.clock()
        updated = apply_assignment(ticket, changes, now)
        self._save_tickets(event, [updated if t.id == ticket_id else t for t in event.tickets], now)
        return updated

    def bulk_update_assignments(
        self, event_id: str, ticket_ids: Iterable[str], changes: Mapping[str, Any]
    ) -> tuple[int, list[str]]:
        """
        Apply the same assignment change to several tickets of one event.

        Returns:
            (success_count, errors)
        """
        event = self.store.get_event(event_id)
        if event is None:
            return 0, [f"Event {event_id} not found"]

        now = self.clock()
        wanted = list(dict.fromkeys(ticket_ids))
        by_id = {t.id: t for t in event.tickets or ()}
        errors = [f"Ticket {tid} not found" for tid in wanted if tid not in by_id]
        updated_ids = {tid for tid in wanted if tid in by_id}
        if not updated_ids:
            return 0, errors

        tickets = [
            apply_assignment(t, changes, now) if t.id in updated_ids else t
            for t in event.tickets
        ]
        self._save_tickets(event, tickets, now)
        return len(updated_ids), errors

    def add_custom_ticket(
        self, event_id: str, section: str, row: str, seat: str, value: Any
    ) -> Ticket | None:
        event = self.store.get_event(event_id)
        if event is None:
            return None
        now = self.clock()
        ticket = Ticket(
            id=str(uuid.uuid4()),
            event_id=event_id,
            seat_type=f"{section}-{row}-{seat}",
            custom_name=f"Section {section}, Row {row}, Seat {seat}",
            section=section,
            row=row,
            seat=seat,
            value=parse_money(value),
            source="custom",
            created_at=now,
            updated_at=now,
        )
        self._save_tickets(event, [*(event.tickets or ()), ticket], now)
        return ticket

    def delete_ticket(self, event_id: str, ticket_id: str) -> bool:
        event = self.store.get_event(event_id)
        if event is None or event.get_ticket(ticket_id) is None:
            return False
        now = self.clock()
        self._save_tickets(event, [t for t in event.tickets if t.id != ticket_id], now)
        return True

    def _save_tickets(self, event: Event, tickets: list[Ticket], now: datetime) -> Event:
        return self.store.save_event(replace(event, tickets=tuple(tickets), updated_at=now))
