"""Domain models for workspaces, events, tickets, people and requests.

These are immutable values; services build updated copies with
``dataclasses.replace`` and hand them to a store. ORM models live in
ticketdesk/models/models.py (persistence layer).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")


class AssignmentType(Enum):
    SOLD = "sold"
    TEAM = "team"
    DONATED = "donated"
    GIFTED = "gifted"
    TRADED = "traded"


class TicketStatus(Enum):
    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    TRANSFERRED = "transferred"


class RequestPriority(Enum):
    WANT = "want"
    NEED = "need"
    NICE_TO_HAVE = "nice-to-have"


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    COMPLETED = "completed"


class WorkspaceType(Enum):
    FTM = "ftm"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SeatType:
    id: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    sport: str
    color: str
    enabled: bool = True
    seat_types: tuple[SeatType, ...] = ()


@dataclass(frozen=True)
class TicketValue:
    """Configured face value of one seat type for a team and season."""

    team_id: str
    seat_type: str
    value: Decimal
    season: str | None = None
    source: str = ""


@dataclass(frozen=True)
class Workspace:
    """Per-tenant catalog used to seed new events."""

    id: str
    name: str
    organization_name: str
    type: WorkspaceType
    access_key: str
    created_at: datetime
    updated_at: datetime
    teams: tuple[Team, ...] = ()
    ticket_values: tuple[TicketValue, ...] = ()

    def enabled_teams(self) -> list[Team]:
        return [team for team in self.teams if team.enabled]

    def get_team(self, team_id: str) -> Team | None:
        return next((team for team in self.teams if team.id == team_id), None)

    def team_name(self, team_id: str) -> str:
        team = self.get_team(team_id)
        return team.name if team else team_id

    def ticket_values_for(self, team_id: str, season: str) -> list[TicketValue]:
        """Return configured seat values for a team in a season, in catalog order."""
        return [
            tv for tv in self.ticket_values
            if tv.team_id == team_id and tv.season == season
        ]

    def seasons(self) -> list[str]:
        return sorted({tv.season for tv in self.ticket_values if tv.season}, reverse=True)


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a single seat for an event."""

    id: str
    event_id: str
    seat_type: str
    value: Decimal
    created_at: datetime
    updated_at: datetime
    custom_name: str | None = None
    section: str | None = None
    row: str | None = None
    seat: str | None = None
    source: str = ""
    assigned_to: str | None = None
    assigned_company: str | None = None
    assignment_type: AssignmentType | None = None
    status: TicketStatus | None = None
    price: Decimal = ZERO
    confirmed: bool = False
    parking: bool = False

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_to)

    @property
    def display_name(self) -> str:
        return self.custom_name or self.seat_type


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event and the tickets it owns.

    ``tickets`` is None only when a persisted record lost its ticket
    collection; statistics treat that as an empty event.
    """

    id: str
    team_id: str
    opponent: str
    date: date
    time: time
    created_at: datetime
    updated_at: datetime
    is_playoff: bool = False
    tickets: tuple[Ticket, ...] | None = ()

    def get_ticket(self, ticket_id: str) -> Ticket | None:
        return next((t for t in self.tickets or () if t.id == ticket_id), None)


@dataclass(frozen=True)
class EventStats:
    total_tickets: int = 0
    assigned_tickets: int = 0
    available_tickets: int = 0
    sold_tickets: int = 0
    confirmed_revenue: Decimal = ZERO
    is_sold_out: bool = False


@dataclass(frozen=True)
class AssignmentHistory:
    """Snapshot of one ticket assignment, appended to a Person."""

    id: str
    event_id: str
    event_name: str
    date: str
    seat_type: str
    assignment_type: AssignmentType | None
    price: Decimal
    confirmed: bool
    created_at: datetime


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    company: str
    created_at: datetime
    updated_at: datetime
    email: str | None = None
    phone: str | None = None
    assignment_history: tuple[AssignmentHistory, ...] = ()

    def matches(self, name: str, company: str | None) -> bool:
        """Case-insensitive (name, company) de-duplication key match."""
        return (
            self.name.lower() == name.lower()
            and self.company.lower() == (company or "").lower()
        )


@dataclass(frozen=True)
class TicketRequest:
    id: str
    event_id: str
    user_id: str
    user_name: str
    requested_at: datetime
    user_email: str = ""
    user_company: str = ""
    user_phone: str = ""
    priority: RequestPriority = RequestPriority.WANT
    message: str | None = None
    requested_quantities: tuple[int, ...] = field(default_factory=tuple)
    status: RequestStatus = RequestStatus.PENDING
    processed_at: datetime | None = None
    processed_by: str | None = None
    assigned_ticket_id: str | None = None
