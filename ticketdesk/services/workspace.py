"""Workspace configuration: team catalog, seat types and ticket values."""
from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from ticketdesk.domain import SeatType, Team, TicketValue, Workspace, WorkspaceType
from ticketdesk.domain.serialization import (
    parse_money,
    seat_type_from_dict,
    team_from_dict,
    ticket_value_from_dict,
)
from ticketdesk.services.calendar import current_season, recent_seasons, utc_now
from ticketdesk.stores.interfaces import WorkspaceStore


def _seats(*names: str) -> tuple[SeatType, ...]:
    return tuple(
        SeatType(id=name.lower().replace(", ", "-").replace(" ", "-"), name=name)
        for name in names
    )


_SUITE = _seats(
    "Suite 1, Row 2, Seat 3",
    "Suite 1, Row 2, Seat 4",
    "Suite 1, Row 3, Seat 1",
    "Suite 1, Row 3, Seat 2",
)
_SUITE_VALUES = (350, 350, 260, 260)

DEFAULT_TEAMS: tuple[Team, ...] = (
    Team(
        id="nuggets",
        name="Denver Nuggets",
        sport="NBA",
        color="#0e2240",
        seat_types=_SUITE + _seats("Section 124, Row 1, Seat 15", "Section 124, Row 1, Seat 16"),
    ),
    Team(id="avalanche", name="Colorado Avalanche", sport="NHL", color="#6f263d", seat_types=_SUITE),
    Team(
        id="broncos",
        name="Denver Broncos",
        sport="NFL",
        color="#fb4f14",
        seat_types=_seats(
            "Section 105, Row 8, Seat 7",
            "Section 105, Row 8, Seat 8",
            "Section 105, Row 8, Seat 9",
            "Section 105, Row 8, Seat 10",
            "Section 313, Row 7, Seat 7",
            "Section 313, Row 7, Seat 8",
            "Section 313, Row 7, Seat 9",
            "Section 313, Row 7, Seat 10",
        ),
    ),
    Team(id="concerts", name="Concerts & Events", sport="Entertainment", color="#2563eb", seat_types=_SUITE),
)

# Face values per team, aligned with DEFAULT_TEAMS seat order
DEFAULT_SEAT_VALUES: dict[str, tuple[int, ...]] = {
    "avalanche": _SUITE_VALUES,
    "concerts": _SUITE_VALUES,
    "nuggets": _SUITE_VALUES + (0, 0),
    "broncos": (300, 300, 300, 300, 354, 354, 354, 354),
}


def default_team(team_id: str) -> Team | None:
    return next((team for team in DEFAULT_TEAMS if team.id == team_id), None)


def default_ticket_values(season: str) -> list[TicketValue]:
    """The default catalog's face values for one season."""
    values = []
    for team_id, amounts in DEFAULT_SEAT_VALUES.items():
        team = default_team(team_id)
        for seat_type, amount in zip(team.seat_types, amounts):
            values.append(TicketValue(team_id, seat_type.name, Decimal(amount), season))
    return values


def _values_for_teams(teams: Iterable[Team], season: str) -> list[TicketValue]:
    """Default values for the given teams' seats; unknown seats start at 0."""
    defaults = {(tv.team_id, tv.seat_type): tv.value for tv in default_ticket_values(season)}
    return [
        TicketValue(team.id, seat.name, defaults.get((team.id, seat.name), Decimal(0)), season)
        for team in teams
        for seat in team.seat_types
    ]


class WorkspaceService:
    """Service for workspace setup and catalog maintenance."""

    def __init__(self, store: WorkspaceStore, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self.clock = clock or utc_now

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        return self.store.get_workspace(workspace_id)

    def get_workspace_by_key(self, access_key: str | None) -> Workspace | None:
        if not access_key:
            return None
        return self.store.get_workspace_by_key(access_key)

    def list_workspaces(self) -> list[Workspace]:
        return self.store.list_workspaces()

    def create_ftm_workspace(self, access_key: str) -> Workspace:
        """Workspace with every default team enabled and default values."""
        now = self.clock()
        workspace = Workspace(
            id=str(uuid.uuid4()),
            name="FTM Workspace",
            organization_name="FTM Ticket Management",
            type=WorkspaceType.FTM,
            access_key=access_key,
            teams=DEFAULT_TEAMS,
            ticket_values=tuple(default_ticket_values(current_season(now))),
            created_at=now,
            updated_at=now,
        )
        return self.store.save_workspace(workspace)

    def create_custom_workspace(
        self,
        access_key: str,
        organization_name: str,
        selected_teams: Iterable[str],
        custom_seat_types: Mapping[str, Iterable[Any]] | None = None,
    ) -> Workspace:
        """Workspace enabling only ``selected_teams``.

        ``custom_seat_types`` replaces a team's default seats; entries may be
        SeatType values, mappings or plain names.
        """
        now = self.clock()
        selected = set(selected_teams)
        custom_seat_types = custom_seat_types or {}
        teams = []
        for team in DEFAULT_TEAMS:
            seat_types = team.seat_types
            if custom_seat_types.get(team.id):
                seat_types = tuple(_coerce_seat_type(s) for s in custom_seat_types[team.id])
            teams.append(replace(team, enabled=team.id in selected, seat_types=seat_types))

        workspace = Workspace(
            id=str(uuid.uuid4()),
            name="Custom Workspace",
            organization_name=organization_name.strip(),
            type=WorkspaceType.CUSTOM,
            access_key=access_key,
            teams=tuple(teams),
            ticket_values=tuple(_values_for_teams(teams, current_season(now))),
            created_at=now,
            updated_at=now,
        )
        return self.store.save_workspace(workspace)

    def update_workspace(self, workspace_id: str, changes: Mapping[str, Any]) -> Workspace | None:
        workspace = self.store.get_workspace(workspace_id)
        if workspace is None:
            return None
        fields: dict[str, Any] = {}
        for key in ("name", "organization_name"):
            if key in changes:
                fields[key] = str(changes[key]).strip()
        if "teams" in changes:
            fields["teams"] = tuple(
                t if isinstance(t, Team) else team_from_dict(t) for t in changes["teams"]
            )
        if "ticket_values" in changes:
            fields["ticket_values"] = tuple(
                tv if isinstance(tv, TicketValue) else ticket_value_from_dict(tv)
                for tv in changes["ticket_values"]
            )
        return self.store.save_workspace(replace(workspace, **fields, updated_at=self.clock()))

    def set_ticket_value(
        self,
        workspace_id: str,
        team_id: str,
        seat_type: str,
        value: Any,
        season: str | None = None,
        source: str | None = None,
    ) -> Workspace | None:
        """Insert or replace one seat's value for a season (current by default)."""
        workspace = self.store.get_workspace(workspace_id)
        if workspace is None:
            return None
        now = self.clock()
        season = season or current_season(now)
        amount = parse_money(value)
        values = list(workspace.ticket_values)
        for index, tv in enumerate(values):
            if tv.team_id == team_id and tv.seat_type == seat_type and tv.season == season:
                values[index] = replace(
                    tv, value=amount, source=tv.source if source is None else source
                )
                break
        else:
            values.append(TicketValue(team_id, seat_type, amount, season, source or ""))
        return self.store.save_workspace(
            replace(workspace, ticket_values=tuple(values), updated_at=now)
        )

    def create_season(self, workspace_id: str, season: str) -> Workspace | None:
        """Start ``season`` with a copy of the current season's values.

        Returns None when the workspace is unknown or the season already exists.
        """
        workspace = self.store.get_workspace(workspace_id)
        season = (season or "").strip()
        if workspace is None or not season:
            return None
        now = self.clock()
        if season in workspace.seasons() or season in recent_seasons(now):
            return None

        source_season = current_season(now)
        copied = [
            replace(tv, season=season)
            for team in workspace.enabled_teams()
            for tv in workspace.ticket_values_for(team.id, source_season)
        ]
        return self.store.save_workspace(
            replace(
                workspace,
                ticket_values=workspace.ticket_values + tuple(copied),
                updated_at=now,
            )
        )

    def refresh_default_catalog(self, workspace_id: str) -> Workspace | None:
        """Reset default teams' seats and the current season's values to the catalog.

        Other seasons and non-default teams are left alone.
        """
        workspace = self.store.get_workspace(workspace_id)
        if workspace is None:
            return None
        now = self.clock()
        season = current_season(now)
        teams = []
        for team in workspace.teams:
            default = default_team(team.id)
            teams.append(replace(team, seat_types=default.seat_types) if default else team)
        kept = tuple(tv for tv in workspace.ticket_values if tv.season != season)
        return self.store.save_workspace(
            replace(
                workspace,
                teams=tuple(teams),
                ticket_values=kept + tuple(default_ticket_values(season)),
                updated_at=now,
            )
        )


def _coerce_seat_type(value: Any) -> SeatType:
    if isinstance(value, SeatType):
        return value
    if isinstance(value, Mapping):
        return seat_type_from_dict(value)
    name = str(value).strip()
    return SeatType(id=name.lower().replace(" ", "-"), name=name)
