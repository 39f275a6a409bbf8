"""Ticket assignment followed by the person-history side effect."""
from __future__ import annotations

from typing import Any, Mapping

from flask import current_app

from ticketdesk.domain import DomainError, Event, Ticket
from ticketdesk.domain.serialization import parse_bool
from ticketdesk.services.events import EventInventory
from ticketdesk.services.people import PersonDirectory


def event_display_name(inventory: EventInventory, event: Event) -> str:
    team_name = inventory.workspace.team_name(event.team_id) if inventory.workspace else event.team_id
    return f"{team_name} vs {event.opponent}"


def assign_ticket(
    inventory: EventInventory,
    directory: PersonDirectory,
    event_id: str,
    ticket_id: str,
    changes: Mapping[str, Any],
) -> Ticket | None:
    """Update a ticket; when the change confirms it, record the holder's history.

    The two writes are independent. If the history step fails the ticket keeps
    its new assignment and the failure is logged.
    """
    ticket = inventory.update_ticket_assignment(event_id, ticket_id, changes)
    if ticket is None:
        return None
    if not (parse_bool(changes.get("confirmed", False)) and ticket.confirmed and ticket.is_assigned):
        return ticket

    event = inventory.get_event(event_id)
    try:
        directory.add_or_update_person(ticket.assigned_to, ticket.assigned_company or "")
        directory.add_assignment_history(
            ticket.assigned_to,
            ticket.assigned_company or "",
            {
                "event_id": event_id,
                "event_name": event_display_name(inventory, event) if event else "",
                "date": event.date.isoformat() if event else "",
                "seat_type": ticket.seat_type,
                "assignment_type": ticket.assignment_type,
                "price": ticket.price,
                "confirmed": True,
            },
        )
    except DomainError as e:
        current_app.logger.error(
            f"Ticket {ticket_id} confirmed but history for {ticket.assigned_to!r} was not recorded: {e}"
        )
    return ticket
