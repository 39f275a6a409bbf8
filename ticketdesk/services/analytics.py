"""Read-only reporting over loaded events, people and requests.

Every function takes plain collections so the caller decides which store the
data comes from. ``None`` entries and events without a ticket collection
contribute nothing.
"""
from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping

from ticketdesk.domain import (
    ZERO,
    AssignmentType,
    Event,
    Person,
    RequestPriority,
    RequestStatus,
    TicketRequest,
    TicketStatus,
)
from ticketdesk.services.calendar import mountain_today

BREAKDOWN_CATEGORIES = [t.value for t in AssignmentType] + ["unassigned"]


def _percentage(count: int, total: int) -> float:
    return count * 100 / total if total else 0.0


def _in_range(event: Event, start_date: date | None, end_date: date | None) -> bool:
    if start_date and event.date < start_date:
        return False
    if end_date and event.date > end_date:
        return False
    return True


def _existing_ids(events: Iterable[Event | None]) -> set[str]:
    return {e.id for e in events if e is not None}


def generate_revenue_report(
    events: Iterable[Event | None],
    start_date: date | None = None,
    end_date: date | None = None,
    team_ids: Iterable[str] | None = None,
    team_names: Mapping[str, str] | None = None,
) -> dict:
    """Revenue from sold, assigned tickets.

    Headline totals include pending sales; the monthly and team buckets only
    accumulate confirmed revenue.
    """
    team_ids = set(team_ids or ())
    team_names = team_names or {}
    total = confirmed = pending = ZERO
    sold_count = confirmed_count = 0
    by_month: dict[str, dict] = {}
    by_team: OrderedDict[str, dict] = OrderedDict()

    for event in events:
        if event is None or event.tickets is None:
            continue
        if not _in_range(event, start_date, end_date):
            continue
        if team_ids and event.team_id not in team_ids:
            continue

        month = event.date.strftime("%Y-%m") if event.date else "unknown"
        team_id = event.team_id or "unknown"
        for ticket in event.tickets:
            if ticket is None or not ticket.is_assigned:
                continue
            if ticket.assignment_type is not AssignmentType.SOLD:
                continue

            price = ticket.price or ZERO
            sold_count += 1
            total += price
            month_bucket = by_month.setdefault(month, {"month": month, "revenue": ZERO, "tickets": 0})
            team_bucket = by_team.setdefault(
                team_id,
                {
                    "team_id": team_id,
                    "team_name": team_names.get(team_id, team_id),
                    "revenue": ZERO,
                    "tickets": 0,
                },
            )
            if ticket.status is TicketStatus.CONFIRMED:
                confirmed_count += 1
                confirmed += price
                month_bucket["revenue"] += price
                month_bucket["tickets"] += 1
                team_bucket["revenue"] += price
                team_bucket["tickets"] += 1
            else:
                pending += price

    return {
        "total_revenue": total,
        "confirmed_revenue": confirmed,
        "pending_revenue": pending,
        "total_tickets_sold": sold_count,
        "total_tickets_confirmed": confirmed_count,
        "average_ticket_price": total / sold_count if sold_count else ZERO,
        "revenue_by_month": [by_month[key] for key in sorted(by_month)],
        "revenue_by_team": list(by_team.values()),
    }


def generate_assignment_breakdown(
    events: Iterable[Event | None],
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict:
    """Ticket counts per assignment category with percentages of all tickets."""
    counts = {category: 0 for category in BREAKDOWN_CATEGORIES}
    sold_revenue = ZERO
    total = 0

    for event in events:
        if event is None or event.tickets is None:
            continue
        if not _in_range(event, start_date, end_date):
            continue
        for ticket in event.tickets:
            if ticket is None:
                continue
            total += 1
            if not ticket.is_assigned:
                counts["unassigned"] += 1
            elif ticket.assignment_type is not None:
                counts[ticket.assignment_type.value] += 1
                if (
                    ticket.assignment_type is AssignmentType.SOLD
                    and ticket.status is TicketStatus.CONFIRMED
                ):
                    sold_revenue += ticket.price or ZERO

    breakdown = {
        category: {"count": count, "percentage": _percentage(count, total)}
        for category, count in counts.items()
    }
    breakdown[AssignmentType.SOLD.value]["revenue"] = sold_revenue
    breakdown["total_tickets"] = total
    return breakdown


def _confirmed_sales(history) -> Decimal:
    return sum(
        (h.price for h in history if h.assignment_type is AssignmentType.SOLD and h.confirmed),
        ZERO,
    )


def get_top_ticket_holders(
    people: Iterable[Person | None],
    events: Iterable[Event | None],
    limit: int = 10,
) -> list[dict]:
    """People ranked by the number of assignments at events that still exist."""
    event_ids = _existing_ids(events)
    holders = []
    for person in people:
        if person is None:
            continue
        history = [h for h in person.assignment_history if h.event_id in event_ids]
        if not history:
            continue
        holders.append({
            "person_id": person.id,
            "name": person.name,
            "company": person.company,
            "total_assignments": len(history),
            "confirmed_revenue": _confirmed_sales(history),
            "last_event_date": max(h.date for h in history),
        })
    holders.sort(key=lambda h: h["total_assignments"], reverse=True)
    return holders[:limit]


def get_company_analytics(
    people: Iterable[Person | None], events: Iterable[Event | None]
) -> list[dict]:
    event_ids = _existing_ids(events)
    companies: OrderedDict[str, dict] = OrderedDict()
    for person in people:
        if person is None:
            continue
        history = [h for h in person.assignment_history if h.event_id in event_ids]
        if not history:
            continue
        company = companies.setdefault(person.company, {
            "company": person.company,
            "total_assignments": 0,
            "confirmed_revenue": ZERO,
            "unique_attendees": 0,
        })
        company["unique_attendees"] += 1
        company["total_assignments"] += len(history)
        company["confirmed_revenue"] += _confirmed_sales(history)

    results = []
    for company in companies.values():
        company["average_spend_per_person"] = company["confirmed_revenue"] / company["unique_attendees"]
        results.append(company)
    results.sort(key=lambda c: c["confirmed_revenue"], reverse=True)
    return results


def get_event_statistics(events: Iterable[Event | None], now: datetime | None = None) -> dict:
    """Event counts; upcoming and past are judged by date against Mountain Time today."""
    today = mountain_today(now)
    events = [e for e in events if e is not None]
    total_tickets = assigned = sold_out = 0
    for event in events:
        if event.tickets is None:
            continue
        event_assigned = sum(1 for t in event.tickets if t is not None and t.is_assigned)
        total_tickets += len(event.tickets)
        assigned += event_assigned
        if event_assigned == len(event.tickets):
            sold_out += 1

    return {
        "total_events": len(events),
        "upcoming_events": sum(1 for e in events if e.date >= today),
        "past_events": sum(1 for e in events if e.date < today),
        "playoff_events": sum(1 for e in events if e.is_playoff),
        "total_tickets": total_tickets,
        "assigned_tickets": assigned,
        "available_tickets": total_tickets - assigned,
        "sold_out_events": sold_out,
    }


def get_request_statistics(
    requests: Iterable[TicketRequest | None], events: Iterable[Event | None]
) -> dict:
    """Request counts for events that still exist.

    The approval rate only considers decided requests and is 0 until one is
    approved or denied.
    """
    event_ids = _existing_ids(events)
    valid = [r for r in requests if r is not None and r.event_id in event_ids]

    def count(status: RequestStatus) -> int:
        return sum(1 for r in valid if r.status is status)

    approved = count(RequestStatus.APPROVED)
    denied = count(RequestStatus.DENIED)
    return {
        "total_requests": len(valid),
        "pending_requests": count(RequestStatus.PENDING),
        "approved_requests": approved,
        "denied_requests": denied,
        "completed_requests": count(RequestStatus.COMPLETED),
        "approval_rate": _percentage(approved, approved + denied),
        "requests_by_priority": {
            priority.value: sum(1 for r in valid if r.priority is priority)
            for priority in RequestPriority
        },
    }
