"""
Event and ticket inventory tests: seeding, assignment pricing, statistics
and the filtered event view.
"""

from datetime import date, time
from decimal import Decimal

import pytest

from ticketdesk.domain import AssignmentType, Event, EventStats, TicketStatus
from ticketdesk.services.assignments import assign_ticket
from ticketdesk.services.events import EventInventory, apply_assignment, get_event_stats
from ticketdesk.stores import MemoryEventStore

from conftest import FIXED_NOW


def _event(inventory, team_id="nuggets", opponent="Lakers", day="2025-11-20", at="19:00"):
    return inventory.create_event(
        {"team_id": team_id, "opponent": opponent, "date": day, "time": at}
    )


class TestCreateEvent:
    """Events seed one ticket per configured seat value."""

    def test_seeds_current_season_values(self, nuggets_event):
        tickets = nuggets_event.tickets
        assert len(tickets) == 6
        assert [t.value for t in tickets] == [
            Decimal(350), Decimal(350), Decimal(260), Decimal(260), Decimal(0), Decimal(0)
        ]
        assert tickets[0].seat_type == "Suite 1, Row 2, Seat 3"
        assert tickets[4].seat_type == "Section 124, Row 1, Seat 15"

    def test_seeded_tickets_start_unassigned(self, nuggets_event):
        for position, ticket in enumerate(nuggets_event.tickets, start=1):
            assert ticket.event_id == nuggets_event.id
            assert ticket.assigned_to is None
            assert ticket.assignment_type is None
            assert ticket.price == 0
            assert ticket.confirmed is False
            assert ticket.section == ticket.seat_type
            assert ticket.row == "1"
            assert ticket.seat == str(position)

    def test_event_fields_are_parsed(self, nuggets_event):
        assert nuggets_event.date == date(2025, 11, 20)
        assert nuggets_event.time == time(19, 0)
        assert nuggets_event.is_playoff is False
        assert nuggets_event.created_at == FIXED_NOW

    def test_missing_required_field_creates_nothing(self, inventory):
        assert inventory.create_event({"team_id": "nuggets", "opponent": "Lakers"}) is None
        assert inventory.list_events() == []

    def test_fallback_seat_types_without_workspace(self, clock):
        inventory = EventInventory(MemoryEventStore(), clock=clock)
        event = inventory.create_event(
            {"team_id": "opera", "opponent": "Carmen", "date": "2025-12-01", "time": "20:00"},
            fallback_seat_types=[
                {"name": "Box A", "value": "120.50"},
                {"name": "Box B"},
            ],
        )
        assert [t.seat_type for t in event.tickets] == ["Box A", "Box B"]
        assert [t.value for t in event.tickets] == [Decimal("120.50"), Decimal(0)]

    def test_fallback_seat_types_as_names(self, clock):
        inventory = EventInventory(MemoryEventStore(), clock=clock)
        event = inventory.create_event(
            {"team_id": "opera", "opponent": "Carmen", "date": "2025-12-01", "time": "20:00"},
            fallback_seat_types=["Box A", "Box B"],
        )
        assert [t.seat_type for t in event.tickets] == ["Box A", "Box B"]
        assert all(t.value == Decimal(0) for t in event.tickets)

    @pytest.mark.parametrize("seat_types", [[{"value": "10"}], [42], ["  "], "Box A"])
    def test_malformed_fallback_seat_types_rejected(self, clock, seat_types):
        inventory = EventInventory(MemoryEventStore(), clock=clock)
        with pytest.raises(ValueError):
            inventory.create_event(
                {"team_id": "opera", "opponent": "Carmen", "date": "2025-12-01", "time": "20:00"},
                fallback_seat_types=seat_types,
            )
        assert inventory.list_events() == []

    def test_team_without_values_and_no_fallback_has_no_tickets(self, inventory):
        event = _event(inventory, team_id="opera")
        assert event.tickets == ()


class TestEventMaintenance:
    """Updating and deleting events."""

    def test_update_changes_only_known_fields(self, inventory, nuggets_event):
        updated = inventory.update_event(
            nuggets_event.id,
            {"opponent": "Celtics", "is_playoff": "true", "tickets": [], "id": "other"},
        )
        assert updated.id == nuggets_event.id
        assert updated.opponent == "Celtics"
        assert updated.is_playoff is True
        assert len(updated.tickets) == 6

    def test_update_unknown_event_returns_none(self, inventory):
        assert inventory.update_event("missing", {"opponent": "Celtics"}) is None

    def test_delete_unknown_event_leaves_list_unchanged(self, inventory, nuggets_event):
        assert inventory.delete_event("missing") is False
        assert [e.id for e in inventory.list_events()] == [nuggets_event.id]

    def test_delete_event(self, inventory, nuggets_event):
        assert inventory.delete_event(nuggets_event.id) is True
        assert inventory.get_event(nuggets_event.id) is None


class TestTicketAssignment:
    """Assignment changes and the derived ticket price."""

    def test_sold_ticket_takes_its_value(self, inventory, nuggets_event):
        ticket = nuggets_event.tickets[0]
        updated = inventory.update_ticket_assignment(
            nuggets_event.id,
            ticket.id,
            {"assigned_to": "Jane Doe", "assigned_company": "Acme", "assignment_type": "sold"},
        )
        assert updated.price == Decimal(350)
        assert updated.confirmed is False
        assert updated.status is TicketStatus.TENTATIVE
        assert inventory.get_event(nuggets_event.id).get_ticket(ticket.id) == updated

    def test_explicit_sale_price_wins(self, inventory, nuggets_event):
        ticket = nuggets_event.tickets[2]
        updated = inventory.update_ticket_assignment(
            nuggets_event.id,
            ticket.id,
            {"assigned_to": "Jane Doe", "assignment_type": "sold", "price": "199.99"},
        )
        assert updated.price == Decimal("199.99")

    @pytest.mark.parametrize("kind", ["team", "donated", "gifted", "traded"])
    def test_non_sold_assignment_is_free_and_unconfirmed(self, inventory, nuggets_event, kind):
        ticket = nuggets_event.tickets[0]
        inventory.update_ticket_assignment(
            nuggets_event.id,
            ticket.id,
            {"assigned_to": "Jane Doe", "assignment_type": "sold", "confirmed": True},
        )
        updated = inventory.update_ticket_assignment(
            nuggets_event.id, ticket.id, {"assignment_type": kind, "price": "80"}
        )
        assert updated.assignment_type is AssignmentType(kind)
        assert updated.price == 0
        assert updated.confirmed is False

    def test_sold_ticket_keeps_price_on_unrelated_change(self, inventory, nuggets_event):
        ticket = nuggets_event.tickets[0]
        inventory.update_ticket_assignment(
            nuggets_event.id,
            ticket.id,
            {"assigned_to": "Jane Doe", "assignment_type": "sold", "price": "400"},
        )
        updated = inventory.update_ticket_assignment(
            nuggets_event.id, ticket.id, {"parking": True}
        )
        assert updated.price == Decimal(400)
        assert updated.parking is True

    def test_clearing_holder_clears_assignment(self, inventory, nuggets_event):
        ticket = nuggets_event.tickets[0]
        inventory.update_ticket_assignment(
            nuggets_event.id,
            ticket.id,
            {"assigned_to": "Jane Doe", "assigned_company": "Acme", "assignment_type": "sold"},
        )
        updated = inventory.update_ticket_assignment(
            nuggets_event.id, ticket.id, {"assigned_to": ""}
        )
        assert updated.assigned_to is None
        assert updated.assigned_company is None
        assert updated.assignment_type is None
        assert updated.status is None
        assert updated.price == 0
        assert updated.confirmed is False

    def test_unknown_event_or_ticket(self, inventory, nuggets_event):
        assert inventory.update_ticket_assignment("missing", "x", {"assigned_to": "A"}) is None
        assert inventory.update_ticket_assignment(nuggets_event.id, "x", {"assigned_to": "A"}) is None

    def test_apply_assignment_rejects_unknown_type(self, nuggets_event):
        with pytest.raises(ValueError):
            apply_assignment(nuggets_event.tickets[0], {"assignment_type": "stolen"}, FIXED_NOW)

    def test_bulk_update_reports_missing_tickets(self, inventory, nuggets_event):
        ids = [t.id for t in nuggets_event.tickets[:2]] + ["missing"]
        count, errors = inventory.bulk_update_assignments(
            nuggets_event.id, ids, {"assigned_to": "Team Staff", "assignment_type": "team"}
        )
        assert count == 2
        assert errors == ["Ticket missing not found"]
        event = inventory.get_event(nuggets_event.id)
        assert [t.assigned_to for t in event.tickets[:3]] == ["Team Staff", "Team Staff", None]

    def test_bulk_update_unknown_event(self, inventory):
        assert inventory.bulk_update_assignments("missing", ["a"], {}) == (
            0,
            ["Event missing not found"],
        )


class TestCustomTickets:
    """Ad-hoc tickets added to and removed from an event."""

    def test_add_custom_ticket(self, inventory, nuggets_event):
        ticket = inventory.add_custom_ticket(nuggets_event.id, "310", "4", "12", "95")
        assert ticket.seat_type == "310-4-12"
        assert ticket.custom_name == "Section 310, Row 4, Seat 12"
        assert ticket.display_name == "Section 310, Row 4, Seat 12"
        assert ticket.value == Decimal(95)
        assert len(inventory.get_event(nuggets_event.id).tickets) == 7

    def test_add_custom_ticket_unknown_event(self, inventory):
        assert inventory.add_custom_ticket("missing", "1", "1", "1", 0) is None

    def test_delete_ticket(self, inventory, nuggets_event):
        ticket_id = nuggets_event.tickets[1].id
        assert inventory.delete_ticket(nuggets_event.id, ticket_id) is True
        assert inventory.get_event(nuggets_event.id).get_ticket(ticket_id) is None
        assert inventory.delete_ticket(nuggets_event.id, ticket_id) is False


class TestEventStats:
    """Per-event counts and confirmed revenue."""

    def test_missing_event_or_tickets(self, nuggets_event):
        assert get_event_stats(None) == EventStats()
        no_tickets = Event(
            id="e", team_id="nuggets", opponent="Jazz", date=date(2025, 1, 1),
            time=time(19), created_at=FIXED_NOW, updated_at=FIXED_NOW, tickets=None,
        )
        stats = get_event_stats(no_tickets)
        assert stats.total_tickets == 0
        assert stats.is_sold_out is False

    def test_counts_and_revenue(self, inventory, nuggets_event):
        first, second, third = nuggets_event.tickets[:3]
        inventory.update_ticket_assignment(
            nuggets_event.id, first.id,
            {"assigned_to": "A", "assignment_type": "sold", "status": "confirmed"},
        )
        inventory.update_ticket_assignment(
            nuggets_event.id, second.id, {"assigned_to": "B", "assignment_type": "sold"}
        )
        inventory.update_ticket_assignment(
            nuggets_event.id, third.id, {"assigned_to": "C", "assignment_type": "team"}
        )
        stats = inventory.get_event_stats(inventory.get_event(nuggets_event.id))
        assert stats.total_tickets == 6
        assert stats.assigned_tickets == 3
        assert stats.available_tickets == 3
        assert stats.sold_tickets == 2
        assert stats.confirmed_revenue == Decimal(350)
        assert stats.is_sold_out is False
        assert stats.assigned_tickets + stats.available_tickets == stats.total_tickets

    def test_sold_out(self, inventory, nuggets_event):
        ids = [t.id for t in nuggets_event.tickets]
        inventory.bulk_update_assignments(
            nuggets_event.id, ids, {"assigned_to": "Staff", "assignment_type": "team"}
        )
        stats = get_event_stats(inventory.get_event(nuggets_event.id))
        assert stats.available_tickets == 0
        assert stats.is_sold_out is True


class TestFilteredEvents:
    """Search, team and past-event filters over the store."""

    def test_past_events_hidden_by_default(self, inventory):
        earlier = _event(inventory, opponent="Jazz", day="2025-10-15", at="11:00")
        later = _event(inventory, opponent="Suns", day="2025-10-15", at="13:00")
        upcoming = {e.id for e in inventory.get_filtered_events(now=FIXED_NOW)}
        assert upcoming == {later.id}
        everything = inventory.get_filtered_events(show_past_events=True, now=FIXED_NOW)
        assert {e.id for e in everything} == {earlier.id, later.id}

    def test_search_matches_opponent_and_holders(self, inventory, nuggets_event):
        other = _event(inventory, opponent="Jazz")
        inventory.update_ticket_assignment(
            other.id, other.tickets[0].id, {"assigned_to": "Jane", "assigned_company": "Acme"}
        )
        assert [e.id for e in inventory.get_filtered_events("lak", now=FIXED_NOW)] == [
            nuggets_event.id
        ]
        assert [e.id for e in inventory.get_filtered_events("ACME", now=FIXED_NOW)] == [other.id]

    def test_team_filter(self, inventory, nuggets_event):
        broncos = _event(inventory, team_id="broncos", opponent="Chiefs")
        view = inventory.get_filtered_events(team_id="broncos", now=FIXED_NOW)
        assert [e.id for e in view] == [broncos.id]
        assert len(broncos.tickets) == 8

    def test_view_is_restartable_and_live(self, inventory, nuggets_event):
        view = inventory.get_filtered_events(now=FIXED_NOW)
        assert len(list(view)) == 1
        assert len(list(view)) == 1
        _event(inventory, opponent="Kings")
        assert len(list(view)) == 2

    def test_sorted_by_date_and_time(self, inventory):
        late = _event(inventory, opponent="Kings", day="2025-12-01", at="20:00")
        early = _event(inventory, opponent="Jazz", day="2025-12-01", at="18:00")
        first = _event(inventory, opponent="Suns", day="2025-11-01", at="21:00")
        ordered = inventory.get_filtered_events(now=FIXED_NOW).sorted()
        assert [e.id for e in ordered] == [first.id, early.id, late.id]


class TestAssignAndConfirm:
    """Confirming a ticket records the holder's assignment history."""

    def test_confirmed_sale_records_history(self, app, inventory, directory, nuggets_event):
        ticket = nuggets_event.tickets[0]
        sold = assign_ticket(
            inventory, directory, nuggets_event.id, ticket.id,
            {"assigned_to": "Jane Doe", "assigned_company": "Acme", "assignment_type": "sold"},
        )
        assert sold.price == Decimal(350)
        assert sold.confirmed is False
        assert directory.get_person_by_name_and_company("Jane Doe", "Acme") is None

        confirmed = assign_ticket(
            inventory, directory, nuggets_event.id, ticket.id, {"confirmed": True}
        )
        assert confirmed.confirmed is True
        person = directory.get_person_by_name_and_company("jane doe", "ACME")
        assert person is not None
        assert len(person.assignment_history) == 1
        entry = person.assignment_history[0]
        assert entry.event_id == nuggets_event.id
        assert entry.event_name == "Denver Nuggets vs Lakers"
        assert entry.date == "2025-11-20"
        assert entry.price == Decimal(350)
        assert entry.confirmed is True
        assert entry.assignment_type is AssignmentType.SOLD

    def test_unassigned_ticket_records_nothing(self, app, inventory, directory, nuggets_event):
        ticket = nuggets_event.tickets[0]
        result = assign_ticket(
            inventory, directory, nuggets_event.id, ticket.id, {"confirmed": True}
        )
        assert result.confirmed is False
        assert directory.list_people() == []

    def test_unknown_ticket(self, app, inventory, directory, nuggets_event):
        assert assign_ticket(inventory, directory, nuggets_event.id, "missing", {}) is None
