"""
Store tests: SQL round trips, JSON file recovery and the fallback wrapper.
"""

import json
from dataclasses import replace
from decimal import Decimal

import pytest

from ticketdesk.domain import RequestStatus, StoreError
from ticketdesk.domain.serialization import event_to_dict
from ticketdesk.services.events import EventInventory
from ticketdesk.services.people import PersonDirectory
from ticketdesk.services.requests import RequestQueue
from ticketdesk.services.workspace import WorkspaceService
from ticketdesk.stores import (
    FallbackEventStore,
    JsonEventStore,
    JsonPersonStore,
    MemoryEventStore,
    SqlEventStore,
    SqlPersonStore,
    SqlRequestStore,
    SqlWorkspaceStore,
    build_stores,
)


class FailingEventStore(MemoryEventStore):
    """Primary store whose database is unreachable."""

    def list_events(self):
        raise StoreError("database offline")

    def get_event(self, event_id):
        raise StoreError("database offline")

    def save_event(self, event):
        raise StoreError("database offline")

    def delete_event(self, event_id):
        raise StoreError("database offline")


@pytest.fixture
def sql_workspace(app, clock):
    return WorkspaceService(SqlWorkspaceStore(), clock).create_ftm_workspace("sql-key")


class TestSqlStores:
    """Database-backed stores scoped to one workspace."""

    def test_workspace_round_trip(self, app, sql_workspace):
        store = SqlWorkspaceStore()
        loaded = store.get_workspace_by_key("sql-key")
        assert loaded.id == sql_workspace.id
        assert loaded.teams == sql_workspace.teams
        assert loaded.ticket_values == sql_workspace.ticket_values
        assert loaded.created_at == sql_workspace.created_at
        assert store.get_workspace_by_key("other") is None

    def test_event_and_tickets_round_trip(self, app, sql_workspace, clock):
        inventory = EventInventory(SqlEventStore(sql_workspace.id), sql_workspace, clock)
        event = inventory.create_event(
            {"team_id": "nuggets", "opponent": "Lakers", "date": "2025-11-20", "time": "19:30"}
        )
        ticket = event.tickets[3]
        inventory.update_ticket_assignment(
            event.id, ticket.id,
            {"assigned_to": "Jane Doe", "assignment_type": "sold", "status": "confirmed"},
        )
        inventory.add_custom_ticket(event.id, "310", "4", "12", "95.50")

        loaded = inventory.get_event(event.id)
        assert loaded.time == event.time
        assert [t.id for t in loaded.tickets[:6]] == [t.id for t in event.tickets]
        sold = loaded.get_ticket(ticket.id)
        assert sold.price == Decimal(260)
        assert sold.status.value == "confirmed"
        assert loaded.tickets[-1].value == Decimal("95.50")
        assert inventory.get_event_stats(loaded).confirmed_revenue == Decimal(260)

        assert inventory.delete_ticket(event.id, ticket.id) is True
        assert len(inventory.get_event(event.id).tickets) == 6

    def test_events_are_scoped_to_workspace(self, app, sql_workspace, clock):
        inventory = EventInventory(SqlEventStore(sql_workspace.id), sql_workspace, clock)
        event = inventory.create_event(
            {"team_id": "broncos", "opponent": "Chiefs", "date": "2025-11-20", "time": "14:25"}
        )
        other = SqlEventStore("another-workspace")
        assert other.get_event(event.id) is None
        assert other.list_events() == []
        assert other.delete_event(event.id) is False

    def test_person_history_round_trip(self, app, sql_workspace, clock):
        directory = PersonDirectory(SqlPersonStore(sql_workspace.id), clock=clock)
        keep = directory.add_or_update_person("Jane Doe", "Acme", email="jane@acme.test")
        merge = directory.add_or_update_person("J. Doe", "Acme")
        entry = {"event_id": "e1", "event_name": "Nuggets vs Lakers", "date": "2025-11-20",
                 "seat_type": "Suite", "assignment_type": "sold", "price": "350", "confirmed": True}
        directory.add_assignment_history("Jane Doe", "Acme", entry)
        directory.add_assignment_history("J. Doe", "Acme", dict(entry, event_id="e2"))

        assert directory.merge_people(keep.id, merge.id) is True
        loaded = directory.get_person(keep.id)
        assert [h.event_id for h in loaded.assignment_history] == ["e1", "e2"]
        assert loaded.assignment_history[0].price == Decimal(350)
        assert loaded.email == "jane@acme.test"
        assert directory.get_person(merge.id) is None

    def test_request_round_trip(self, app, sql_workspace, clock):
        queue = RequestQueue(SqlRequestStore(sql_workspace.id), clock)
        created = queue.create_request({
            "event_id": "e1", "user_id": "u1", "user_name": "Jane Doe",
            "priority": "need", "requested_quantities": [2],
        })
        queue.update_request_status(created.id, "approved", "admin")
        loaded = queue.get_request(created.id)
        assert loaded.status is RequestStatus.APPROVED
        assert loaded.requested_quantities == (2,)
        assert loaded.requested_at == created.requested_at
        assert loaded.processed_by == "admin"


class TestJsonStores:
    """JSON files on disk."""

    def test_round_trip(self, app, tmp_path, ftm_workspace, clock):
        inventory = EventInventory(JsonEventStore(tmp_path), ftm_workspace, clock)
        event = inventory.create_event(
            {"team_id": "avalanche", "opponent": "Wild", "date": "2025-12-02", "time": "19:00"}
        )
        assert JsonEventStore(tmp_path).get_event(event.id) == event
        assert (tmp_path / "events.json").exists()

    def test_event_time_keeps_seconds(self, app, tmp_path, ftm_workspace, clock):
        inventory = EventInventory(JsonEventStore(tmp_path), ftm_workspace, clock)
        event = inventory.create_event(
            {"team_id": "nuggets", "opponent": "Lakers", "date": "2025-11-20", "time": "19:30:15"}
        )
        loaded = JsonEventStore(tmp_path).get_event(event.id)
        assert loaded.time == event.time
        assert loaded.time.second == 15

    def test_missing_file_is_empty(self, app, tmp_path):
        assert JsonPersonStore(tmp_path / "nowhere").list_people() == []

    def test_malformed_records_are_dropped(self, app, tmp_path, nuggets_event):
        good = event_to_dict(nuggets_event)
        no_tickets = dict(good, id="no-tickets")
        del no_tickets["tickets"]
        bad_tickets = dict(good, id="bad-tickets", tickets="oops")
        bad_date = dict(good, id="bad-date", date="not-a-date")
        (tmp_path / "events.json").write_text(
            json.dumps([no_tickets, good, bad_tickets, bad_date]), encoding="utf-8"
        )
        assert [e.id for e in JsonEventStore(tmp_path).list_events()] == [nuggets_event.id]

    def test_unreadable_file_is_empty(self, app, tmp_path):
        (tmp_path / "events.json").write_text("{not json", encoding="utf-8")
        assert JsonEventStore(tmp_path).list_events() == []
        (tmp_path / "events.json").write_text('{"id": "x"}', encoding="utf-8")
        assert JsonEventStore(tmp_path).list_events() == []


class TestFallbackStore:
    """The local copy takes over when the primary fails."""

    def test_failures_are_reported_and_served_locally(self, app, tmp_path, nuggets_event):
        calls = []
        store = FallbackEventStore(
            FailingEventStore(),
            JsonEventStore(tmp_path),
            lambda s, operation, error: calls.append(operation),
        )
        store.save_event(nuggets_event)
        assert store.get_event(nuggets_event.id) == nuggets_event
        assert [e.id for e in store.list_events()] == [nuggets_event.id]
        assert store.delete_event(nuggets_event.id) is True
        assert calls == ["save_event", "get_event", "list_events", "delete_event"]

    def test_writes_reach_both_copies(self, app, tmp_path, nuggets_event):
        primary = MemoryEventStore()
        local = JsonEventStore(tmp_path)
        store = FallbackEventStore(primary, local)
        store.save_event(nuggets_event)
        renamed = replace(nuggets_event, opponent="Celtics")
        store.save_event(renamed)
        assert primary.get_event(nuggets_event.id).opponent == "Celtics"
        assert local.get_event(nuggets_event.id).opponent == "Celtics"


class TestBuildStores:
    """Backend selection from config."""

    def test_backends(self, app, tmp_path):
        config = {"PERSISTENCE_BACKEND": "json", "LOCAL_STORE_PATH": str(tmp_path)}
        assert isinstance(build_stores(config, "w1").events, JsonEventStore)
        config["PERSISTENCE_BACKEND"] = "sql"
        assert isinstance(build_stores(config, "w1").events, SqlEventStore)
        config["PERSISTENCE_BACKEND"] = "sql+json"
        events = build_stores(config, "w1").events
        assert isinstance(events, FallbackEventStore)
        assert events.local.path == tmp_path / "w1" / "events.json"

    def test_unknown_backend(self, app):
        with pytest.raises(ValueError):
            build_stores({"PERSISTENCE_BACKEND": "redis"}, "w1")
