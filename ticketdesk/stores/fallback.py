"""Primary store with a local copy that takes over when the primary fails."""

from __future__ import annotations

from typing import Any, Callable

from flask import current_app

from ticketdesk.domain import Event, Person, StoreError, TicketRequest, Workspace
from ticketdesk.stores.interfaces import EventStore, PersonStore, RequestStore, WorkspaceStore

FallbackHook = Callable[[Any, str, Exception], None]


class FallbackStore:
    """Writes go to the primary and then always to the local copy.

    When the primary raises, the failure is logged and handed to ``on_fallback``
    as ``(store, operation, error)``; the local copy then serves the call.
    Reads fall back the same way.
    """

    def __init__(self, primary, local, on_fallback: FallbackHook | None = None) -> None:
        self.primary = primary
        self.local = local
        self.on_fallback = on_fallback

    def _report(self, operation: str, error: Exception) -> None:
        current_app.logger.warning(
            f"{type(self.primary).__name__}.{operation} failed, using local copy: {error}"
        )
        if self.on_fallback is not None:
            self.on_fallback(self, operation, error)

    def _read(self, operation: str, *args):
        try:
            return getattr(self.primary, operation)(*args)
        except StoreError as e:
            self._report(operation, e)
        return getattr(self.local, operation)(*args)

    def _write(self, operation: str, *args):
        try:
            result = getattr(self.primary, operation)(*args)
        except StoreError as e:
            self._report(operation, e)
            return getattr(self.local, operation)(*args)
        getattr(self.local, operation)(*args)
        return result


class FallbackEventStore(FallbackStore, EventStore):
    def list_events(self) -> list[Event]:
        return self._read("list_events")

    def get_event(self, event_id: str) -> Event | None:
        return self._read("get_event", event_id)

    def save_event(self, event: Event) -> Event:
        return self._write("save_event", event)

    def delete_event(self, event_id: str) -> bool:
        return self._write("delete_event", event_id)


class FallbackPersonStore(FallbackStore, PersonStore):
    def list_people(self) -> list[Person]:
        return self._read("list_people")

    def get_person(self, person_id: str) -> Person | None:
        return self._read("get_person", person_id)

    def save_person(self, person: Person) -> Person:
        return self._write("save_person", person)

    def delete_person(self, person_id: str) -> bool:
        return self._write("delete_person", person_id)


class FallbackRequestStore(FallbackStore, RequestStore):
    def list_requests(self) -> list[TicketRequest]:
        return self._read("list_requests")

    def get_request(self, request_id: str) -> TicketRequest | None:
        return self._read("get_request", request_id)

    def save_request(self, ticket_request: TicketRequest) -> TicketRequest:
        return self._write("save_request", ticket_request)

    def delete_request(self, request_id: str) -> bool:
        return self._write("delete_request", request_id)


class FallbackWorkspaceStore(FallbackStore, WorkspaceStore):
    def list_workspaces(self) -> list[Workspace]:
        return self._read("list_workspaces")

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        return self._read("get_workspace", workspace_id)

    def get_workspace_by_key(self, access_key: str) -> Workspace | None:
        return self._read("get_workspace_by_key", access_key)

    def save_workspace(self, workspace: Workspace) -> Workspace:
        return self._write("save_workspace", workspace)

    def delete_workspace(self, workspace_id: str) -> bool:
        return self._write("delete_workspace", workspace_id)
