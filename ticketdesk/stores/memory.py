"""Dict-backed stores; insertion order is storage order."""

from __future__ import annotations

from ticketdesk.domain import Event, Person, TicketRequest, Workspace
from ticketdesk.stores.interfaces import EventStore, PersonStore, RequestStore, WorkspaceStore


class _MemoryCollection:
    def __init__(self) -> None:
        self._items: dict = {}

    def _list(self) -> list:
        return list(self._items.values())

    def _get(self, item_id: str):
        return self._items.get(item_id)

    def _save(self, item):
        self._items[item.id] = item
        return item

    def _delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None


class MemoryEventStore(_MemoryCollection, EventStore):
    def list_events(self) -> list[Event]:
        return self._list()

    def get_event(self, event_id: str) -> Event | None:
        return self._get(event_id)

    def save_event(self, event: Event) -> Event:
        return self._save(event)

    def delete_event(self, event_id: str) -> bool:
        return self._delete(event_id)


class MemoryPersonStore(_MemoryCollection, PersonStore):
    def list_people(self) -> list[Person]:
        return self._list()

    def get_person(self, person_id: str) -> Person | None:
        return self._get(person_id)

    def save_person(self, person: Person) -> Person:
        return self._save(person)

    def delete_person(self, person_id: str) -> bool:
        return self._delete(person_id)


class MemoryRequestStore(_MemoryCollection, RequestStore):
    def list_requests(self) -> list[TicketRequest]:
        return self._list()

    def get_request(self, request_id: str) -> TicketRequest | None:
        return self._get(request_id)

    def save_request(self, ticket_request: TicketRequest) -> TicketRequest:
        return self._save(ticket_request)

    def delete_request(self, request_id: str) -> bool:
        return self._delete(request_id)


class MemoryWorkspaceStore(_MemoryCollection, WorkspaceStore):
    def list_workspaces(self) -> list[Workspace]:
        return self._list()

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        return self._get(workspace_id)

    def get_workspace_by_key(self, access_key: str) -> Workspace | None:
        return next((w for w in self._items.values() if w.access_key == access_key), None)

    def save_workspace(self, workspace: Workspace) -> Workspace:
        return self._save(workspace)

    def delete_workspace(self, workspace_id: str) -> bool:
        return self._delete(workspace_id)
