"""Store interfaces (repository pattern).

Stores are swappable and exchange domain models only. Saves overwrite the
whole record (last write wins); failures of the backing persistence surface as
``StoreError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ticketdesk.domain import Event, Person, TicketRequest, Workspace


class EventStore(ABC):
    """Events of one workspace, each saved together with its tickets."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events in storage order."""
        ...

    @abstractmethod
    def get_event(self, event_id: str) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Insert or replace an event and its ticket collection."""
        ...

    @abstractmethod
    def delete_event(self, event_id: str) -> bool:
        """Remove an event; False if it did not exist."""
        ...


class PersonStore(ABC):
    """People of one workspace, each saved with its assignment history."""

    @abstractmethod
    def list_people(self) -> list[Person]:
        ...

    @abstractmethod
    def get_person(self, person_id: str) -> Person | None:
        ...

    @abstractmethod
    def save_person(self, person: Person) -> Person:
        ...

    @abstractmethod
    def delete_person(self, person_id: str) -> bool:
        ...


class RequestStore(ABC):
    """Ticket requests of one workspace."""

    @abstractmethod
    def list_requests(self) -> list[TicketRequest]:
        ...

    @abstractmethod
    def get_request(self, request_id: str) -> TicketRequest | None:
        ...

    @abstractmethod
    def save_request(self, ticket_request: TicketRequest) -> TicketRequest:
        ...

    @abstractmethod
    def delete_request(self, request_id: str) -> bool:
        ...


class WorkspaceStore(ABC):
    """Workspaces across all tenants."""

    @abstractmethod
    def list_workspaces(self) -> list[Workspace]:
        ...

    @abstractmethod
    def get_workspace(self, workspace_id: str) -> Workspace | None:
        ...

    @abstractmethod
    def get_workspace_by_key(self, access_key: str) -> Workspace | None:
        """Return the workspace whose access key matches exactly."""
        ...

    @abstractmethod
    def save_workspace(self, workspace: Workspace) -> Workspace:
        ...

    @abstractmethod
    def delete_workspace(self, workspace_id: str) -> bool:
        ...
