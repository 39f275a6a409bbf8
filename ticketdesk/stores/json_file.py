"""JSON file stores.

Each collection is one JSON array on disk, rewritten in full on every save.
Records that no longer parse are dropped at read time with a warning so one
bad entry cannot hide the rest of the collection.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

from flask import current_app

from ticketdesk.domain import Event, Person, StoreError, TicketRequest, Workspace
from ticketdesk.domain import serialization as codec
from ticketdesk.stores.interfaces import EventStore, PersonStore, RequestStore, WorkspaceStore


class _JsonCollection:
    """A list of records persisted as ``<path>``."""

    def __init__(
        self,
        path: str | os.PathLike,
        to_dict: Callable[[Any], dict],
        from_dict: Callable[[dict], Any],
    ) -> None:
        self.path = Path(path)
        self._to_dict = to_dict
        self._from_dict = from_dict

    def _read_raw(self) -> list:
        if not self.path.exists():
            return []
        try:
            with self.path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            current_app.logger.warning(f"Ignoring unreadable store file {self.path}: {exc}")
            return []
        except OSError as exc:
            raise StoreError(f"Could not read {self.path.name}") from exc
        if not isinstance(data, list):
            current_app.logger.warning(f"Ignoring store file {self.path}: expected a list")
            return []
        return data

    def _load(self) -> list:
        items = []
        for position, raw in enumerate(self._read_raw()):
            try:
                items.append(self._from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                current_app.logger.warning(
                    f"Dropping malformed record {position} in {self.path.name}: {exc!r}"
                )
        return items

    def _write(self, items: list) -> None:
        payload = [self._to_dict(item) for item in items]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreError(f"Could not write {self.path.name}") from exc

    def _list(self) -> list:
        return self._load()

    def _get(self, item_id: str):
        return next((item for item in self._load() if item.id == item_id), None)

    def _save(self, item):
        items = self._load()
        for index, existing in enumerate(items):
            if existing.id == item.id:
                items[index] = item
                break
        else:
            items.append(item)
        self._write(items)
        return item

    def _delete(self, item_id: str) -> bool:
        items = self._load()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._write(remaining)
        return True


class JsonEventStore(_JsonCollection, EventStore):
    def __init__(self, directory: str | os.PathLike) -> None:
        super().__init__(Path(directory) / "events.json", codec.event_to_dict, codec.event_from_dict)

    def list_events(self) -> list[Event]:
        return self._list()

    def get_event(self, event_id: str) -> Event | None:
        return self._get(event_id)

    def save_event(self, event: Event) -> Event:
        return self._save(event)

    def delete_event(self, event_id: str) -> bool:
        return self._delete(event_id)


class JsonPersonStore(_JsonCollection, PersonStore):
    def __init__(self, directory: str | os.PathLike) -> None:
        super().__init__(Path(directory) / "people.json", codec.person_to_dict, codec.person_from_dict)

    def list_people(self) -> list[Person]:
        return self._list()

    def get_person(self, person_id: str) -> Person | None:
        return self._get(person_id)

    def save_person(self, person: Person) -> Person:
        return self._save(person)

    def delete_person(self, person_id: str) -> bool:
        return self._delete(person_id)


class JsonRequestStore(_JsonCollection, RequestStore):
    def __init__(self, directory: str | os.PathLike) -> None:
        super().__init__(
            Path(directory) / "requests.json", codec.request_to_dict, codec.request_from_dict
        )

    def list_requests(self) -> list[TicketRequest]:
        return self._list()

    def get_request(self, request_id: str) -> TicketRequest | None:
        return self._get(request_id)

    def save_request(self, ticket_request: TicketRequest) -> TicketRequest:
        return self._save(ticket_request)

    def delete_request(self, request_id: str) -> bool:
        return self._delete(request_id)


class JsonWorkspaceStore(_JsonCollection, WorkspaceStore):
    def __init__(self, directory: str | os.PathLike) -> None:
        super().__init__(
            Path(directory) / "workspaces.json", codec.workspace_to_dict, codec.workspace_from_dict
        )

    def list_workspaces(self) -> list[Workspace]:
        return self._list()

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        return self._get(workspace_id)

    def get_workspace_by_key(self, access_key: str) -> Workspace | None:
        return next((w for w in self._load() if w.access_key == access_key), None)

    def save_workspace(self, workspace: Workspace) -> Workspace:
        return self._save(workspace)

    def delete_workspace(self, workspace_id: str) -> bool:
        return self._delete(workspace_id)
