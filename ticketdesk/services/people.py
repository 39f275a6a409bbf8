"""Person directory: ticket holders and their assignment history."""
from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Mapping

from ticketdesk.domain import AssignmentHistory, AssignmentType, Person
from ticketdesk.domain.serialization import parse_bool, parse_enum, parse_money
from ticketdesk.services.calendar import utc_now
from ticketdesk.stores.interfaces import EventStore, PersonStore

SEARCH_LIMIT = 10


class PersonDirectory:
    """People keyed case-insensitively by (name, company)."""

    def __init__(
        self,
        store: PersonStore,
        event_store: EventStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.event_store = event_store
        self.clock = clock or utc_now

    def get_person(self, person_id: str) -> Person | None:
        return self.store.get_person(person_id)

    def list_people(self) -> list[Person]:
        return self.store.list_people()

    def get_person_by_name_and_company(self, name: str, company: str | None = "") -> Person | None:
        return next((p for p in self.store.list_people() if p.matches(name, company)), None)

    def add_or_update_person(
        self,
        name: str,
        company: str | None = "",
        email: str | None = None,
        phone: str | None = None,
    ) -> Person:
        """Update the matching person's contact details or create a new person.

        Only fields given as non-None overwrite stored values.
        """
        name = name.strip()
        company = (company or "").strip()
        now = self.clock()
        existing = self.get_person_by_name_and_company(name, company)
        if existing is not None:
            changes: dict[str, Any] = {"name": name, "company": company, "updated_at": now}
            if email is not None:
                changes["email"] = email
            if phone is not None:
                changes["phone"] = phone
            return self.store.save_person(replace(existing, **changes))

        person = Person(
            id=str(uuid.uuid4()),
            name=name,
            company=company,
            email=email,
            phone=phone,
            created_at=now,
            updated_at=now,
        )
        return self.store.save_person(person)

    def add_assignment_history(
        self, name: str, company: str | None, entry: Mapping[str, Any] | AssignmentHistory
    ) -> Person | None:
        """Append a history snapshot; returns None when nobody matches."""
        person = self.get_person_by_name_and_company(name, company)
        if person is None:
            return None
        now = self.clock()
        history = self._history_entry(entry, now)
        return self.store.save_person(
            replace(
                person,
                assignment_history=(*person.assignment_history, history),
                updated_at=now,
            )
        )

    @staticmethod
    def _history_entry(entry: Mapping[str, Any] | AssignmentHistory, now: datetime) -> AssignmentHistory:
        if isinstance(entry, AssignmentHistory):
            return replace(entry, id=str(uuid.uuid4()), created_at=now)
        return AssignmentHistory(
            id=str(uuid.uuid4()),
            event_id=str(entry["event_id"]),
            event_name=str(entry.get("event_name", "")),
            date=str(entry.get("date", "")),
            seat_type=str(entry.get("seat_type", "")),
            assignment_type=parse_enum(AssignmentType, entry.get("assignment_type")),
            price=parse_money(entry.get("price")),
            confirmed=parse_bool(entry.get("confirmed", False)),
            created_at=now,
        )

    def search_people(self, query: str | None, limit: int = SEARCH_LIMIT) -> list[Person]:
        """Substring match on name or company.

        Histories in the results only reference events that still exist.
        """
        term = (query or "").strip().lower()
        if not term:
            return []

        matches = [
            p for p in self.store.list_people()
            if term in p.name.lower() or term in p.company.lower()
        ][:limit]
        if self.event_store is None:
            return matches

        event_ids = {event.id for event in self.event_store.list_events()}
        return [
            replace(
                p,
                assignment_history=tuple(
                    h for h in p.assignment_history if h.event_id in event_ids
                ),
            )
            for p in matches
        ]

    def delete_person(self, person_id: str) -> bool:
        return self.store.delete_person(person_id)

    def merge_people(self, keep_id: str, merge_id: str) -> bool:
        """Move ``merge_id``'s history onto ``keep_id`` and remove it."""
        if keep_id == merge_id:
            return False
        keep = self.store.get_person(keep_id)
        merge = self.store.get_person(merge_id)
        if keep is None or merge is None:
            return False

        # Moved entries get fresh ids
        moved = tuple(replace(h, id=str(uuid.uuid4())) for h in merge.assignment_history)
        self.store.save_person(
            replace(
                keep,
                assignment_history=keep.assignment_history + moved,
                updated_at=self.clock(),
            )
        )
        self.store.delete_person(merge_id)
        return True
