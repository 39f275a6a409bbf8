"""Ticket request queue."""
from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Mapping

from ticketdesk.domain import (
    InvalidTransitionError,
    RequestPriority,
    RequestStatus,
    TicketRequest,
)
from ticketdesk.domain.serialization import parse_enum
from ticketdesk.services.calendar import utc_now
from ticketdesk.stores.interfaces import RequestStore

# Requests never return to pending
ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset(
        {RequestStatus.APPROVED, RequestStatus.DENIED, RequestStatus.COMPLETED}
    ),
    RequestStatus.APPROVED: frozenset({RequestStatus.COMPLETED}),
    RequestStatus.DENIED: frozenset(),
    RequestStatus.COMPLETED: frozenset(),
}


def can_transition(current: RequestStatus, requested: RequestStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


class RequestQueue:
    """Service for ticket request lifecycle operations."""

    def __init__(self, store: RequestStore, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self.clock = clock or utc_now

    def create_request(self, data: Mapping[str, Any]) -> TicketRequest:
        """Queue a new pending request.

        Callers check ``has_user_requested_event`` first; this method does not
        reject duplicates.
        """
        ticket_request = TicketRequest(
            id=str(uuid.uuid4()),
            event_id=str(data["event_id"]),
            user_id=str(data["user_id"]),
            user_name=str(data["user_name"]),
            user_email=data.get("user_email") or "",
            user_company=data.get("user_company") or "",
            user_phone=data.get("user_phone") or "",
            priority=parse_enum(RequestPriority, data.get("priority")) or RequestPriority.WANT,
            message=data.get("message") or None,
            requested_quantities=tuple(int(q) for q in data.get("requested_quantities") or ()),
            status=RequestStatus.PENDING,
            requested_at=self.clock(),
        )
        return self.store.save_request(ticket_request)

    def update_request_status(
        self,
        request_id: str,
        status: RequestStatus | str,
        processed_by: str,
        assigned_ticket_id: str | None = None,
    ) -> TicketRequest | None:
        ticket_request = self.store.get_request(request_id)
        if ticket_request is None:
            return None
        status = RequestStatus(status)
        if not can_transition(ticket_request.status, status):
            raise InvalidTransitionError(ticket_request.status.value, status.value)

        updated = replace(
            ticket_request,
            status=status,
            processed_at=self.clock(),
            processed_by=processed_by,
            assigned_ticket_id=assigned_ticket_id,
        )
        return self.store.save_request(updated)

    def delete_request(self, request_id: str) -> bool:
        return self.store.delete_request(request_id)

    def get_request(self, request_id: str) -> TicketRequest | None:
        return self.store.get_request(request_id)

    def list_requests(self, status: RequestStatus | str | None = None) -> list[TicketRequest]:
        requests = self.store.list_requests()
        if status:
            status = RequestStatus(status)
            requests = [r for r in requests if r.status is status]
        return requests

    def get_requests_by_event_id(self, event_id: str) -> list[TicketRequest]:
        return [r for r in self.store.list_requests() if r.event_id == event_id]

    def get_requests_by_user_id(self, user_id: str) -> list[TicketRequest]:
        return [r for r in self.store.list_requests() if r.user_id == user_id]

    def get_pending_requests_count(self, event_id: str) -> int:
        return sum(
            1 for r in self.store.list_requests()
            if r.event_id == event_id and r.status is RequestStatus.PENDING
        )

    def has_user_requested_event(self, user_id: str, event_id: str) -> bool:
        return any(
            r.user_id == user_id and r.event_id == event_id
            for r in self.store.list_requests()
        )

    def get_request_stats(self) -> dict:
        requests = self.store.list_requests()
        stats = {"total": len(requests)}
        for status in RequestStatus:
            stats[status.value] = sum(1 for r in requests if r.status is status)
        return stats
