from ticketdesk.domain.errors import (
    DomainError,
    DuplicateRequestError,
    ErrorCode,
    InvalidTransitionError,
    StoreError,
)
from ticketdesk.domain.models import (
    ZERO,
    AssignmentHistory,
    AssignmentType,
    Event,
    EventStats,
    Person,
    RequestPriority,
    RequestStatus,
    SeatType,
    Team,
    Ticket,
    TicketRequest,
    TicketStatus,
    TicketValue,
    Workspace,
    WorkspaceType,
)

__all__ = [
    "ZERO",
    "AssignmentHistory",
    "AssignmentType",
    "DomainError",
    "DuplicateRequestError",
    "ErrorCode",
    "Event",
    "EventStats",
    "InvalidTransitionError",
    "Person",
    "RequestPriority",
    "RequestStatus",
    "SeatType",
    "StoreError",
    "Team",
    "Ticket",
    "TicketRequest",
    "TicketStatus",
    "TicketValue",
    "Workspace",
    "WorkspaceType",
]
