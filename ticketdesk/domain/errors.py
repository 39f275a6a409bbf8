"""Domain error codes for ticket administration."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_TRANSITION = "INVALID_TRANSITION"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidTransitionError(DomainError):
    """Raised when a ticket request status change is not allowed."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot move request from {current} to {requested}",
        )


class DuplicateRequestError(DomainError):
    """Raised when a user has already requested tickets for an event."""

    def __init__(self, user_id: str, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REQUEST,
            message="Tickets for this event were already requested",
        )


class StoreError(DomainError):
    """Raised by stores when the backing persistence fails."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.STORE_UNAVAILABLE, message=message)
