from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any
from uuid import UUID


class RSVPStatus(str, Enum):
    GOING = "going"
    MAYBE = "maybe"
    NOT_GOING = "not_going"


class InvalidRSVPError(Exception):
    """Raised when an RSVP submission fails validation."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class EventNotFoundError(Exception):
    """Raised when the referenced event does not exist."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' not found")


class RSVPClosedError(Exception):
    """Raised when a response arrives after the event's RSVP deadline."""

    def __init__(self, event_id: UUID, deadline: datetime) -> None:
        self.event_id = event_id
        self.deadline = deadline
        super().__init__(f"RSVP closed for event '{event_id}' since {deadline.isoformat()}")


class DeadlineResolutionError(ValueError):
    """Raised when no RSVP deadline can be derived for a new event."""


class HostAccessDeniedError(Exception):
    """Raised when the host key does not match the event's host secret."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Host key rejected for event '{event_id}'")


@dataclass(frozen=True)
class CustomMessagesDTO:
    thanks_going: str | None = None
    thanks_maybe: str | None = None
    thanks_not_going: str | None = None
    push_24h_going: str | None = None
    push_24h_maybe: str | None = None


@dataclass(frozen=True)
class EventCreateDTO:
    """Input for event creation. Deadline fields are resolved by DeadlinePolicy."""

    title: str
    host_name: str
    date: date
    time: time
    location: str
    tz: str | None = None
    notes: str | None = None
    rsvp_deadline_date: date | None = None
    rsvp_deadline_time: time | None = None
    rsvp_deadline: datetime | None = None
    color_primary: str | None = None
    color_secondary: str | None = None
    ask_email: bool = False
    include_maybe_in_counts: bool = False
    custom_messages: CustomMessagesDTO = CustomMessagesDTO()


@dataclass(frozen=True)
class CreatedEventDTO:
    event_id: UUID
    host_key: str
    rsvp_deadline: datetime


@dataclass(frozen=True)
class EventInfoDTO:
    """Public event details. Never carries the host secret."""

    event_id: UUID
    title: str
    host_name: str
    date: date
    time: time
    tz: str
    location: str
    rsvp_deadline: datetime
    accepting_responses: bool
    ask_email: bool
    notes: str | None = None
    color_primary: str | None = None
    color_secondary: str | None = None


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    """Raw RSVP body as received; validated by the write model in a fixed order."""

    name: Any = None
    phone: Any = None
    email: Any = None
    status: Any = None
    total_people: Any = None
    children: Any = None
    honeypot: Any = None
    user_agent: str | None = None


@dataclass(frozen=True)
class RSVPSubmitResultDTO:
    rsvp_id: UUID
    status: str
    adults: int
    edit_until: datetime | None
    message: str


@dataclass(frozen=True)
class EventSummaryDTO:
    all: int
    going: int
    maybe: int
    not_going: int
    adults: int
    children: int
    include_maybe_in_counts: bool
