"""Request/response bodies for event creation."""

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, Field


class CustomMessages(BaseModel):
    thanks_going: str | None = None
    thanks_maybe: str | None = None
    thanks_not_going: str | None = None
    push_24h_going: str | None = None
    push_24h_maybe: str | None = None


class CreateEventRequest(BaseModel):
    """Request body for creating an event.

    The RSVP deadline comes from ``rsvp_deadline_date`` + ``rsvp_deadline_time``,
    else ``rsvp_deadline``, else 24 hours before the event.
    """

    title: str = Field(min_length=1)
    host_name: str = Field(min_length=1)
    date: date
    time: time
    location: str = Field(min_length=1)
    tz: str | None = None
    notes: str | None = None
    rsvp_deadline_date: date | None = None
    rsvp_deadline_time: time | None = None
    rsvp_deadline: datetime | None = None
    color_primary: str | None = None
    color_secondary: str | None = None
    ask_email: bool = False
    include_maybe_in_counts: bool = False
    custom_messages: CustomMessages = CustomMessages()


class CreateEventResponse(BaseModel):
    event_id: UUID
    host_key: str
    rsvp_deadline: datetime
    guest_link: str
    host_link: str
