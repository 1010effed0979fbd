from datetime import date, datetime, time
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from event_checker.events.repository.read_models import EventInfoReadModel, SqlEventInfoReadModel
from event_checker.events.urls import GET_EVENT_INFO_URL

router = APIRouter()


class EventInfoResponse(BaseModel):
    """Public event details - the host key is never included."""

    event_id: UUID
    title: str
    host_name: str
    date: date
    time: time
    tz: str
    location: str
    notes: str | None = None
    rsvp_deadline: datetime
    accepting_responses: bool
    ask_email: bool
    color_primary: str | None = None
    color_secondary: str | None = None


def get_event_info_read_model() -> EventInfoReadModel:
    """Dependency to get event info read model instance."""
    return SqlEventInfoReadModel()


@router.get(GET_EVENT_INFO_URL, response_model=EventInfoResponse)
async def get_event_info(
    event_id: UUID,
    read_model: EventInfoReadModel = Depends(get_event_info_read_model),
) -> EventInfoResponse:
    """
    Get the details needed to render the guest RSVP form.
    """
    event_info = await read_model.get_event_info(event_id)

    if not event_info:
        raise HTTPException(status_code=404, detail="Event not found")

    return EventInfoResponse(
        event_id=event_info.event_id,
        title=event_info.title,
        host_name=event_info.host_name,
        date=event_info.date,
        time=event_info.time,
        tz=event_info.tz,
        location=event_info.location,
        notes=event_info.notes,
        rsvp_deadline=event_info.rsvp_deadline,
        accepting_responses=event_info.accepting_responses,
        ask_email=event_info.ask_email,
        color_primary=event_info.color_primary,
        color_secondary=event_info.color_secondary,
    )
