import logging

from fastapi import APIRouter, Depends, HTTPException

from event_checker.events.dtos import CustomMessagesDTO, DeadlineResolutionError, EventCreateDTO
from event_checker.events.features.create_event.dtos import CreateEventRequest, CreateEventResponse
from event_checker.events.features.create_event.write_model import (
    EventCreateWriteModel,
    SqlEventCreateWriteModel,
)
from event_checker.events.links import LinkBuilder, get_link_builder
from event_checker.events.urls import CREATE_EVENT_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_event_create_write_model() -> EventCreateWriteModel:
    """Dependency to get event creation write model instance."""
    return SqlEventCreateWriteModel()


@router.post(CREATE_EVENT_URL, response_model=CreateEventResponse)
async def create_event(
    request: CreateEventRequest,
    write_model: EventCreateWriteModel = Depends(get_event_create_write_model),
    links: LinkBuilder = Depends(get_link_builder),
) -> CreateEventResponse:
    """
    Create an event and return the guest RSVP link and the host panel link.

    The host key is only ever returned here; keep the host link private.
    """
    data = EventCreateDTO(
        title=request.title,
        host_name=request.host_name,
        date=request.date,
        time=request.time,
        location=request.location,
        tz=request.tz,
        notes=request.notes,
        rsvp_deadline_date=request.rsvp_deadline_date,
        rsvp_deadline_time=request.rsvp_deadline_time,
        rsvp_deadline=request.rsvp_deadline,
        color_primary=request.color_primary,
        color_secondary=request.color_secondary,
        ask_email=request.ask_email,
        include_maybe_in_counts=request.include_maybe_in_counts,
        custom_messages=CustomMessagesDTO(**request.custom_messages.model_dump()),
    )

    try:
        created = await write_model.create_event(data)
    except DeadlineResolutionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Failed to create event '{request.title}'")
        raise HTTPException(status_code=500, detail="Failed to create event")

    return CreateEventResponse(
        event_id=created.event_id,
        host_key=created.host_key,
        rsvp_deadline=created.rsvp_deadline,
        guest_link=links.guest_link(created.event_id),
        host_link=links.host_link(created.event_id, created.host_key),
    )
