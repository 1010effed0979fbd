import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException

from event_checker.events.dtos import (
    EventNotFoundError,
    InvalidRSVPError,
    RSVPClosedError,
    RSVPSubmissionDTO,
)
from event_checker.events.features.submit_rsvp.dtos import RSVPSubmitRequest, RSVPSubmitResponse
from event_checker.events.repository.write_models import RSVPWriteModel, SqlRSVPWriteModel
from event_checker.events.urls import SUBMIT_RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel()


@router.post(SUBMIT_RSVP_URL, response_model=RSVPSubmitResponse)
async def submit_rsvp(
    event_id: UUID,
    rsvp_data: RSVPSubmitRequest,
    user_agent: str | None = Header(default=None),
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> RSVPSubmitResponse:
    """
    Create or replace a guest's RSVP for an event.

    Guests are identified by name and phone, so answering again replaces
    the earlier answer instead of adding to it.
    """
    submission = RSVPSubmissionDTO(
        name=rsvp_data.name,
        phone=rsvp_data.phone,
        email=rsvp_data.email,
        status=rsvp_data.status,
        total_people=rsvp_data.total_people,
        children=rsvp_data.children,
        honeypot=rsvp_data.honeypot,
        user_agent=user_agent,
    )

    try:
        result = await write_model.submit_rsvp(event_id=event_id, submission=submission)
    except InvalidRSVPError as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except RSVPClosedError as e:
        raise HTTPException(
            status_code=403,
            detail={
                "message": "RSVP closed for this event",
                "rsvp_deadline": e.deadline.isoformat(),
            },
        )
    except Exception:
        logger.exception(f"Failed to save RSVP for event {event_id}")
        raise HTTPException(status_code=500, detail="Failed to save RSVP")

    return RSVPSubmitResponse(
        rsvp_id=result.rsvp_id,
        status=result.status,
        adults=result.adults,
        edit_until=result.edit_until,
        message=result.message,
    )
