import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from event_checker.events.dtos import HostAccessDeniedError
from event_checker.events.repository.read_models import (
    EventSummaryReadModel,
    SqlEventSummaryReadModel,
)
from event_checker.events.urls import GET_SUMMARY_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class SummaryTotals(BaseModel):
    all: int
    going: int
    maybe: int
    not_going: int
    adults: int
    children: int
    include_maybe_in_counts: bool


class SummaryResponse(BaseModel):
    totals: SummaryTotals


def get_summary_read_model() -> EventSummaryReadModel:
    """Dependency to get summary read model instance."""
    return SqlEventSummaryReadModel()


@router.get(GET_SUMMARY_URL, response_model=SummaryResponse)
async def get_summary(
    event_id: UUID,
    key: str | None = None,
    read_model: EventSummaryReadModel = Depends(get_summary_read_model),
) -> SummaryResponse:
    """
    Attendance KPIs for the host panel.

    Status counts cover every response; adults/children only cover "going",
    plus "maybe" when the event counts maybes.
    """
    try:
        summary = await read_model.get_summary(event_id, key=key)
    except HostAccessDeniedError:
        raise HTTPException(status_code=403, detail="Unauthorized access")
    except Exception:
        logger.exception(f"Failed to compute summary for event {event_id}")
        raise HTTPException(status_code=500, detail="Failed to compute summary")

    if summary is None:
        raise HTTPException(status_code=404, detail="Event not found")

    return SummaryResponse(
        totals=SummaryTotals(
            all=summary.all,
            going=summary.going,
            maybe=summary.maybe,
            not_going=summary.not_going,
            adults=summary.adults,
            children=summary.children,
            include_maybe_in_counts=summary.include_maybe_in_counts,
        )
    )
