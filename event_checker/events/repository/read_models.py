import abc
import secrets
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import case, func, select

from event_checker.config.database import async_session_manager
from event_checker.config.settings import settings
from event_checker.events.deadline import as_utc, is_accepting_responses
from event_checker.events.dtos import (
    EventInfoDTO,
    EventSummaryDTO,
    HostAccessDeniedError,
    RSVPStatus,
)
from event_checker.events.repository.orm_models import Event, RSVPResponse


def counted_statuses(include_maybe_in_counts: bool) -> list[RSVPStatus]:
    """Statuses whose headcounts contribute to the adults/children totals."""
    if include_maybe_in_counts:
        return [RSVPStatus.GOING, RSVPStatus.MAYBE]
    return [RSVPStatus.GOING]


def host_key_matches(expected: str, key: str | None) -> bool:
    return key is not None and secrets.compare_digest(expected.encode(), key.encode())


class EventSummaryReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_summary(self, event_id: UUID, key: str | None = None) -> EventSummaryDTO | None:
        """
        Get attendance KPIs for an event.
        Returns None when the event does not exist.
        """
        raise NotImplementedError


class SqlEventSummaryReadModel(EventSummaryReadModel):
    """SQL implementation of the attendance aggregator.

    Totals are recomputed from the stored responses on every call.
    """

    def __init__(self, require_host_key: bool | None = None) -> None:
        self.require_host_key = (
            settings.require_host_key if require_host_key is None else require_host_key
        )

    async def get_summary(self, event_id: UUID, key: str | None = None) -> EventSummaryDTO | None:
        async with async_session_manager() as session:
            event_stmt = select(Event.host_hash, Event.include_maybe_in_counts).where(
                Event.uuid == event_id
            )
            event_row = (await session.execute(event_stmt)).one_or_none()
            if event_row is None:
                return None

            host_hash, include_maybe = event_row
            if self.require_host_key and not host_key_matches(host_hash, key):
                raise HostAccessDeniedError(event_id)

            # Status counts never depend on the toggle
            status_stmt = select(
                func.count(RSVPResponse.uuid),
                *[
                    func.coalesce(func.sum(case((RSVPResponse.status == status, 1), else_=0)), 0)
                    for status in RSVPStatus
                ],
            ).where(RSVPResponse.event_id == event_id)
            all_count, going, maybe, not_going = (await session.execute(status_stmt)).one()

            headcount_stmt = select(
                func.coalesce(func.sum(RSVPResponse.total_people - RSVPResponse.children), 0),
                func.coalesce(func.sum(RSVPResponse.children), 0),
            ).where(
                RSVPResponse.event_id == event_id,
                RSVPResponse.status.in_(counted_statuses(include_maybe)),
            )
            adults, children = (await session.execute(headcount_stmt)).one()

            return EventSummaryDTO(
                all=int(all_count),
                going=int(going),
                maybe=int(maybe),
                not_going=int(not_going),
                adults=int(adults),
                children=int(children),
                include_maybe_in_counts=bool(include_maybe),
            )


class EventInfoReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event_info(self, event_id: UUID) -> EventInfoDTO | None:
        """
        Get the public details a guest needs to answer an invitation.
        Returns None when the event does not exist.
        """
        raise NotImplementedError


class SqlEventInfoReadModel(EventInfoReadModel):
    """SQL implementation of event info read model."""

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self.now = now or (lambda: datetime.now(UTC))

    async def get_event_info(self, event_id: UUID) -> EventInfoDTO | None:
        async with async_session_manager() as session:
            result = await session.execute(select(Event).where(Event.uuid == event_id))
            event = result.scalar_one_or_none()

            if not event:
                return None

            return EventInfoDTO(
                event_id=event.uuid,
                title=event.title,
                host_name=event.host_name,
                date=event.date,
                time=event.time,
                tz=event.tz,
                location=event.location,
                notes=event.notes,
                rsvp_deadline=as_utc(event.rsvp_deadline),
                accepting_responses=is_accepting_responses(self.now(), event.rsvp_deadline),
                ask_email=event.ask_email,
                color_primary=event.color_primary,
                color_secondary=event.color_secondary,
            )
