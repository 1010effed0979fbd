"""Write model for creating events.

Resolves the RSVP deadline once, issues the host secret and stores the event.
Returns DTOs instead of ORM models.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from event_checker.config.database import async_session_manager
from event_checker.config.settings import settings
from event_checker.events.deadline import DeadlinePolicy
from event_checker.events.dtos import CreatedEventDTO, EventCreateDTO
from event_checker.events.repository.orm_models import Event

logger = logging.getLogger(__name__)


def generate_host_key() -> str:
    return secrets.token_hex(16)


class EventCreateWriteModel(ABC):
    """Abstract base class for event creation write operations."""

    @abstractmethod
    async def create_event(self, data: EventCreateDTO) -> CreatedEventDTO:
        """Create a new event. Returns DTO.

        Raises:
            DeadlineResolutionError: when no RSVP deadline can be resolved
        """
        raise NotImplementedError


class SqlEventCreateWriteModel(EventCreateWriteModel):
    """SQL implementation of event creation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        deadline_policy: DeadlinePolicy | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.deadline_policy = deadline_policy or DeadlinePolicy.from_settings()

    async def create_event(self, data: EventCreateDTO) -> CreatedEventDTO:
        # Fails before anything is written
        rsvp_deadline = self.deadline_policy.resolve_deadline(
            event_date=data.date,
            event_time=data.time,
            deadline_date=data.rsvp_deadline_date,
            deadline_time=data.rsvp_deadline_time,
            legacy_deadline=data.rsvp_deadline,
        )
        host_key = generate_host_key()
        messages = data.custom_messages

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = Event(
                host_hash=host_key,
                title=data.title,
                host_name=data.host_name,
                date=data.date,
                time=data.time,
                tz=data.tz or settings.default_timezone_label,
                location=data.location,
                notes=data.notes,
                rsvp_deadline=rsvp_deadline,
                include_maybe_in_counts=data.include_maybe_in_counts,
                ask_email=data.ask_email,
                color_primary=data.color_primary,
                color_secondary=data.color_secondary,
                msg_thanks_going=messages.thanks_going,
                msg_thanks_maybe=messages.thanks_maybe,
                msg_thanks_not_going=messages.thanks_not_going,
                msg_push_24h_going=messages.push_24h_going,
                msg_push_24h_maybe=messages.push_24h_maybe,
            )
            session.add(event)
            await session.flush()  # Get event.uuid

            logger.info(f"Created event {event.uuid} with RSVP deadline {rsvp_deadline.isoformat()}")

        return CreatedEventDTO(
            event_id=event.uuid,
            host_key=host_key,
            rsvp_deadline=rsvp_deadline,
        )
