"""RSVP ledger - write model that returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from event_checker.config.database import async_session_manager
from event_checker.config.settings import settings
from event_checker.events.deadline import DeadlinePolicy, is_accepting_responses
from event_checker.events.dtos import (
    EventNotFoundError,
    InvalidRSVPError,
    RSVPClosedError,
    RSVPStatus,
    RSVPSubmissionDTO,
    RSVPSubmitResultDTO,
)
from event_checker.events.identity import normalize_digits, normalize_name
from event_checker.events.repository.orm_models import Event, RSVPResponse

logger = logging.getLogger(__name__)

DEFAULT_THANK_YOU_MESSAGES = {
    RSVPStatus.GOING: "Thank you for confirming your attendance!",
    RSVPStatus.MAYBE: "Thanks for letting us know. You can update your answer before the deadline.",
    RSVPStatus.NOT_GOING: "We're sorry you can't make it. Your response has been recorded.",
}


@dataclass(frozen=True)
class ValidatedSubmission:
    name: str
    phone: str
    email: str | None
    status: RSVPStatus
    total_people: int
    children: int

    @property
    def adults(self) -> int:
        return self.total_people - self.children


def is_honeypot_tripped(honeypot: Any) -> bool:
    if isinstance(honeypot, str):
        return bool(honeypot.strip())
    return bool(honeypot)


def _as_text(value: Any) -> str:
    """Stripped string value, or "" when the field is missing or not a string."""
    if isinstance(value, str):
        return value.strip()
    return ""


def _as_count(value: Any) -> int | None:
    # bool is an int subclass but never a headcount
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_submission(submission: RSVPSubmissionDTO) -> ValidatedSubmission:
    """Check the body fields of an RSVP in order; the first failure wins.

    Raises:
        InvalidRSVPError: naming the failed rule.
    """
    name = _as_text(submission.name)
    phone = _as_text(submission.phone)
    status = _as_text(submission.status)
    total_people = _as_count(submission.total_people)
    children = _as_count(submission.children)
    if not name or not phone or not status or total_people is None or children is None:
        raise InvalidRSVPError(
            "Required fields: name, phone, status, total_people, children"
        )

    try:
        rsvp_status = RSVPStatus(status)
    except ValueError:
        raise InvalidRSVPError("Invalid status")

    if total_people < 1 or children < 0 or children > total_people:
        raise InvalidRSVPError("Invalid values for total_people/children")

    return ValidatedSubmission(
        name=name,
        phone=phone,
        email=_as_text(submission.email) or None,
        status=rsvp_status,
        total_people=total_people,
        children=children,
    )


def thank_you_message(event: Event, status: RSVPStatus) -> str:
    custom = {
        RSVPStatus.GOING: event.msg_thanks_going,
        RSVPStatus.MAYBE: event.msg_thanks_maybe,
        RSVPStatus.NOT_GOING: event.msg_thanks_not_going,
    }[status]
    return custom or DEFAULT_THANK_YOU_MESSAGES[status]


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(
        self,
        event_id: UUID,
        submission: RSVPSubmissionDTO,
    ) -> RSVPSubmitResultDTO:
        """
        Record a guest's response, replacing any earlier response with the
        same identity key (event, normalized name, normalized phone).
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """Write operations for RSVP responses. Returns DTOs, never ORM models."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        deadline_policy: DeadlinePolicy | None = None,
        now: Callable[[], datetime] | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.deadline_policy = deadline_policy or DeadlinePolicy.from_settings()
        self.now = now or (lambda: datetime.now(UTC))
        self.max_attempts = (
            settings.rsvp_write_max_attempts if max_attempts is None else max_attempts
        )

    async def submit_rsvp(
        self,
        event_id: UUID,
        submission: RSVPSubmissionDTO,
    ) -> RSVPSubmitResultDTO:
        """
        Validate, then replace-or-insert the response in one transaction.

        A tripped honeypot returns a success-shaped result without touching
        the store.
        """
        if is_honeypot_tripped(submission.honeypot):
            logger.info(f"Honeypot tripped for event {event_id}, ignoring submission")
            return self._decoy_result(submission)

        validated = validate_submission(submission)

        attempt = 1
        while True:
            try:
                return await self._replace_response(event_id, validated, submission.user_agent)
            except IntegrityError:
                # Another submission for the same identity committed between
                # our delete and insert; our transaction was rolled back.
                if self.session_overwrite is not None or attempt >= self.max_attempts:
                    raise
                logger.warning(
                    f"Identity conflict on RSVP for event {event_id}, "
                    f"retrying (attempt {attempt}/{self.max_attempts})"
                )
                attempt += 1

    async def _replace_response(
        self,
        event_id: UUID,
        validated: ValidatedSubmission,
        user_agent: str | None,
    ) -> RSVPSubmitResultDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get_event(session, event_id)
            if event is None:
                raise EventNotFoundError(event_id)

            if not is_accepting_responses(self.now(), event.rsvp_deadline):
                raise RSVPClosedError(event_id, event.rsvp_deadline)

            name_norm = normalize_name(validated.name)
            phone_digits = normalize_digits(validated.phone)

            await session.execute(
                delete(RSVPResponse).where(
                    RSVPResponse.event_id == event_id,
                    RSVPResponse.name_norm == name_norm,
                    RSVPResponse.phone == phone_digits,
                )
            )

            response = RSVPResponse(
                event_id=event_id,
                name_raw=validated.name,
                name_norm=name_norm,
                phone=phone_digits,
                email=validated.email,
                status=validated.status,
                total_people=validated.total_people,
                children=validated.children,
                user_agent=user_agent,
            )
            session.add(response)
            await session.flush()

            logger.debug(
                f"Stored RSVP {response.uuid} for event {event_id} ({validated.status.value})"
            )

            return RSVPSubmitResultDTO(
                rsvp_id=response.uuid,
                status=validated.status.value,
                adults=validated.adults,
                edit_until=self.deadline_policy.edit_until(event.date, event.time),
                message=thank_you_message(event, validated.status),
            )

    async def _get_event(self, session, event_id: UUID) -> Event | None:
        result = await session.execute(select(Event).where(Event.uuid == event_id))
        return result.scalar_one_or_none()

    def _decoy_result(self, submission: RSVPSubmissionDTO) -> RSVPSubmitResultDTO:
        try:
            status = RSVPStatus(_as_text(submission.status))
        except ValueError:
            status = RSVPStatus.GOING
        adults = 1
        total_people = _as_count(submission.total_people)
        children = _as_count(submission.children)
        if total_people is not None and children is not None:
            adults = max(total_people - children, 0)
        return RSVPSubmitResultDTO(
            rsvp_id=uuid4(),
            status=status.value,
            adults=adults,
            edit_until=None,
            message=DEFAULT_THANK_YOU_MESSAGES[status],
        )
