"""RSVP deadline resolution and the acceptance gate.

All wall-clock values (event date/time, split deadline fields, naive legacy
timestamps) are read at one fixed UTC offset taken from configuration. The
offset does not follow daylight saving; the event's ``tz`` label is only
displayed.
"""

from datetime import UTC, date, datetime, time, timedelta, timezone

from event_checker.config.settings import settings
from event_checker.events.dtos import DeadlineResolutionError

EDIT_WINDOW = timedelta(hours=24)
DEFAULT_DEADLINE_LEAD = timedelta(hours=24)


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_accepting_responses(now: datetime, deadline: datetime) -> bool:
    """Responses are accepted up to and including the deadline instant."""
    return as_utc(now) <= as_utc(deadline)


class DeadlinePolicy:
    def __init__(self, utc_offset: timedelta) -> None:
        self.tzinfo = timezone(utc_offset)

    @classmethod
    def from_settings(cls) -> "DeadlinePolicy":
        return cls(timedelta(minutes=settings.event_utc_offset_minutes))

    def localize(self, day: date, at: time) -> datetime:
        return datetime.combine(day, at.replace(tzinfo=None), tzinfo=self.tzinfo)

    def event_start(self, event_date: date, event_time: time) -> datetime:
        return self.localize(event_date, event_time)

    def edit_until(self, event_date: date, event_time: time) -> datetime:
        return as_utc(self.event_start(event_date, event_time) - EDIT_WINDOW)

    def resolve_deadline(
        self,
        event_date: date | None,
        event_time: time | None,
        deadline_date: date | None = None,
        deadline_time: time | None = None,
        legacy_deadline: datetime | None = None,
    ) -> datetime:
        """Resolve the RSVP deadline once, at event creation.

        Priority:
            1. split ``deadline_date`` + ``deadline_time`` (both required)
            2. ``legacy_deadline`` absolute timestamp
            3. 24 hours before the event starts

        Raises:
            DeadlineResolutionError: when none of the above is available.
        """
        if deadline_date is not None and deadline_time is not None:
            return as_utc(self.localize(deadline_date, deadline_time))

        if legacy_deadline is not None:
            if legacy_deadline.tzinfo is None:
                legacy_deadline = legacy_deadline.replace(tzinfo=self.tzinfo)
            return as_utc(legacy_deadline)

        if event_date is not None and event_time is not None:
            return as_utc(self.event_start(event_date, event_time) - DEFAULT_DEADLINE_LEAD)

        raise DeadlineResolutionError(
            "Provide rsvp_deadline_date and rsvp_deadline_time, rsvp_deadline, "
            "or a valid event date and time"
        )
