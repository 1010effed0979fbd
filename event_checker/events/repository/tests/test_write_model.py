"""Tests for SqlRSVPWriteModel."""

import asyncio
from datetime import UTC, date, datetime, time, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from event_checker.config.database import async_session_manager
from event_checker.config.settings import settings
from event_checker.events.dtos import (
    CustomMessagesDTO,
    EventCreateDTO,
    EventNotFoundError,
    InvalidRSVPError,
    RSVPClosedError,
    RSVPStatus,
    RSVPSubmissionDTO,
    RSVPSubmitResultDTO,
)
from event_checker.events.features.create_event.write_model import SqlEventCreateWriteModel
from event_checker.events.repository.orm_models import RSVPResponse
from event_checker.events.repository.write_models import (
    SqlRSVPWriteModel,
    is_honeypot_tripped,
    validate_submission,
)

EVENT_DATE = date(2099, 11, 7)
EVENT_TIME = time(20, 0)


async def create_test_event(**kwargs):
    data = EventCreateDTO(
        title="Aniversário da Ana",
        host_name="Ana",
        date=kwargs.pop("date", EVENT_DATE),
        time=kwargs.pop("time", EVENT_TIME),
        location="Rua das Flores, 100",
        **kwargs,
    )
    return await SqlEventCreateWriteModel().create_event(data)


def submission(**overrides) -> RSVPSubmissionDTO:
    fields = {
        "name": "João Silva",
        "phone": "(11) 99999-0000",
        "status": "going",
        "total_people": 3,
        "children": 1,
    }
    fields.update(overrides)
    return RSVPSubmissionDTO(**fields)


async def stored_responses(event_id) -> list[RSVPResponse]:
    async with async_session_manager() as session:
        result = await session.execute(
            select(RSVPResponse).where(RSVPResponse.event_id == event_id)
        )
        return list(result.scalars().all())


async def test_submit_rsvp_creates_response(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel()

    result = await write_model.submit_rsvp(event.event_id, submission(user_agent="pytest"))

    assert isinstance(result, RSVPSubmitResultDTO)
    assert result.status == "going"
    assert result.adults == 2
    assert result.edit_until == datetime(2099, 11, 6, 23, 0, tzinfo=UTC)
    assert result.message == "Thank you for confirming your attendance!"

    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    response = responses[0]
    assert response.uuid == result.rsvp_id
    assert response.name_raw == "João Silva"
    assert response.name_norm == "joao silva"
    assert response.phone == "11999990000"
    assert response.status == RSVPStatus.GOING
    assert response.total_people == 3
    assert response.children == 1
    assert response.adults == 2
    assert response.user_agent == "pytest"


async def test_resubmission_replaces_previous_response(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel()

    first = await write_model.submit_rsvp(event.event_id, submission())
    second = await write_model.submit_rsvp(
        event.event_id,
        submission(
            name="  JOÃO   silva ",
            phone="11999990000",
            status="maybe",
            total_people=1,
            children=0,
        ),
    )

    assert first.rsvp_id != second.rsvp_id
    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    assert responses[0].uuid == second.rsvp_id
    assert responses[0].status == RSVPStatus.MAYBE
    assert responses[0].total_people == 1
    assert responses[0].children == 0
    assert responses[0].name_raw == "JOÃO   silva"


async def test_different_identities_are_kept_apart(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel()

    await write_model.submit_rsvp(event.event_id, submission())
    await write_model.submit_rsvp(event.event_id, submission(phone="(11) 98888-0000"))
    await write_model.submit_rsvp(event.event_id, submission(name="Maria Silva"))

    assert len(await stored_responses(event.event_id)) == 3


async def test_same_identity_on_other_event_is_not_replaced(db):
    event = await create_test_event()
    other_event = await create_test_event()
    write_model = SqlRSVPWriteModel()

    await write_model.submit_rsvp(event.event_id, submission())
    await write_model.submit_rsvp(other_event.event_id, submission(status="not_going"))

    assert len(await stored_responses(event.event_id)) == 1
    assert len(await stored_responses(other_event.event_id)) == 1


async def test_honeypot_is_a_silent_no_op(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel()
    await write_model.submit_rsvp(event.event_id, submission())

    result = await write_model.submit_rsvp(
        event.event_id,
        submission(status="not_going", total_people=5, children=0, honeypot="http://spam"),
    )

    assert result.status == "not_going"
    assert result.adults == 5
    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    assert responses[0].status == RSVPStatus.GOING
    assert responses[0].uuid != result.rsvp_id


async def test_honeypot_wins_over_invalid_fields_and_missing_event(db):
    write_model = SqlRSVPWriteModel()

    result = await write_model.submit_rsvp(
        uuid4(), RSVPSubmissionDTO(name=None, status="bogus", honeypot="x")
    )

    assert result.status == "going"
    assert result.edit_until is None


async def test_whitespace_honeypot_is_ignored(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel()

    await write_model.submit_rsvp(event.event_id, submission(honeypot="   "))

    assert len(await stored_responses(event.event_id)) == 1


async def test_unknown_event_raises(db):
    write_model = SqlRSVPWriteModel()

    with pytest.raises(EventNotFoundError):
        await write_model.submit_rsvp(uuid4(), submission())


async def test_validation_runs_before_event_lookup(db):
    write_model = SqlRSVPWriteModel()

    with pytest.raises(InvalidRSVPError):
        await write_model.submit_rsvp(uuid4(), submission(status="perhaps"))


async def test_submission_at_deadline_is_accepted(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel(now=lambda: event.rsvp_deadline)

    await write_model.submit_rsvp(event.event_id, submission())

    assert len(await stored_responses(event.event_id)) == 1


async def test_submission_after_deadline_is_rejected(db):
    event = await create_test_event()
    write_model = SqlRSVPWriteModel(
        now=lambda: event.rsvp_deadline + timedelta(microseconds=1)
    )

    with pytest.raises(RSVPClosedError) as exc_info:
        await write_model.submit_rsvp(event.event_id, submission())

    assert exc_info.value.event_id == event.event_id
    assert len(await stored_responses(event.event_id)) == 0


async def test_closed_event_keeps_existing_response(db):
    event = await create_test_event()
    await SqlRSVPWriteModel().submit_rsvp(event.event_id, submission())

    late = SqlRSVPWriteModel(now=lambda: event.rsvp_deadline + timedelta(days=1))
    with pytest.raises(RSVPClosedError):
        await late.submit_rsvp(event.event_id, submission(status="not_going"))

    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    assert responses[0].status == RSVPStatus.GOING


async def test_custom_thank_you_message(db):
    event = await create_test_event(
        custom_messages=CustomMessagesDTO(thanks_maybe="Hope to see you!"),
    )
    write_model = SqlRSVPWriteModel()

    maybe = await write_model.submit_rsvp(event.event_id, submission(status="maybe"))
    not_going = await write_model.submit_rsvp(
        event.event_id, submission(name="Maria", status="not_going")
    )

    assert maybe.message == "Hope to see you!"
    assert not_going.message == "We're sorry you can't make it. Your response has been recorded."


async def test_concurrent_submissions_for_same_identity(db):
    event = await create_test_event()
    payloads = [
        submission(status="going", total_people=4, children=2),
        submission(phone="11999990000", status="not_going", total_people=1, children=0),
    ]

    results = await asyncio.gather(
        *[SqlRSVPWriteModel().submit_rsvp(event.event_id, payload) for payload in payloads],
        return_exceptions=True,
    )

    assert any(isinstance(result, RSVPSubmitResultDTO) for result in results)
    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    stored = (responses[0].status, responses[0].total_people, responses[0].children)
    assert stored in {
        (RSVPStatus.GOING, 4, 2),
        (RSVPStatus.NOT_GOING, 1, 0),
    }


def failing_flush(calls: list, failures: int):
    """Replace AsyncSession.flush so the first ``failures`` calls hit a unique conflict."""
    original_flush = AsyncSession.flush

    async def flush(self, *args, **kwargs):
        calls.append(1)
        if len(calls) <= failures:
            raise IntegrityError("INSERT INTO rsvp_responses", {}, Exception("uq_rsvp_identity"))
        return await original_flush(self, *args, **kwargs)

    return flush


async def test_failed_insert_restores_previous_response(db, monkeypatch):
    event = await create_test_event()
    await SqlRSVPWriteModel().submit_rsvp(event.event_id, submission())
    calls = []
    monkeypatch.setattr(AsyncSession, "flush", failing_flush(calls, failures=100))

    with pytest.raises(IntegrityError):
        await SqlRSVPWriteModel().submit_rsvp(
            event.event_id, submission(status="not_going", total_people=1, children=0)
        )

    assert len(calls) == settings.rsvp_write_max_attempts
    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    assert responses[0].status == RSVPStatus.GOING
    assert responses[0].total_people == 3


async def test_identity_conflict_is_retried(db, monkeypatch):
    event = await create_test_event()
    await SqlRSVPWriteModel().submit_rsvp(event.event_id, submission())
    calls = []
    monkeypatch.setattr(AsyncSession, "flush", failing_flush(calls, failures=1))

    result = await SqlRSVPWriteModel().submit_rsvp(
        event.event_id, submission(status="maybe", total_people=2, children=0)
    )

    assert len(calls) == 2
    responses = await stored_responses(event.event_id)
    assert len(responses) == 1
    assert responses[0].uuid == result.rsvp_id
    assert responses[0].status == RSVPStatus.MAYBE


async def test_explicit_attempt_limit_is_kept(db, monkeypatch):
    event = await create_test_event()
    calls = []
    monkeypatch.setattr(AsyncSession, "flush", failing_flush(calls, failures=100))
    write_model = SqlRSVPWriteModel(max_attempts=0)

    assert write_model.max_attempts == 0
    with pytest.raises(IntegrityError):
        await write_model.submit_rsvp(event.event_id, submission())

    assert len(calls) == 1
    assert await stored_responses(event.event_id) == []


async def test_whole_number_floats_are_stored_as_integers(db):
    event = await create_test_event()

    result = await SqlRSVPWriteModel().submit_rsvp(
        event.event_id, submission(total_people=2.0, children=0.0)
    )

    assert result.adults == 2
    responses = await stored_responses(event.event_id)
    assert responses[0].total_people == 2
    assert responses[0].children == 0


# validate_submission


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": None},
        {"name": "   "},
        {"phone": ""},
        {"status": None},
        {"total_people": None},
        {"total_people": "3"},
        {"total_people": True},
        {"children": 1.5},
    ],
)
def test_missing_or_malformed_required_fields(overrides):
    with pytest.raises(InvalidRSVPError) as exc_info:
        validate_submission(submission(**overrides))
    assert "Required fields" in exc_info.value.detail


def test_invalid_status():
    with pytest.raises(InvalidRSVPError) as exc_info:
        validate_submission(submission(status="yes"))
    assert exc_info.value.detail == "Invalid status"


@pytest.mark.parametrize(
    "total_people, children",
    [(0, 0), (2, -1), (2, 3)],
)
def test_invalid_headcounts(total_people, children):
    with pytest.raises(InvalidRSVPError) as exc_info:
        validate_submission(submission(total_people=total_people, children=children))
    assert "total_people/children" in exc_info.value.detail


def test_valid_headcounts_never_yield_negative_adults():
    for total_people in range(1, 5):
        for children in range(0, total_people + 1):
            validated = validate_submission(
                submission(total_people=total_people, children=children)
            )
            assert validated.adults == total_people - children >= 0


def test_status_problem_reported_before_headcount_problem():
    with pytest.raises(InvalidRSVPError) as exc_info:
        validate_submission(submission(status="yes", total_people=0))
    assert exc_info.value.detail == "Invalid status"


def test_whole_number_float_headcounts_are_accepted():
    validated = validate_submission(submission(total_people=3.0, children=1.0))

    assert validated.total_people == 3
    assert isinstance(validated.total_people, int)
    assert validated.adults == 2


@pytest.mark.parametrize(
    "overrides",
    [{"name": 123}, {"phone": 11999990000}, {"status": ["going"]}],
)
def test_non_string_text_fields_are_rejected(overrides):
    with pytest.raises(InvalidRSVPError) as exc_info:
        validate_submission(submission(**overrides))
    assert "Required fields" in exc_info.value.detail


def test_non_string_email_is_dropped():
    assert validate_submission(submission(email=42)).email is None


@pytest.mark.parametrize(
    "honeypot, tripped",
    [(None, False), ("", False), ("  ", False), (0, False), ("x", True), (1, True), (["x"], True)],
)
def test_is_honeypot_tripped(honeypot, tripped):
    assert is_honeypot_tripped(honeypot) is tripped
