"""Tests for the per-user screening session service."""

from uuid import uuid4

import pytest

from eye_health_tracker.domain.color_vision import Subtype
from eye_health_tracker.services.errors import (
    BlankAnswerError,
    ResultDeliveryError,
    SessionNotFoundError,
)
from eye_health_tracker.services.screening import SessionStatus
from eye_health_tracker.services.session_store import InMemorySessionStore
from eye_health_tracker.services.sessions import ScreeningSessionService
from tests.conftest import (
    FirstNRandom,
    InMemoryProfileRepository,
    InMemoryResultRepository,
    build_result_service,
    make_catalog,
)


def _service(
    results: InMemoryResultRepository | None = None,
    profiles: InMemoryProfileRepository | None = None,
) -> ScreeningSessionService:
    return ScreeningSessionService(
        catalog=make_catalog(plain=20, protan_only=3, deutan_only=3),
        store=InMemorySessionStore(),
        result_service=build_result_service(results, profiles),
        rng_factory=FirstNRandom,
    )


def test_start_session_returns_first_prompt() -> None:
    service = _service()

    prompt = service.start_session(uuid4())

    assert prompt.plate_id == 1
    assert prompt.number == 1
    assert prompt.total == 20
    assert prompt.correct_so_far == 0


def test_full_session_emits_result_once() -> None:
    results = InMemoryResultRepository()
    profiles = InMemoryProfileRepository()
    service = _service(results, profiles)
    user_id = uuid4()
    prompt = service.start_session(user_id)

    outcome = None
    while prompt is not None:
        outcome = service.submit_answer(user_id, str(prompt.plate_id))
        prompt = outcome.next_prompt

    assert outcome is not None
    assert outcome.result is not None
    assert outcome.result.subtype is Subtype.NORMAL
    assert outcome.record is not None
    assert outcome.record.xp_earned == 55
    assert len(results.results) == 1
    assert profiles.xp[user_id] == 55
    assert service.current_prompt(user_id) is None


def test_prompt_tracks_progress_and_extension() -> None:
    service = _service()
    user_id = uuid4()
    service.start_session(user_id)

    outcome = service.submit_answer(user_id, "wrong")
    outcome = service.submit_answer(user_id, "2")

    assert outcome.next_prompt is not None
    assert outcome.next_prompt.number == 3
    assert outcome.next_prompt.total == 22
    assert outcome.next_prompt.correct_so_far == 1


def test_blank_answer_is_rejected() -> None:
    service = _service()
    user_id = uuid4()
    service.start_session(user_id)

    with pytest.raises(BlankAnswerError):
        service.submit_answer(user_id, "   ")

    assert service.get_session(user_id).position == 0


def test_missing_session_raises() -> None:
    service = _service()

    with pytest.raises(SessionNotFoundError):
        service.submit_answer(uuid4(), "12")


def test_restart_discards_previous_attempt() -> None:
    service = _service()
    user_id = uuid4()
    service.start_session(user_id)
    service.submit_answer(user_id, "1")

    service.start_session(user_id)

    assert service.get_session(user_id).position == 0


def test_abandon_drops_session_without_emitting() -> None:
    results = InMemoryResultRepository()
    service = _service(results)
    user_id = uuid4()
    service.start_session(user_id)

    assert service.abandon(user_id) is True
    assert service.abandon(user_id) is False
    assert results.results == []
    with pytest.raises(SessionNotFoundError):
        service.get_session(user_id)


def test_delivery_failure_keeps_completed_result() -> None:
    service = _service(InMemoryResultRepository(fail=True))
    user_id = uuid4()
    prompt = service.start_session(user_id)
    for _ in range(19):
        prompt = service.submit_answer(user_id, str(prompt.plate_id)).next_prompt

    with pytest.raises(ResultDeliveryError):
        service.submit_answer(user_id, str(prompt.plate_id))

    session = service.get_session(user_id)
    assert session.status is SessionStatus.COMPLETED
    assert session.result is not None
    assert session.result.score_percent == 100
