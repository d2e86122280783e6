"""Application service driving per-user screening sessions."""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from eye_health_tracker.domain.color_vision import Answer, ClassificationResult, Plate
from eye_health_tracker.domain.results import ColorVisionResultRecord
from eye_health_tracker.services.errors import BlankAnswerError, SessionNotFoundError
from eye_health_tracker.services.plates import PlateCatalog
from eye_health_tracker.services.results import ResultService
from eye_health_tracker.services.screening import ColorVisionSession, SessionStatus
from eye_health_tracker.services.session_store import SessionStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatePrompt:
    """The plate a user should answer next."""

    plate_id: int
    image_ref: str
    number: int
    total: int
    correct_so_far: int


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of submitting one answer."""

    answer: Answer
    next_prompt: PlatePrompt | None
    result: ClassificationResult | None = None
    record: ColorVisionResultRecord | None = None


@dataclass
class ScreeningSessionService:
    """Keeps one screening session per user and emits results on completion."""

    catalog: PlateCatalog
    store: SessionStore
    result_service: ResultService
    session_ttl_seconds: int = 3600
    rng_factory: Callable[[], random.Random] = random.Random

    def start_session(self, user_id: UUID) -> PlatePrompt:
        """Start a fresh attempt, discarding any previous one."""
        session = ColorVisionSession(catalog=self.catalog, rng=self.rng_factory())
        session.start()
        if self.store.discard(user_id):
            _logger.info("Discarded previous session for %s", user_id)
        self.store.put(user_id, session, ttl_seconds=self.session_ttl_seconds)
        return _prompt(session, session.queue[0])

    def get_session(self, user_id: UUID) -> ColorVisionSession:
        """Return the user's current session."""
        session = self.store.get(user_id)
        if session is None:
            raise SessionNotFoundError(f"No screening session for {user_id}")
        return session

    def current_prompt(self, user_id: UUID) -> PlatePrompt | None:
        """Return the next plate, or None once the session is complete."""
        session = self.get_session(user_id)
        plate = session.current_plate
        return _prompt(session, plate) if plate else None

    def submit_answer(self, user_id: UUID, raw_input: str) -> SubmissionOutcome:
        """Score an answer and emit the result when the session completes."""
        if not raw_input.strip():
            raise BlankAnswerError("Answer must not be blank")
        session = self.get_session(user_id)
        answer = session.submit_answer(raw_input)

        if session.status is not SessionStatus.COMPLETED:
            self.store.put(user_id, session, ttl_seconds=self.session_ttl_seconds)
            plate = session.current_plate
            return SubmissionOutcome(
                answer=answer,
                next_prompt=_prompt(session, plate) if plate else None,
            )

        result = session.result
        if result is None:
            raise RuntimeError("Completed session has no result")
        record = self.result_service.emit(user_id, result, session.answers)
        return SubmissionOutcome(
            answer=answer, next_prompt=None, result=result, record=record
        )

    def abandon(self, user_id: UUID) -> bool:
        """Drop an unfinished session without emitting anything."""
        return self.store.discard(user_id)


def _prompt(session: ColorVisionSession, plate: Plate) -> PlatePrompt:
    return PlatePrompt(
        plate_id=plate.id,
        image_ref=plate.image_ref,
        number=session.position + 1,
        total=len(session.queue),
        correct_so_far=sum(1 for answer in session.answers if answer.is_correct),
    )
