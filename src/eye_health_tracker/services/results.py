"""Result emission to persistence, XP and streak collaborators."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from eye_health_tracker.domain.color_vision import Answer, ClassificationResult
from eye_health_tracker.domain.results import ColorVisionResultRecord, StoredResult
from eye_health_tracker.services.errors import ResultDeliveryError
from eye_health_tracker.services.scoring import round_half_up
from eye_health_tracker.services.streaks import StreakService

COLOR_VISION_TEST_TYPE = "color_vision"
DEFAULT_BASE_XP = 55

_logger = logging.getLogger(__name__)


class ResultRepository(Protocol):
    """Persistence interface for completed test results."""

    def create_result(self, user_id: UUID, record: ColorVisionResultRecord) -> UUID:
        """Store a result and return its id."""

    def list_recent_results(
        self, user_id: UUID, test_type: str, limit: int
    ) -> list[StoredResult]:
        """Return the most recent results of a test type, newest first."""


class XpRepository(Protocol):
    """Interface for applying XP deltas to a user."""

    def add_xp(self, user_id: UUID, xp_delta: int) -> None:
        """Apply an XP delta."""


def compute_xp_delta(score_percent: int, base_xp: int) -> int:
    """Return the XP earned for a score."""
    return round_half_up(base_xp * score_percent, 100)


def serialize_answer(answer: Answer) -> dict[str, object]:
    """Serialize an answer for the result details payload."""
    return {
        "plateId": answer.plate_id,
        "answer": answer.raw_input,
        "normalizedAnswer": answer.normalized_input,
        "expected": answer.expected,
        "normalizedExpected": answer.normalized_expected,
        "correct": answer.is_correct,
    }


@dataclass
class ResultService:
    """Packages completed sessions for downstream collaborators."""

    result_repository: ResultRepository
    xp_repository: XpRepository
    streak_service: StreakService
    base_xp: int = DEFAULT_BASE_XP

    def build_record(
        self, result: ClassificationResult, answers: Sequence[Answer]
    ) -> ColorVisionResultRecord:
        """Build the persisted record for a classified session."""
        return ColorVisionResultRecord(
            test_type=COLOR_VISION_TEST_TYPE,
            score_percent=result.score_percent,
            xp_earned=compute_xp_delta(result.score_percent, self.base_xp),
            details={
                "answers": [serialize_answer(answer) for answer in answers],
                "subtype": result.subtype.value,
                "totalPlates": result.total_plates,
                "correctCount": result.correct_count,
            },
        )

    def emit(
        self,
        user_id: UUID,
        result: ClassificationResult,
        answers: Sequence[Answer],
        completed_at: datetime | None = None,
    ) -> ColorVisionResultRecord:
        """Persist the result, forward XP and report the completion."""
        record = self.build_record(result, answers)
        finished = completed_at or datetime.now(tz=UTC)

        try:
            self.result_repository.create_result(user_id, record)
        except Exception as exc:
            _logger.exception("Failed to persist result", extra={"user_id": user_id})
            raise ResultDeliveryError("persist") from exc

        try:
            self.xp_repository.add_xp(user_id, record.xp_earned)
        except Exception as exc:
            _logger.exception("Failed to apply XP", extra={"user_id": user_id})
            raise ResultDeliveryError("xp") from exc

        try:
            self.streak_service.record_completion(user_id, finished)
        except Exception as exc:
            _logger.exception("Failed to update streak", extra={"user_id": user_id})
            raise ResultDeliveryError("streak") from exc

        _logger.info(
            "Result emitted for %s: score=%s xp=%s",
            user_id,
            record.score_percent,
            record.xp_earned,
        )
        return record

    def list_recent(self, user_id: UUID, limit: int = 10) -> list[StoredResult]:
        """Return recent color-vision results for a user."""
        return self.result_repository.list_recent_results(
            user_id, COLOR_VISION_TEST_TYPE, limit
        )
