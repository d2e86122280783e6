"""Adaptive color-vision screening session."""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from eye_health_tracker.domain.color_vision import Answer, ClassificationResult, Plate
from eye_health_tracker.services.answers import score_answer
from eye_health_tracker.services.errors import InvalidSessionCallError
from eye_health_tracker.services.plates import PlateCatalog
from eye_health_tracker.services.scoring import classify

INITIAL_PLATE_COUNT = 20
MAX_PLATE_COUNT = 32
FOLLOW_UP_PLATE_COUNT = 2

_logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    """Lifecycle of a screening session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class ColorVisionSession:
    """State machine for one screening attempt.

    The plate queue is a bounded work-list: an incorrect answer may append
    follow-up plates while the position advances through it, and completion
    is checked against the queue length after every extension.
    """

    catalog: PlateCatalog
    rng: random.Random = field(default_factory=random.Random)
    initial_count: int = INITIAL_PLATE_COUNT
    max_plates: int = MAX_PLATE_COUNT
    follow_up_count: int = FOLLOW_UP_PLATE_COUNT
    status: SessionStatus = SessionStatus.NOT_STARTED
    queue: list[Plate] = field(default_factory=list)
    answers: list[Answer] = field(default_factory=list)
    result: ClassificationResult | None = None

    @property
    def position(self) -> int:
        """Index of the plate awaiting an answer."""
        return len(self.answers)

    @property
    def current_plate(self) -> Plate | None:
        """Return the plate awaiting an answer, if any."""
        if self.status is not SessionStatus.IN_PROGRESS:
            return None
        return self.queue[self.position]

    def start(self) -> Plate:
        """Draw the initial sample and return the first plate."""
        if self.status is not SessionStatus.NOT_STARTED:
            raise InvalidSessionCallError(
                f"Cannot start a session that is {self.status.value}"
            )
        plates = self.catalog.sample_initial(self.initial_count, self.rng)
        self.queue = list(plates)
        self.answers = []
        self.status = SessionStatus.IN_PROGRESS
        _logger.info("Color vision session started with %s plates", len(self.queue))
        return self.queue[0]

    def submit_answer(self, raw_input: str) -> Answer:
        """Score the answer for the current plate and advance the session."""
        if self.status is not SessionStatus.IN_PROGRESS:
            raise InvalidSessionCallError(
                f"Cannot answer a session that is {self.status.value}"
            )
        if self.position >= len(self.queue):
            raise InvalidSessionCallError("No plate is awaiting an answer")

        plate = self.queue[self.position]
        answer = score_answer(plate, raw_input)
        self.answers.append(answer)

        if not answer.is_correct and len(self.queue) < self.max_plates:
            self._extend_queue()

        if self.position == len(self.queue):
            self._complete()
        return answer

    def _extend_queue(self) -> None:
        requested = min(self.follow_up_count, self.max_plates - len(self.queue))
        follow_ups = self.catalog.sample_follow_up(
            exclude_ids={plate.id for plate in self.queue},
            max_count=requested,
        )
        if follow_ups:
            self.queue.extend(follow_ups)
            _logger.info(
                "Added %s follow-up plates (queue=%s)", len(follow_ups), len(self.queue)
            )

    def _complete(self) -> None:
        self.result = classify(self.answers, self.catalog.plate_by_id)
        self.status = SessionStatus.COMPLETED
        _logger.info(
            "Color vision session completed: score=%s subtype=%s plates=%s",
            self.result.score_percent,
            self.result.subtype.value,
            self.result.total_plates,
        )
