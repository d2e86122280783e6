"""Pydantic models for the screening HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from eye_health_tracker.domain.color_vision import ClassificationResult
from eye_health_tracker.services.sessions import PlatePrompt


class StartSessionRequest(BaseModel):
    """Request to start a color-vision screening session."""

    user_id: UUID


class AnswerRequest(BaseModel):
    """A free-text reading for the current plate."""

    answer: str = Field(max_length=200)


class PlatePromptResponse(BaseModel):
    """The plate to present next."""

    plate_id: int
    image_ref: str
    number: int
    total: int
    correct_so_far: int

    @classmethod
    def from_prompt(cls, prompt: PlatePrompt) -> "PlatePromptResponse":
        return cls(
            plate_id=prompt.plate_id,
            image_ref=prompt.image_ref,
            number=prompt.number,
            total=prompt.total,
            correct_so_far=prompt.correct_so_far,
        )


class ResultResponse(BaseModel):
    """Classification of a completed session."""

    score_percent: int
    subtype: str
    total_plates: int
    correct_count: int
    xp_earned: int | None = None

    @classmethod
    def from_result(
        cls, result: ClassificationResult, xp_earned: int | None = None
    ) -> "ResultResponse":
        return cls(
            score_percent=result.score_percent,
            subtype=result.subtype.value,
            total_plates=result.total_plates,
            correct_count=result.correct_count,
            xp_earned=xp_earned,
        )


class SessionStateResponse(BaseModel):
    """Current state of a user's session."""

    status: str
    next_plate: PlatePromptResponse | None = None
    result: ResultResponse | None = None


class AnswerResponse(BaseModel):
    """Outcome of one submitted answer."""

    plate_id: int
    correct: bool
    completed: bool
    next_plate: PlatePromptResponse | None = None
    result: ResultResponse | None = None


class StreakResponse(BaseModel):
    """Weekly streak status."""

    effective_streak: int
    is_active_this_week: bool
    current_week: str
    last_active_week: str | None
    next_deadline: datetime
    seconds_until_deadline: int
