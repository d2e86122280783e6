"""Models for AI narrative reports."""

from typing import Literal

from pydantic import BaseModel, Field


class ScreeningReport(BaseModel):
    """Structured narrative report for a user's screening history."""

    analysis: str
    recommendations: list[str] = Field(default_factory=list)
    exercises: list[str] = Field(default_factory=list)
    nutrition: list[str] = Field(default_factory=list)
    urgency_level: Literal["low", "moderate", "high"] = "moderate"
