"""Narrative report generation using LLMs."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from eye_health_tracker.domain.reports import ScreeningReport
from eye_health_tracker.domain.results import StoredResult
from eye_health_tracker.services.results import ResultService

_LIST_OF_STRINGS: dict[str, object] = {"type": "array", "items": {"type": "string"}}

REPORT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "analysis": {"type": "string"},
        "recommendations": _LIST_OF_STRINGS,
        "exercises": _LIST_OF_STRINGS,
        "nutrition": _LIST_OF_STRINGS,
        "urgency_level": {"type": "string", "enum": ["low", "moderate", "high"]},
    },
    "required": [
        "analysis",
        "recommendations",
        "exercises",
        "nutrition",
        "urgency_level",
    ],
    "additionalProperties": False,
}

FALLBACK_ANALYSIS = (
    "AI report generation is currently unavailable. Please try again later "
    "for a personalized analysis and recommendations."
)

_MIN_TREND_POINTS = 2

_logger = logging.getLogger(__name__)


class ReportClient(Protocol):
    """Interface for LLM report generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured report data."""


@dataclass
class ReportService:
    """Service that builds report prompts from stored results."""

    client: ReportClient
    result_service: ResultService
    model: str
    reasoning_effort: str | None
    store: bool
    history_limit: int = 10

    async def generate(self, user_id: UUID) -> ScreeningReport:
        """Generate a report for the user's recent color-vision results."""
        history = self.result_service.list_recent(user_id, limit=self.history_limit)
        if not history:
            return ScreeningReport(
                analysis="No color vision results yet. Complete a test first.",
                urgency_level="low",
            )
        prompt = build_report_prompt(history)
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                schema=REPORT_SCHEMA,
                prompt=prompt,
            )
            return ScreeningReport.model_validate(raw)
        except Exception:
            _logger.exception("Report generation failed", extra={"user_id": user_id})
            return ScreeningReport(analysis=FALLBACK_ANALYSIS)


def build_report_prompt(history: list[StoredResult]) -> str:
    """Build the report prompt from results ordered newest first."""
    latest = history[0]
    details = latest.details
    lines = [
        "You are a digital eye-health assistant. Write a short, supportive "
        "report about the user's color vision screening. This is a screening "
        "aid, not a diagnosis; recommend a professional exam when warranted.",
        "",
        "Latest result:",
        f"- Score: {latest.score if latest.score is not None else 0}%",
        f"- Pattern: {details.get('subtype', 'unknown')}",
        f"- Plates answered: {details.get('totalPlates', '?')}, "
        f"correct: {details.get('correctCount', '?')}",
        f"- Date: {latest.created_at.date().isoformat()}",
        "",
        f"History: {_describe_trend(history)}",
    ]
    return "\n".join(lines)


def _describe_trend(history: list[StoredResult]) -> str:
    scores = [result.score or 0 for result in history]
    if len(scores) < _MIN_TREND_POINTS:
        return "Insufficient historical data"
    average = sum(scores) / len(scores)
    trend = scores[0] - scores[1]
    return f"{len(scores)} tests, avg {average:.1f}%, trend: {trend:+d}%"
