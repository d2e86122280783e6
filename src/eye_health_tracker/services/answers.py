"""Free-text answer normalization and scoring."""

import re

from eye_health_tracker.domain.color_vision import Answer, Plate

NOTHING = "nothing"

_NOTHING_SYNONYMS = frozenset(
    {"nothing", "none", "no", "n/a", "na", "blank", "empty", "0"}
)
_DISALLOWED_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_answer(text: str) -> str:
    """Return the canonical token used to compare two answers."""
    normalized = text.lower().strip()
    if normalized in _NOTHING_SYNONYMS:
        return NOTHING
    normalized = _DISALLOWED_CHARS.sub("", normalized)
    normalized = _WHITESPACE_RUN.sub(" ", normalized).strip()
    # Stripping punctuation can expose a synonym ("N/A." -> "na").
    if normalized in _NOTHING_SYNONYMS:
        return NOTHING
    return normalized


def score_answer(plate: Plate, raw_input: str) -> Answer:
    """Score a raw response against the plate's normal reading."""
    normalized_input = normalize_answer(raw_input)
    normalized_expected = normalize_answer(plate.expected_normal)
    return Answer(
        plate_id=plate.id,
        raw_input=raw_input,
        normalized_input=normalized_input,
        expected=plate.expected_normal,
        normalized_expected=normalized_expected,
        is_correct=normalized_input == normalized_expected,
    )
