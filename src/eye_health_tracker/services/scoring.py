"""Scoring and subtype classification for completed sessions."""

from collections.abc import Mapping, Sequence

from eye_health_tracker.domain.color_vision import (
    Answer,
    ClassificationResult,
    Plate,
    Subtype,
)

MIN_MISTAKES_FOR_ANALYSIS = 3
MIN_SUBTYPE_MATCHES = 3
MIN_MISTAKES_FOR_DEFICIENCY = 5


def round_half_up(numerator: int, denominator: int) -> int:
    """Divide non-negative integers, rounding halves away from zero."""
    return (2 * numerator + denominator) // (2 * denominator)


def score_percent(correct_count: int, total: int) -> int:
    """Return the rounded percentage of correct answers."""
    return round_half_up(100 * correct_count, total)


def classify(
    answers: Sequence[Answer], plate_by_id: Mapping[int, Plate]
) -> ClassificationResult:
    """Derive the score and subtype from a full set of answers.

    Callers guarantee at least one answer and that every plate id resolves.
    """
    total = len(answers)
    correct_count = sum(1 for answer in answers if answer.is_correct)
    mistakes = [answer for answer in answers if not answer.is_correct]
    return ClassificationResult(
        score_percent=score_percent(correct_count, total),
        subtype=_classify_mistakes(mistakes, plate_by_id),
        total_plates=total,
        correct_count=correct_count,
    )


def _classify_mistakes(
    mistakes: list[Answer], plate_by_id: Mapping[int, Plate]
) -> Subtype:
    if len(mistakes) < MIN_MISTAKES_FOR_ANALYSIS:
        return Subtype.NORMAL

    plates = [plate_by_id[mistake.plate_id] for mistake in mistakes]
    protan_matches = sum(1 for plate in plates if plate.expected_protan)
    deutan_matches = sum(1 for plate in plates if plate.expected_deutan)

    # Equal counts fall through to the deutan rule.
    if protan_matches >= MIN_SUBTYPE_MATCHES and protan_matches > deutan_matches:
        return Subtype.PROTAN
    if deutan_matches >= MIN_SUBTYPE_MATCHES:
        return Subtype.DEUTAN
    if len(mistakes) >= MIN_MISTAKES_FOR_DEFICIENCY:
        return Subtype.DEFICIENCY
    return Subtype.NORMAL
