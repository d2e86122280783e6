"""Domain models for color-vision screening."""

from dataclasses import dataclass
from enum import Enum


class Subtype(str, Enum):
    """Diagnostic label derived from the pattern of mistakes."""

    NORMAL = "normal"
    PROTAN = "protan"
    DEUTAN = "deutan"
    DEFICIENCY = "deficiency"


@dataclass(frozen=True)
class Plate:
    """A single stimulus plate with its expected readings."""

    id: int
    image_ref: str
    expected_normal: str
    expected_protan: str | None = None
    expected_deutan: str | None = None

    @property
    def is_discriminative(self) -> bool:
        """Return true when the plate can help tell protan from deutan."""
        return bool(self.expected_protan) or bool(self.expected_deutan)


@dataclass(frozen=True)
class Answer:
    """A scored response to one presented plate."""

    plate_id: int
    raw_input: str
    normalized_input: str
    expected: str
    normalized_expected: str
    is_correct: bool


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of a completed screening session."""

    score_percent: int
    subtype: Subtype
    total_plates: int
    correct_count: int
