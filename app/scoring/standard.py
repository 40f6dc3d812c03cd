"""Standard summed-score scoring.

Used by every single-scale questionnaire (PHQ-9, GAD-7, GHQ-12, PSS-10,
K10, WHO-5, BRS, UCLA-8, ISI, AUDIT). Each answer contributes its value
to the raw score; items listed as reverse scored contribute
``max(options) + min(options) - value`` instead.

The percentile is a plain linear transform of raw score over the maximum
possible score. It is not normative and is not clamped.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.scoring.definitions import TestDefinition
from app.scoring.interpretation import (
    Interpretation,
    generic_recommendations,
    interpret,
    severity_level,
)
from app.scoring.validator import parse_question_id


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def as_number(value: float) -> int | float:
    """Present integral floats as ints."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class StandardResult:
    """Result of a standard questionnaire."""

    raw_score: float
    max_possible_score: float
    percentile: int
    severity: str
    interpretation: Interpretation
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rawScore": as_number(self.raw_score),
            "maxPossibleScore": as_number(self.max_possible_score),
            "percentile": self.percentile,
            "severity": self.severity,
            "interpretation": self.interpretation.to_dict(),
            "recommendations": list(self.recommendations),
        }


def reverse_score(value: float, definition: TestDefinition) -> float:
    """Reverse an answer value within the definition's option domain."""
    return definition.max_option_value + definition.min_option_value - value


def get_max_score(definition: TestDefinition) -> float:
    """Maximum possible raw score: question count times top option value."""
    return definition.total_questions * definition.max_option_value


def calculate_percentile(score: float, max_score: float) -> int:
    """Simplified percentile (linear transform, no normative data)."""
    if not max_score:
        return 0
    return round_half_up(score / max_score * 100)


def calculate_raw_score(definition: TestDefinition, answers: Mapping[str, float]) -> float:
    """Sum answer values, reversing the reverse-scored items."""
    total = 0.0
    for question_id, answer in answers.items():
        if parse_question_id(question_id) in definition.reverse_scored_questions:
            answer = reverse_score(answer, definition)
        total += answer
    return total


def score_standard(
    definition: TestDefinition,
    answers: Mapping[str, float],
    language: str,
) -> StandardResult:
    """Score a validated answer set for a standard questionnaire.

    Args:
        definition: Questionnaire definition
        answers: Validated answers keyed by question ID string
        language: Requested language code

    Returns:
        StandardResult with raw score, percentile and interpretation
    """
    raw_score = calculate_raw_score(definition, answers)
    max_score = get_max_score(definition)

    interpretation = interpret(definition.interpretation, raw_score, language)

    return StandardResult(
        raw_score=raw_score,
        max_possible_score=max_score,
        percentile=calculate_percentile(raw_score, max_score),
        severity=interpretation.severity,
        interpretation=interpretation,
        recommendations=generic_recommendations(
            severity_level(interpretation), language
        ),
    )
