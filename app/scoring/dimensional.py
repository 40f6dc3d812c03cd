"""Multi-dimensional burnout scoring (MBI-SS style).

Each dimension sums the answers of its own items and is interpreted
against its own range table. The composite risk uses fixed joint
thresholds:

- high: emotional exhaustion >= 10, cynicism >= 6 and academic
  efficacy <= 6
- moderate: emotional exhaustion >= 6 or cynicism >= 4
- low: otherwise

Academic efficacy is a positive scale, so low values indicate risk.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.scoring.definitions import TestDefinition
from app.scoring.interpretation import Interpretation, interpret
from app.scoring.localization import resolve
from app.scoring.standard import as_number

EMOTIONAL_EXHAUSTION = "emotionalExhaustion"
CYNICISM = "cynicism"
ACADEMIC_EFFICACY = "academicEfficacy"

# Composite risk thresholds
HIGH_RISK_EXHAUSTION = 10
HIGH_RISK_CYNICISM = 6
HIGH_RISK_EFFICACY = 6
MODERATE_RISK_EXHAUSTION = 6
MODERATE_RISK_CYNICISM = 4

# Per-dimension recommendation triggers (strict comparisons)
EXHAUSTION_TRIGGER = 10
CYNICISM_TRIGGER = 6
EFFICACY_TRIGGER = 6

RISK_LABELS: dict[str, dict[str, str]] = {
    "en": {"low": "Low risk", "moderate": "Moderate risk", "high": "High risk"},
    "ks": {"low": "کم خطرہ", "moderate": "درمیانہ خطرہ", "high": "زیادہ خطرہ"},
}

BURNOUT_RECOMMENDATIONS: dict[str, dict[str, str]] = {
    EMOTIONAL_EXHAUSTION: {
        "en": "Practice relaxation techniques to reduce emotional exhaustion",
        "ks": "جذباتی تھکاوٹ کم کرنے کے لیے آرام کی تکنیک آزمائیں",
    },
    CYNICISM: {
        "en": "Focus on positive thinking and motivation",
        "ks": "مثبت سوچ اور حوصلہ افزائی پر توجہ دیں",
    },
    ACADEMIC_EFFICACY: {
        "en": "Set achievable academic goals and celebrate successes",
        "ks": "تعلیمی اہداف اور کامیابیاں منانا",
    },
}


@dataclass(frozen=True)
class BurnoutRisk:
    """Composite risk across all dimensions."""

    level: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"level": self.level, "label": self.label}


@dataclass(frozen=True)
class MultiDimensionalResult:
    """Result of a multi-dimensional test."""

    dimension_scores: dict[str, float]
    interpretations: dict[str, Interpretation]
    overall_risk: BurnoutRisk
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimensionScores": {
                name: as_number(score) for name, score in self.dimension_scores.items()
            },
            "interpretations": {
                name: interpretation.to_dict()
                for name, interpretation in self.interpretations.items()
            },
            "overallRisk": self.overall_risk.to_dict(),
            "recommendations": list(self.recommendations),
        }


def calculate_dimension_scores(
    definition: TestDefinition, answers: Mapping[str, float]
) -> dict[str, float]:
    """Sum the answers listed under each dimension; missing answers count zero."""
    scores: dict[str, float] = {}
    for name, dimension in definition.dimensions.items():
        scores[name] = sum(
            answers.get(str(question_id), 0) for question_id in dimension.question_ids
        )
    return scores


def calculate_burnout_risk(dimensions: Mapping[str, float], language: str) -> BurnoutRisk:
    exhaustion = dimensions.get(EMOTIONAL_EXHAUSTION, 0)
    cynicism = dimensions.get(CYNICISM, 0)
    efficacy = dimensions.get(ACADEMIC_EFFICACY, 0)

    level = "low"
    if (
        exhaustion >= HIGH_RISK_EXHAUSTION
        and cynicism >= HIGH_RISK_CYNICISM
        and efficacy <= HIGH_RISK_EFFICACY
    ):
        level = "high"
    elif exhaustion >= MODERATE_RISK_EXHAUSTION or cynicism >= MODERATE_RISK_CYNICISM:
        level = "moderate"

    labels = {lang: table[level] for lang, table in RISK_LABELS.items()}
    return BurnoutRisk(level=level, label=resolve(labels, language))


def generate_burnout_recommendations(
    dimensions: Mapping[str, float], language: str
) -> list[str]:
    triggered = []
    if dimensions.get(EMOTIONAL_EXHAUSTION, 0) > EXHAUSTION_TRIGGER:
        triggered.append(EMOTIONAL_EXHAUSTION)
    if dimensions.get(CYNICISM, 0) > CYNICISM_TRIGGER:
        triggered.append(CYNICISM)
    if ACADEMIC_EFFICACY in dimensions and dimensions[ACADEMIC_EFFICACY] < EFFICACY_TRIGGER:
        triggered.append(ACADEMIC_EFFICACY)

    return [resolve(BURNOUT_RECOMMENDATIONS[name], language) for name in triggered]


def score_multi_dimensional(
    definition: TestDefinition,
    answers: Mapping[str, float],
    language: str,
) -> MultiDimensionalResult:
    """Score a validated answer set for a multi-dimensional test."""
    dimension_scores = calculate_dimension_scores(definition, answers)

    interpretations = {
        name: interpret(definition.dimensions[name].interpretation, score, language)
        for name, score in dimension_scores.items()
    }

    return MultiDimensionalResult(
        dimension_scores=dimension_scores,
        interpretations=interpretations,
        overall_risk=calculate_burnout_risk(dimension_scores, language),
        recommendations=generate_burnout_recommendations(dimension_scores, language),
    )
