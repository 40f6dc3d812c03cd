"""Severity interpretation and generic recommendations.

Scores are matched against an ordered list of inclusive ranges; the first
match wins. A score outside every range, or a definition without any
ranges, yields a sentinel interpretation instead of an error so that a
submission always produces a result.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from app.scoring.definitions import InterpretationRange, SeverityLevel
from app.scoring.localization import DEFAULT_LANGUAGE, resolve

OUT_OF_RANGE_LABELS = {
    "en": "Score out of range",
    "ks": "اسکور حد سے باہر",
}

NO_INTERPRETATION_LABELS = {
    "en": "No interpretation available",
    "ks": "کوئی تشریح دستیاب نہیں",
}

# Label keywords used when a range carries no explicit level
LOW_KEYWORDS = ("low", "minimal", "good")
HIGH_KEYWORDS = ("high", "severe")

GENERIC_RECOMMENDATIONS: dict[str, dict[SeverityLevel, list[str]]] = {
    "en": {
        SeverityLevel.LOW: [
            "Continue maintaining good mental health habits",
            "Regular exercise and healthy sleep",
        ],
        SeverityLevel.MODERATE: [
            "Consider stress management techniques",
            "Seek support from friends or family",
        ],
        SeverityLevel.HIGH: [
            "Consider professional counseling",
            "Practice mindfulness and relaxation techniques",
        ],
        SeverityLevel.URGENT: [
            "Please contact a mental health professional as soon as possible",
            "If you are in crisis, call your local emergency number or a crisis helpline",
        ],
    },
    "ks": {
        SeverityLevel.LOW: [
            "اچھی ذہنی صحت کی عادات برقرار رکھیں",
            "باقاعدہ ورزش اور صحت مند نیند",
        ],
        SeverityLevel.MODERATE: [
            "دباؤ کو کنٹرول کرنے کی تکنیک آزمائیں",
            "دوستوں یا خاندان سے مدد لیں",
        ],
        SeverityLevel.HIGH: [
            "پیشہ ورانہ مشورہ لینے پر غور کریں",
            "ذہن سازی اور آرام کی تکنیک آزمائیں",
        ],
    },
}


@dataclass(frozen=True)
class Interpretation:
    """Resolved interpretation of a single score."""

    severity: str
    labels: Mapping[str, str] = field(default_factory=dict)
    level: SeverityLevel | None = None
    min: float | None = None
    max: float | None = None
    matched: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "level": severity_level(self).value,
            "min": self.min,
            "max": self.max,
            "matched": self.matched,
        }


def _sentinel(labels: dict[str, str], language: str) -> Interpretation:
    return Interpretation(
        severity=resolve(labels, language),
        labels=labels,
        matched=False,
    )


def interpret(
    ranges: Sequence[InterpretationRange] | None,
    score: float,
    language: str = DEFAULT_LANGUAGE,
) -> Interpretation:
    """Map a score onto an interpretation range.

    Args:
        ranges: Ordered interpretation ranges (None if the test has none)
        score: Raw score or dimension score
        language: Requested language code

    Returns:
        Interpretation for the first matching range, or a sentinel
    """
    if not ranges:
        return _sentinel(NO_INTERPRETATION_LABELS, language)

    for score_range in ranges:
        if score_range.contains(score):
            return Interpretation(
                severity=resolve(score_range.severity, language, default=""),
                labels=score_range.severity,
                level=score_range.level,
                min=score_range.min,
                max=score_range.max,
            )

    return _sentinel(OUT_OF_RANGE_LABELS, language)


def level_from_label(label: str) -> SeverityLevel:
    """Derive a coarse severity level from label text."""
    text = label.lower()
    if any(keyword in text for keyword in LOW_KEYWORDS):
        return SeverityLevel.LOW
    if any(keyword in text for keyword in HIGH_KEYWORDS):
        return SeverityLevel.HIGH
    return SeverityLevel.MODERATE


def severity_level(interpretation: Interpretation | None) -> SeverityLevel:
    """Get the severity level of an interpretation.

    An explicit ``level`` on the range wins. Otherwise the English label (or
    the first available label) is keyword-matched.
    """
    if interpretation is None:
        return SeverityLevel.MODERATE
    if interpretation.level is not None:
        return interpretation.level

    label = resolve(interpretation.labels, DEFAULT_LANGUAGE)
    if label is None and interpretation.labels:
        label = next(iter(interpretation.labels.values()))
    if not label:
        return SeverityLevel.MODERATE
    return level_from_label(label)


def generic_recommendations(level: SeverityLevel, language: str) -> list[str]:
    """Short list of generic recommendations for a severity level."""
    table = resolve(GENERIC_RECOMMENDATIONS, language, default={})
    recommendations = table.get(level)
    if recommendations is None:
        recommendations = GENERIC_RECOMMENDATIONS[DEFAULT_LANGUAGE].get(level, [])
    return list(recommendations)
