"""Immutable questionnaire definitions.

A :class:`TestDefinition` is built once per questionnaire file at startup
and shared read-only by every scoring call.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

# Max option value assumed when a definition carries no option set
DEFAULT_MAX_OPTION_VALUE = 4


class TestCategory(str, Enum):
    """Scoring algorithm family of a questionnaire."""

    __test__ = False

    STANDARD = "standard"
    CATEGORICAL = "categorical"
    MULTI_DIMENSIONAL = "multi_dimensional"


class SeverityLevel(str, Enum):
    """Coarse severity bucket used to pick generic recommendations."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    URGENT = "urgent"


@dataclass(frozen=True)
class Question:
    """Single questionnaire item."""

    id: int
    text: Mapping[str, str] = field(default_factory=dict)
    trait: str | None = None  # Axis tag for categorical tests, e.g. "I/E"


@dataclass(frozen=True)
class AnswerOption:
    """Selectable answer with its numeric value."""

    value: float
    label: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class InterpretationRange:
    """Inclusive score range mapped to a localized severity label."""

    min: float
    max: float
    severity: Mapping[str, str]
    level: SeverityLevel | None = None

    def contains(self, score: float) -> bool:
        return self.min <= score <= self.max


@dataclass(frozen=True)
class Dimension:
    """Sub-scale of a multi-dimensional test."""

    name: str
    question_ids: tuple[int, ...]
    interpretation: tuple[InterpretationRange, ...] | None = None


@dataclass(frozen=True)
class TestDefinition:
    """Complete, immutable description of one questionnaire."""

    __test__ = False

    test_id: str
    test_type: str
    category: TestCategory
    questions: tuple[Question, ...]
    title: Mapping[str, str] = field(default_factory=dict)
    description: Mapping[str, str] = field(default_factory=dict)
    options: tuple[AnswerOption, ...] = ()
    reverse_scored_questions: frozenset[int] = frozenset()
    interpretation: tuple[InterpretationRange, ...] | None = None
    dimensions: Mapping[str, Dimension] = field(
        default_factory=lambda: MappingProxyType({})
    )
    bare: bool = False  # Source file was a plain list of questions

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def option_values(self) -> list[float]:
        return [option.value for option in self.options]

    @property
    def max_option_value(self) -> float:
        values = self.option_values
        return max(values) if values else DEFAULT_MAX_OPTION_VALUE

    @property
    def min_option_value(self) -> float:
        values = self.option_values
        return min(values) if values else 0

    @property
    def has_reversed_items(self) -> bool:
        return bool(self.reverse_scored_questions)
