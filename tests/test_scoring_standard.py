"""Unit tests for standard summed-score scoring."""

import pytest

from app.scoring.definitions import TestDefinition
from app.scoring.engine import ScoringEngine
from app.scoring.errors import InvalidAnswerValue
from app.scoring.standard import (
    StandardResult,
    as_number,
    calculate_percentile,
    calculate_raw_score,
    get_max_score,
    reverse_score,
    round_half_up,
    score_standard,
)
from app.scoring.store import TestDefinitionStore
from app.scoring.validator import MAX_ANSWER_VALUE


class TestToyScenario:
    """End-to-end scoring of the three-question toy test."""

    def test_reverse_scored_total(self, toy_definition: TestDefinition) -> None:
        """Test raw score, max score, percentile and severity."""
        result = score_standard(toy_definition, {"1": 2, "2": 1, "3": 3}, "en")

        assert isinstance(result, StandardResult)
        assert result.raw_score == 7  # 2 + (3 + 0 - 1) + 3
        assert result.max_possible_score == 9
        assert result.percentile == 78
        assert result.severity == "low"
        assert result.interpretation.matched is True

    def test_serialized_shape(self, toy_definition: TestDefinition) -> None:
        """Test the camelCase result payload."""
        data = score_standard(toy_definition, {"1": 2, "2": 1, "3": 3}, "en").to_dict()

        assert data["rawScore"] == 7
        assert isinstance(data["rawScore"], int)
        assert data["maxPossibleScore"] == 9
        assert data["percentile"] == 78
        assert data["severity"] == "low"
        assert data["interpretation"]["level"] == "low"
        assert data["recommendations"]

    def test_answer_order_does_not_matter(self, toy_definition: TestDefinition) -> None:
        """Test that key order of the answer set is irrelevant."""
        forward = calculate_raw_score(toy_definition, {"1": 2, "2": 1, "3": 3})
        backward = calculate_raw_score(toy_definition, {"3": 3, "2": 1, "1": 2})

        assert forward == backward


class TestReverseScoring:
    """Tests for reverse-scored items."""

    @pytest.mark.parametrize("value", [0, 1, 2, 3])
    def test_reverse_is_involutive(
        self, toy_definition: TestDefinition, value: int
    ) -> None:
        """Test reversing twice restores the original value."""
        assert reverse_score(reverse_score(value, toy_definition), toy_definition) == value

    def test_reverse_uses_option_bounds(self, store: TestDefinitionStore) -> None:
        """Test reversal spans min to max option, not zero to max."""
        brs = store.require("brs")  # options 1-5

        assert reverse_score(1, brs) == 5
        assert reverse_score(5, brs) == 1
        assert reverse_score(3, brs) == 3

    def test_reversed_items_stay_within_bounds(self, store: TestDefinitionStore) -> None:
        """Test raw score never exceeds the maximum possible score."""
        pss10 = store.require("pss10")
        answers = {str(i): 4 for i in range(1, 11)}

        raw = calculate_raw_score(pss10, answers)

        assert raw == 24  # six direct items at 4, four reversed at 0
        assert raw <= get_max_score(pss10)


class TestPercentile:
    """Tests for the simplified percentile."""

    def test_round_half_up(self) -> None:
        """Test halves are rounded up."""
        assert round_half_up(2.5) == 3
        assert round_half_up(77.777) == 78
        assert round_half_up(0.49) == 0

    def test_zero_max_score(self) -> None:
        """Test a zero maximum yields percentile 0 instead of failing."""
        assert calculate_percentile(5, 0) == 0

    def test_not_clamped(self) -> None:
        """Test scores above the maximum are reported as-is."""
        assert calculate_percentile(90, 27) == 333

    def test_full_score(self) -> None:
        """Test maximum score maps to 100."""
        assert calculate_percentile(27, 27) == 100


class TestBundledStandardTests:
    """Scoring the bundled single-scale questionnaires."""

    @pytest.mark.parametrize("value", [10**400, 1e308])
    def test_huge_answers_rejected(self, scoring_engine: ScoringEngine, value: float) -> None:
        """Test answers whose total would overflow are rejected before scoring."""
        answers = {str(i): value for i in range(1, 10)}

        with pytest.raises(InvalidAnswerValue):
            scoring_engine.score("phq9", answers, "en")

    def test_answers_at_cap_score_finitely(self, scoring_engine: ScoringEngine) -> None:
        """Test the largest accepted answers still produce a result."""
        answers = {str(i): MAX_ANSWER_VALUE for i in range(1, 10)}
        result = scoring_engine.score("phq9", answers, "en").result

        assert result.raw_score == 9 * MAX_ANSWER_VALUE
        assert result.percentile == 33333333
        assert result.interpretation.matched is False

    def test_phq9_maximum_is_urgent(self, scoring_engine: ScoringEngine) -> None:
        """Test all-maximum PHQ-9 answers map to the urgent band."""
        answers = {str(i): 3 for i in range(1, 10)}
        scored = scoring_engine.score("phq9", answers, "en")

        result = scored.result
        assert result.raw_score == 27
        assert result.max_possible_score == 27
        assert result.percentile == 100
        assert result.severity == "Severe depression"
        assert "Please contact a mental health professional as soon as possible" in (
            result.recommendations
        )

    def test_phq9_localized_severity(self, scoring_engine: ScoringEngine) -> None:
        """Test severity labels follow the requested language."""
        answers = {str(i): 0 for i in range(1, 10)}
        result = scoring_engine.score("phq9", answers, "ks").result

        assert result.severity == "کم سے کم افسردگی"

    def test_unknown_language_falls_back_to_english(
        self, scoring_engine: ScoringEngine
    ) -> None:
        """Test unsupported languages resolve to English content."""
        answers = {str(i): 1 for i in range(1, 8)}
        result = scoring_engine.score("gad7", answers, "fr").result

        assert result.severity == "Mild anxiety"

    def test_positive_scale_uses_explicit_level(
        self, scoring_engine: ScoringEngine
    ) -> None:
        """Test low resilience is treated as high concern."""
        # Direct items at 1, reversed items at 5: total 6
        answers = {"1": 1, "2": 5, "3": 1, "4": 5, "5": 1, "6": 5}
        result = scoring_engine.score("brs", answers, "en").result

        assert result.raw_score == 6
        assert result.severity == "Low resilience"
        assert result.interpretation.to_dict()["level"] == "high"

    @pytest.mark.parametrize(
        "test_id", ["phq9", "gad7", "ghq12", "pss10", "k10", "who5", "brs", "ucla", "isi", "audit"]
    )
    def test_extreme_answers_are_interpreted(
        self, store: TestDefinitionStore, test_id: str
    ) -> None:
        """Test all-minimum and all-maximum answers land inside a range."""
        definition = store.require(test_id)
        for value in (definition.min_option_value, definition.max_option_value):
            answers = {str(i): value for i in range(1, definition.total_questions + 1)}
            result = score_standard(definition, answers, "en")
            assert result.interpretation.matched, f"{test_id} unmatched at {value}"


def test_as_number() -> None:
    """Test integral floats are presented as ints."""
    assert as_number(7.0) == 7
    assert isinstance(as_number(7.0), int)
    assert as_number(7.5) == 7.5
