"""Tests for the scoring engine and result assembly."""

from datetime import datetime, timezone

import pytest

from app.scoring.assembler import assemble_submission
from app.scoring.categorical import CategoricalResult
from app.scoring.definitions import TestCategory
from app.scoring.dimensional import MultiDimensionalResult
from app.scoring.engine import ScoringEngine
from app.scoring.errors import AnswerCountMismatch, InvalidQuestionId, TestNotFound
from app.scoring.standard import StandardResult

PHQ9_ANSWERS = {str(i): 1 for i in range(1, 10)}


class TestEngineDispatch:
    """Tests for definition lookup and category dispatch."""

    def test_unknown_test(self, scoring_engine: ScoringEngine) -> None:
        """Test unknown identifiers fail without a result."""
        with pytest.raises(TestNotFound) as exc_info:
            scoring_engine.score("xyz", {"1": 1})

        assert exc_info.value.test_id == "xyz"

    def test_count_mismatch_before_scoring(self, scoring_engine: ScoringEngine) -> None:
        """Test a nine-question test given eight answers is rejected."""
        answers = {str(i): 1 for i in range(1, 9)}

        with pytest.raises(AnswerCountMismatch, match="Expected 9 answers, got 8"):
            scoring_engine.score("phq9", answers)

    def test_invalid_question_id(self, scoring_engine: ScoringEngine) -> None:
        """Test validator errors propagate unchanged."""
        answers = {str(i): 1 for i in range(1, 9)}
        answers["10"] = 1

        with pytest.raises(InvalidQuestionId):
            scoring_engine.score("phq9", answers)

    def test_case_insensitive_identifier(self, scoring_engine: ScoringEngine) -> None:
        """Test identifiers are lower-cased before lookup."""
        scored = scoring_engine.score("PHQ9", PHQ9_ANSWERS)

        assert scored.test_name == "phq9"
        assert scored.test_type == "PHQ-9"

    def test_dispatch_by_category(self, scoring_engine: ScoringEngine) -> None:
        """Test each category reaches its own algorithm."""
        standard = scoring_engine.score("phq9", PHQ9_ANSWERS)
        categorical = scoring_engine.score("mbti", {str(i): 3 for i in range(1, 9)})
        dimensional = scoring_engine.score("mbiss", {str(i): 2 for i in range(1, 16)})

        assert isinstance(standard.result, StandardResult)
        assert isinstance(categorical.result, CategoricalResult)
        assert isinstance(dimensional.result, MultiDimensionalResult)
        assert dimensional.category == TestCategory.MULTI_DIMENSIONAL

    def test_validate_returns_definition(self, scoring_engine: ScoringEngine) -> None:
        """Test validation alone returns the matched definition."""
        definition = scoring_engine.validate("gad7", {str(i): 0 for i in range(1, 8)})

        assert definition.test_id == "gad7"

    def test_injected_store(self, toy_engine: ScoringEngine) -> None:
        """Test the engine scores only what its store holds."""
        scored = toy_engine.score("toy", {"1": 2, "2": 1, "3": 3})

        assert scored.result.percentile == 78
        with pytest.raises(TestNotFound):
            toy_engine.score("phq9", PHQ9_ANSWERS)

    def test_repeatable(self, scoring_engine: ScoringEngine) -> None:
        """Test identical inputs produce identical scores."""
        first = scoring_engine.score("pss10", {str(i): 2 for i in range(1, 11)})
        second = scoring_engine.score("pss10", {str(i): 2 for i in range(1, 11)})

        assert first.result == second.result


class TestScoredTestPayload:
    """Tests for the serialized result with metadata."""

    def test_metadata_fields(self, scoring_engine: ScoringEngine) -> None:
        """Test common metadata is merged into the result."""
        data = scoring_engine.score("phq9", PHQ9_ANSWERS, "ks").to_dict()

        assert data["testName"] == "phq9"
        assert data["testType"] == "PHQ-9"
        assert data["language"] == "ks"
        assert data["totalQuestions"] == 9
        assert data["completedAt"].endswith("Z")
        assert data["rawScore"] == 9


class TestAssembler:
    """Tests for submission record assembly."""

    def test_adds_user_and_time(self, scoring_engine: ScoringEngine) -> None:
        """Test userId and submittedAt are attached."""
        scored = scoring_engine.score("phq9", PHQ9_ANSWERS)
        submitted_at = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        record = assemble_submission(scored, "2025010203abcdef123456", submitted_at)
        results = record.test_results

        assert results["userId"] == "2025010203abcdef123456"
        assert results["submittedAt"] == "2025-01-02T03:04:05Z"
        assert results["rawScore"] == 9
        assert record.scored is scored

    def test_default_submission_time(self, scoring_engine: ScoringEngine) -> None:
        """Test the submission time defaults to now."""
        scored = scoring_engine.score("phq9", PHQ9_ANSWERS)
        record = assemble_submission(scored, "2025010203abcdef123456")

        assert record.submitted_at.tzinfo is not None
