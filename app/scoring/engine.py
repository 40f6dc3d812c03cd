"""Scoring engine.

Looks up the questionnaire definition, validates the answer set and
dispatches to the scoring algorithm named by the definition's category.
The engine holds no mutable state: it reads from an injected, read-only
definition store and returns a fresh result per call.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Union

from app.scoring.categorical import CategoricalResult, score_categorical
from app.scoring.definitions import TestCategory, TestDefinition
from app.scoring.dimensional import MultiDimensionalResult, score_multi_dimensional
from app.scoring.standard import StandardResult, score_standard
from app.scoring.store import TestDefinitionStore
from app.scoring.validator import validate_answers
from app.utils.time import format_datetime, utc_now

logger = logging.getLogger(__name__)

CategoryResult = Union[StandardResult, CategoricalResult, MultiDimensionalResult]

SCORERS: dict[TestCategory, Callable[[TestDefinition, Mapping[str, float], str], Any]] = {
    TestCategory.STANDARD: score_standard,
    TestCategory.CATEGORICAL: score_categorical,
    TestCategory.MULTI_DIMENSIONAL: score_multi_dimensional,
}


@dataclass(frozen=True)
class ScoredTest:
    """Category result enriched with common metadata."""

    test_name: str
    test_type: str
    category: TestCategory
    language: str
    completed_at: datetime
    total_questions: int
    result: CategoryResult

    def to_dict(self) -> dict[str, Any]:
        data = self.result.to_dict()
        data.update(
            {
                "testName": self.test_name,
                "testType": self.test_type,
                "language": self.language,
                "completedAt": format_datetime(self.completed_at),
                "totalQuestions": self.total_questions,
            }
        )
        return data


class ScoringEngine:
    """Scores answer sets against questionnaire definitions."""

    def __init__(self, store: TestDefinitionStore) -> None:
        self.store = store

    def get_definition(self, test_id: str) -> TestDefinition:
        """Get a definition by case-insensitive identifier.

        Raises:
            TestNotFound: If the identifier is unknown
        """
        return self.store.require(test_id)

    def validate(self, test_id: str, answers: Mapping[str, Any]) -> TestDefinition:
        """Validate answers without scoring them.

        Raises:
            TestNotFound: If the identifier is unknown
            ValidationError: If the answer set is malformed
        """
        definition = self.get_definition(test_id)
        validate_answers(definition, answers)
        return definition

    def score(
        self,
        test_id: str,
        answers: Mapping[str, Any],
        language: str = "en",
    ) -> ScoredTest:
        """Score an answer set.

        Args:
            test_id: Questionnaire identifier (case-insensitive)
            answers: Mapping of question ID string to numeric response
            language: Requested language code

        Returns:
            ScoredTest with category result and metadata

        Raises:
            TestNotFound: If the identifier is unknown
            ValidationError: If the answer set is malformed
        """
        definition = self.validate(test_id, answers)

        scorer = SCORERS[definition.category]
        result = scorer(definition, answers, language)

        logger.debug(
            f"Scored {definition.test_id} ({definition.category.value}) "
            f"with {definition.total_questions} answers"
        )

        return ScoredTest(
            test_name=definition.test_id,
            test_type=definition.test_type,
            category=definition.category,
            language=language,
            completed_at=utc_now(),
            total_questions=definition.total_questions,
            result=result,
        )
