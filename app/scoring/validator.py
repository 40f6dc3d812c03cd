"""Answer-set validation against a questionnaire definition."""

import math
from numbers import Real
from typing import Any, Mapping

from app.scoring.definitions import TestDefinition
from app.scoring.errors import (
    AnswerCountMismatch,
    InvalidAnswerValue,
    InvalidQuestionId,
)


def parse_question_id(question_id: Any) -> int | None:
    """Parse an answer key into an integer question ID, or None."""
    if isinstance(question_id, bool):
        return None
    if isinstance(question_id, int):
        return question_id
    try:
        return int(str(question_id).strip())
    except ValueError:
        return None


# Upper bound on a single answer; keeps every total finite
MAX_ANSWER_VALUE = 1_000_000


def is_valid_answer_value(value: Any) -> bool:
    """Answers are non-negative real numbers up to MAX_ANSWER_VALUE; booleans don't count."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        return math.isfinite(value) and 0 <= value <= MAX_ANSWER_VALUE
    except OverflowError:
        return False


def validate_answers(definition: TestDefinition, answers: Mapping[str, Any]) -> None:
    """Check an answer set against a definition's shape.

    Args:
        definition: Questionnaire definition
        answers: Mapping of question ID string to numeric response

    Raises:
        AnswerCountMismatch: Wrong number of answers
        InvalidQuestionId: Key is not an integer in [1, total_questions]
        InvalidAnswerValue: Value is not a number in [0, MAX_ANSWER_VALUE]
    """
    expected = definition.total_questions
    if len(answers) != expected:
        raise AnswerCountMismatch(expected, len(answers))

    for question_id, value in answers.items():
        question_num = parse_question_id(question_id)
        if question_num is None or not 1 <= question_num <= expected:
            raise InvalidQuestionId(str(question_id))

        if not is_valid_answer_value(value):
            raise InvalidAnswerValue(str(question_id), value)
