"""Exceptions raised by the scoring subsystem."""


class ScoringError(Exception):
    """Base exception for scoring errors."""

    pass


class TestNotFound(ScoringError):
    """Raised when no questionnaire definition exists for an identifier."""

    __test__ = False

    def __init__(self, test_id: str) -> None:
        self.test_id = test_id
        super().__init__(f"Test {test_id} not found")


class ValidationError(ScoringError):
    """Base class for malformed answer sets."""

    pass


class AnswerCountMismatch(ValidationError):
    """Raised when the number of answers differs from the question count."""

    def __init__(self, expected: int, provided: int) -> None:
        self.expected = expected
        self.provided = provided
        super().__init__(f"Expected {expected} answers, got {provided}")


class InvalidQuestionId(ValidationError):
    """Raised when an answer key is not a question ID of the test."""

    def __init__(self, question_id: str) -> None:
        self.question_id = question_id
        super().__init__(f"Invalid question ID: {question_id}")


class InvalidAnswerValue(ValidationError):
    """Raised when an answer value is not a number in the accepted range."""

    def __init__(self, question_id: str, value: object) -> None:
        self.question_id = question_id
        self.value = value
        super().__init__(
            f"Invalid answer value for question {question_id}: {value!r}"
        )


class DefinitionError(ScoringError):
    """Raised when a questionnaire file cannot be turned into a definition."""

    pass
