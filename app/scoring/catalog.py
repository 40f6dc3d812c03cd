"""Questionnaire catalogue metadata for the public API."""

import math
from typing import Any

from app.scoring.definitions import TestDefinition
from app.scoring.localization import resolve
from app.scoring.standard import as_number

# Estimated answering time per question, in minutes
MINUTES_PER_QUESTION = 0.5
CATALOGUE_CATEGORY = "Mental Health"


def estimated_minutes(definition: TestDefinition) -> int:
    return math.ceil(definition.total_questions * MINUTES_PER_QUESTION)


def describe_test(definition: TestDefinition, language: str) -> dict[str, Any]:
    """Describe a questionnaire for the catalogue listing."""
    minutes = estimated_minutes(definition)
    return {
        "testName": definition.test_id,
        "testType": definition.test_type,
        "title": resolve(definition.title, language, default=definition.test_type),
        "description": resolve(definition.description, language, default=""),
        "scoringCategory": definition.category.value,
        "totalQuestions": definition.total_questions,
        "hasReversedItems": definition.has_reversed_items,
        "estimatedTimeMinutes": minutes,
        "estimatedTime": f"{minutes}-{minutes + 2} minutes",
        "category": CATALOGUE_CATEGORY,
    }


def questions_payload(definition: TestDefinition, language: str) -> dict[str, Any]:
    """Localized question list and answer options for rendering a test."""
    return {
        "testName": definition.test_id,
        "testType": definition.test_type,
        "title": resolve(definition.title, language, default=definition.test_type),
        "totalQuestions": definition.total_questions,
        "questions": [
            {
                "id": question.id,
                "text": resolve(question.text, language, default=""),
                **({"trait": question.trait} if question.trait else {}),
            }
            for question in definition.questions
        ],
        "options": [
            {
                "value": as_number(option.value),
                "label": resolve(option.label, language, default=""),
            }
            for option in definition.options
        ],
    }
