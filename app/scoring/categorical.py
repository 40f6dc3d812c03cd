"""Four-axis personality type scoring (16-personality / MBTI style).

Items are answered on a fixed 1-5 agreement scale and tagged with one of
four axes. For an item at odd ordinal position the answer goes to the
axis's first-named pole and its complement (``6 - answer``) to the second
pole; even positions are mirrored. The type code takes, per axis, the
pole with the strictly higher tally, so ties go to the second-named pole.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.scoring.definitions import TestDefinition
from app.scoring.localization import resolve
from app.scoring.standard import as_number, round_half_up

# Axis tag -> (first pole, second pole)
AXES: dict[str, tuple[str, str]] = {
    "I/E": ("I", "E"),
    "S/N": ("S", "N"),
    "T/F": ("T", "F"),
    "J/P": ("J", "P"),
}

# Top + bottom of the 1-5 answer scale
COMPLEMENT_CONSTANT = 6

TYPE_DESCRIPTIONS: dict[str, dict[str, str]] = {
    "en": {
        "INTJ": "The Architect - Imaginative and strategic thinkers",
        "INTP": "The Thinker - Innovative inventors with an unquenchable thirst for knowledge",
        "ENTJ": "The Commander - Bold, imaginative and strong-willed leaders",
        "ENTP": "The Debater - Smart and curious thinkers who cannot resist an intellectual challenge",
        "INFJ": "The Advocate - Quiet and mystical, yet very inspiring and tireless idealists",
        "INFP": "The Mediator - Poetic, kind and altruistic people, always eager to help a good cause",
        "ENFJ": "The Protagonist - Charismatic and inspiring leaders",
        "ENFP": "The Campaigner - Enthusiastic, creative and sociable free spirits",
        "ISTJ": "The Logistician - Practical and fact-minded individuals",
        "ISFJ": "The Defender - Very dedicated and warm protectors",
        "ESTJ": "The Executive - Excellent administrators, unsurpassed at managing things or people",
        "ESFJ": "The Consul - Extraordinarily caring, social and popular people",
        "ISTP": "The Virtuoso - Bold and practical experimenters, masters of all kinds of tools",
        "ISFP": "The Adventurer - Flexible and charming artists, always ready to explore",
        "ESTP": "The Entrepreneur - Smart, energetic and very perceptive people",
        "ESFP": "The Entertainer - Spontaneous, energetic and enthusiastic people",
    },
    "ks": {
        "INTJ": "معمار - تخیلاتی اور حکمت عملی سوچنے والے",
        "INTP": "مفکر - علم کی لاتعداد پیاس کے ساتھ نوآور موجد",
    },
}

TYPE_RECOMMENDATIONS: dict[str, str] = {
    "en": "Recommendations for {type} personality type coming soon",
    "ks": "{type} شخصیت کی قسم کے لیے تجاویز جلد آرہی ہیں",
}


@dataclass(frozen=True)
class CategoricalResult:
    """Result of a personality type test."""

    personality_type: str
    trait_scores: dict[str, dict[str, float]]
    trait_percentages: dict[str, dict[str, int]]
    description: str
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "personalityType": self.personality_type,
            "traitScores": {
                axis: {pole: as_number(score) for pole, score in poles.items()}
                for axis, poles in self.trait_scores.items()
            },
            "traitPercentages": {
                axis: dict(poles) for axis, poles in self.trait_percentages.items()
            },
            "description": self.description,
            "recommendations": list(self.recommendations),
        }


def tally_traits(
    definition: TestDefinition, answers: Mapping[str, float]
) -> dict[str, dict[str, float]]:
    """Accumulate pole tallies for all four axes."""
    traits = {axis: {first: 0.0, second: 0.0} for axis, (first, second) in AXES.items()}

    for position, question in enumerate(definition.questions, start=1):
        poles = AXES.get(question.trait or "")
        answer = answers.get(str(position))
        if poles is None or answer is None:
            continue

        first, second = poles
        if position % 2 == 0:
            first, second = second, first
        traits[question.trait][first] += answer
        traits[question.trait][second] += COMPLEMENT_CONSTANT - answer

    return traits


def personality_type_code(traits: Mapping[str, Mapping[str, float]]) -> str:
    """Concatenate the dominant pole per axis (ties go to the second pole)."""
    letters = []
    for axis, (first, second) in AXES.items():
        letters.append(first if traits[axis][first] > traits[axis][second] else second)
    return "".join(letters)


def calculate_trait_percentages(
    traits: Mapping[str, Mapping[str, float]],
) -> dict[str, dict[str, int]]:
    """Percentage split of each axis between its two poles."""
    percentages: dict[str, dict[str, int]] = {}
    for axis, scores in traits.items():
        total = sum(scores.values())
        percentages[axis] = {
            pole: round_half_up(score / total * 100) if total else 0
            for pole, score in scores.items()
        }
    return percentages


def get_type_description(personality_type: str, language: str) -> str:
    descriptions = {
        lang: table[personality_type]
        for lang, table in TYPE_DESCRIPTIONS.items()
        if personality_type in table
    }
    return resolve(descriptions, language, default=f"{personality_type} personality type")


def get_type_recommendations(personality_type: str, language: str) -> list[str]:
    template = resolve(TYPE_RECOMMENDATIONS, language)
    return [template.format(type=personality_type)]


def score_categorical(
    definition: TestDefinition,
    answers: Mapping[str, float],
    language: str,
) -> CategoricalResult:
    """Score a validated answer set for a four-axis type test."""
    traits = tally_traits(definition, answers)
    personality_type = personality_type_code(traits)

    return CategoricalResult(
        personality_type=personality_type,
        trait_scores=traits,
        trait_percentages=calculate_trait_percentages(traits),
        description=get_type_description(personality_type, language),
        recommendations=get_type_recommendations(personality_type, language),
    )
