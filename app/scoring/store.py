"""Questionnaire definition store.

Definitions live as YAML files in the ``questionnaires/`` directory, one
file per test identifier (the file stem). They are parsed once when the
application starts and never mutated afterwards, so a single store can be
shared by any number of concurrent scoring calls.

Two file shapes are accepted:

- a mapping with ``testType``, ``title``, ``questions``, ``options``,
  ``scoring`` and (for burnout-style tests) ``dimensions``;
- a bare list of question records, which yields a definition without
  options or interpretation table.
"""

import hashlib
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator

import yaml

from app.scoring.definitions import (
    AnswerOption,
    Dimension,
    InterpretationRange,
    Question,
    SeverityLevel,
    TestCategory,
    TestDefinition,
)
from app.scoring.errors import DefinitionError, TestNotFound
from app.scoring.localization import localized_table

logger = logging.getLogger(__name__)

# Default questionnaires directory
QUESTIONNAIRES_DIR = Path(__file__).parent.parent.parent / "questionnaires"

# Identifiers whose files predate the explicit ``category`` key
CATEGORY_ALIASES: dict[str, TestCategory] = {
    "16per": TestCategory.CATEGORICAL,
    "mbti": TestCategory.CATEGORICAL,
    "mbiss": TestCategory.MULTI_DIMENSIONAL,
}


def compute_definition_hash(content: str) -> str:
    """Compute SHA256 hash of questionnaire file content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _parse_ranges(raw: Any, where: str) -> tuple[InterpretationRange, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise DefinitionError(f"{where}: interpretation must be a list")

    ranges = []
    for entry in raw:
        try:
            level = entry.get("level")
            ranges.append(
                InterpretationRange(
                    min=float(entry["min"]),
                    max=float(entry["max"]),
                    severity=MappingProxyType(localized_table(entry.get("severity"))),
                    level=SeverityLevel(level) if level is not None else None,
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise DefinitionError(f"{where}: invalid interpretation range {entry!r}") from exc
    return tuple(ranges)


def _parse_questions(raw: Any, test_id: str) -> tuple[Question, ...]:
    if not isinstance(raw, list):
        raise DefinitionError(f"{test_id}: questions must be a list")

    questions = []
    for position, entry in enumerate(raw, start=1):
        if isinstance(entry, str):
            questions.append(Question(id=position, text=MappingProxyType({"en": entry})))
            continue
        if not isinstance(entry, dict):
            raise DefinitionError(f"{test_id}: invalid question {entry!r}")
        text = entry.get("text", entry.get("question"))
        questions.append(
            Question(
                id=int(entry.get("id", position)),
                text=MappingProxyType(localized_table(text)),
                trait=entry.get("trait"),
            )
        )
    return tuple(questions)


def _parse_options(raw: Any, test_id: str) -> tuple[AnswerOption, ...]:
    if raw is None:
        return ()
    try:
        return tuple(
            AnswerOption(
                value=float(entry["value"]),
                label=MappingProxyType(localized_table(entry.get("label"))),
            )
            for entry in raw
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DefinitionError(f"{test_id}: invalid options") from exc


def _parse_dimensions(
    raw: Any, scoring: dict[str, Any], test_id: str
) -> dict[str, Dimension]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise DefinitionError(f"{test_id}: dimensions must be a mapping")

    dimensions = {}
    for name, question_ids in raw.items():
        dimension_scoring = scoring.get(name) or {}
        dimensions[name] = Dimension(
            name=name,
            question_ids=tuple(int(qid) for qid in question_ids),
            interpretation=_parse_ranges(
                dimension_scoring.get("interpretation"), f"{test_id}.{name}"
            ),
        )
    return dimensions


def parse_definition(test_id: str, document: Any) -> TestDefinition:
    """Build a definition from a parsed questionnaire document.

    Args:
        test_id: Identifier the definition is registered under
        document: Parsed YAML (mapping or bare list of questions)

    Returns:
        Immutable TestDefinition

    Raises:
        DefinitionError: If the document shape is invalid
    """
    test_id = test_id.lower()

    if isinstance(document, list):
        return TestDefinition(
            test_id=test_id,
            test_type=test_id.upper(),
            category=CATEGORY_ALIASES.get(test_id, TestCategory.STANDARD),
            questions=_parse_questions(document, test_id),
            bare=True,
        )

    if not isinstance(document, dict):
        raise DefinitionError(f"{test_id}: questionnaire must be a mapping or list")

    raw_category = document.get("category")
    try:
        category = (
            TestCategory(raw_category)
            if raw_category
            else CATEGORY_ALIASES.get(test_id, TestCategory.STANDARD)
        )
    except ValueError as exc:
        raise DefinitionError(f"{test_id}: unknown category {raw_category!r}") from exc

    scoring = document.get("scoring") or {}
    dimensions = _parse_dimensions(document.get("dimensions"), scoring, test_id)
    if category == TestCategory.MULTI_DIMENSIONAL and not dimensions:
        raise DefinitionError(f"{test_id}: multi-dimensional test without dimensions")

    return TestDefinition(
        test_id=test_id,
        test_type=str(document.get("testType", test_id.upper())),
        category=category,
        questions=_parse_questions(document.get("questions", []), test_id),
        title=MappingProxyType(localized_table(document.get("title"))),
        description=MappingProxyType(localized_table(document.get("description"))),
        options=_parse_options(document.get("options"), test_id),
        reverse_scored_questions=frozenset(
            int(qid) for qid in scoring.get("reverseScoredQuestions") or []
        ),
        interpretation=_parse_ranges(scoring.get("interpretation"), test_id),
        dimensions=MappingProxyType(dimensions),
    )


def load_definition(filepath: Path) -> tuple[TestDefinition, str]:
    """Load a questionnaire YAML file and compute its hash.

    Raises:
        FileNotFoundError: If the file doesn't exist
        DefinitionError: If the file is not a valid questionnaire
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Questionnaire not found: {filepath}")

    content = filepath.read_text(encoding="utf-8")
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise DefinitionError(f"{filepath.name}: invalid YAML") from exc

    return parse_definition(filepath.stem, document), compute_definition_hash(content)


class TestDefinitionStore:
    """Read-only registry of questionnaire definitions keyed by identifier."""

    __test__ = False

    def __init__(self, definitions: Iterable[TestDefinition]) -> None:
        registry: dict[str, TestDefinition] = {}
        for definition in definitions:
            if definition.test_id in registry:
                raise DefinitionError(f"Duplicate questionnaire: {definition.test_id}")
            registry[definition.test_id] = definition
        self._definitions = MappingProxyType(registry)
        self.hashes: MappingProxyType[str, str] = MappingProxyType({})

    @classmethod
    def from_directory(cls, directory: Path | None = None) -> "TestDefinitionStore":
        """Load every ``*.yaml`` questionnaire in a directory."""
        directory = directory or QUESTIONNAIRES_DIR
        definitions = []
        hashes = {}
        for filepath in sorted(directory.glob("*.yaml")):
            definition, content_hash = load_definition(filepath)
            logger.info(f"Loaded questionnaire {definition.test_id} (sha256={content_hash[:12]})")
            definitions.append(definition)
            hashes[definition.test_id] = content_hash

        store = cls(definitions)
        store.hashes = MappingProxyType(hashes)
        logger.info(f"Loaded {len(store)} questionnaires from {directory}")
        return store

    def get(self, test_id: str) -> TestDefinition | None:
        return self._definitions.get(test_id.lower())

    def require(self, test_id: str) -> TestDefinition:
        """Get a definition or raise TestNotFound."""
        definition = self.get(test_id)
        if definition is None:
            raise TestNotFound(test_id)
        return definition

    def test_ids(self) -> list[str]:
        return sorted(self._definitions)

    def __contains__(self, test_id: object) -> bool:
        return isinstance(test_id, str) and test_id.lower() in self._definitions

    def __iter__(self) -> Iterator[TestDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
