"""Localized content lookup.

Every language-keyed table in the scoring subsystem (titles, question
text, severity labels, recommendations, type descriptions) is resolved
through :func:`resolve`. A missing language falls back to English at the
lookup site only, so a single result may mix languages when a
questionnaire is partially translated.
"""

from typing import Any, Mapping, TypeVar

DEFAULT_LANGUAGE = "en"

T = TypeVar("T")


def resolve(
    table: Mapping[str, T] | None,
    language: str,
    default: T | None = None,
) -> T | None:
    """Return the entry for ``language``, falling back to English.

    Args:
        table: Mapping from language code to localized value
        language: Requested language code
        default: Returned when neither language is present

    Returns:
        Localized value, English value, or ``default``
    """
    if not table:
        return default
    value = table.get(language)
    if value is not None:
        return value
    value = table.get(DEFAULT_LANGUAGE)
    if value is not None:
        return value
    return default


def localized_table(value: Any) -> dict[str, str]:
    """Coerce a YAML value into a language table.

    Plain strings are treated as English-only content.
    """
    if value is None:
        return {}
    if isinstance(value, str):
        return {DEFAULT_LANGUAGE: value}
    return {str(k): str(v) for k, v in dict(value).items()}
