"""
Utility functions for the code generator.
"""

import keyword
import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "FIRST_NAME" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "ABC" -> "Abc"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def pascal_to_snake_case(text: str) -> str:
    """Convert PascalCase or camelCase text to snake_case.

    Examples:
        "JsonParsed" -> "json_parsed"
        "Base58" -> "base58"
        "already_snake" -> "already_snake"
    """
    if not text:
        return ""
    words = _split_into_words(_normalize_separators(text))
    joined = []
    for word in words:
        # Keep digits attached to the preceding word (Base58, not base_58)
        if word.isdigit() and joined:
            joined[-1] += word
        else:
            joined.append(word.lower())
    return "_".join(joined)


# Derived table rules for variant mappings
RENAME_RULES = {
    "lower": str.lower,
    "upper": str.upper,
    "snake": pascal_to_snake_case,
    "pascal": snake_to_pascal_case,
}


def rename_variant(name: str, rule: str) -> str:
    """Apply a rename rule to a variant name."""
    return RENAME_RULES[rule](name)


def is_identifier(name: str) -> bool:
    """Check that a name can be used as an attribute name."""
    return name.isidentifier() and not keyword.iskeyword(name)
