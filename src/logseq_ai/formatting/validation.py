"""Read-only checks for content that may break Logseq's block hierarchy."""

import re

from logseq_ai.models.formatting import ValidationResult


DEEP_NESTING_WARNING = "Content contains deeply nested lists (may not render correctly)"
TABLE_WARNING = "Content contains tables (may break block structure)"
MULTIPLE_CODE_BLOCKS_WARNING = "Content contains multiple code blocks (may affect formatting)"

_DEEP_NESTING = re.compile(r"^[ \t]{4,}-", re.MULTILINE)
_TABLE_ROW = re.compile(r"\|.*\|.*\|")


def validate_block_hierarchy(content: str) -> ValidationResult:
    """
    Validate that content won't break Logseq block hierarchy.

    Only reports; nothing is modified. Current rules produce warnings only,
    so the result is always valid.

    Args:
        content: Content to validate

    Returns:
        ValidationResult with any warnings
    """
    warnings = []
    errors: list[str] = []

    if _DEEP_NESTING.search(content):
        warnings.append(DEEP_NESTING_WARNING)

    if "|" in content and _TABLE_ROW.search(content):
        warnings.append(TABLE_WARNING)

    # Two or more complete fences
    if content.count("```") >= 4:
        warnings.append(MULTIPLE_CODE_BLOCKS_WARNING)

    return ValidationResult(warnings=warnings, errors=errors)
