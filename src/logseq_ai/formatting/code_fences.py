"""Code fence extraction for LLM output."""

import re


# ```lang\n ... ``` (non-greedy, spans lines)
CODE_FENCE_PATTERN = re.compile(r"```\w*\n?(.*?)```", re.DOTALL)

# Content that is meant to be read, not executed: list items or Q&A pairs
STRUCTURED_LINE_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+\.)\s", re.MULTILINE)

EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
ORPHAN_FENCE = re.compile(r"`{3,}")


def is_structured_text(code_content: str) -> bool:
    """Whether fenced content holds lists or Q&A pairs rather than code."""
    return bool(STRUCTURED_LINE_PATTERN.search(code_content)) or "Q:" in code_content


def strip_code_fences(content: str) -> str:
    """
    Strip markdown code fences.

    Fenced regions whose content looks like structured text (list items or
    "Q:" pairs) are unwrapped; everything else is treated as illustrative code
    and removed together with its delimiters. Blank lines left behind are
    collapsed and orphaned runs of three or more backticks are removed.

    Args:
        content: Text with potential code blocks

    Returns:
        Text with code blocks extracted or removed

    Example:
        >>> strip_code_fences("Intro\\n```\\n- a\\n- b\\n```")
        'Intro\\n- a\\n- b'
    """

    def replace(match: re.Match) -> str:
        code_content = match.group(1)
        if is_structured_text(code_content):
            return code_content.strip()
        return ""

    stripped = CODE_FENCE_PATTERN.sub(replace, content)
    stripped = EXCESS_BLANK_LINES.sub("\n\n", stripped)
    return ORPHAN_FENCE.sub("", stripped)
