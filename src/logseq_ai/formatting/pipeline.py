"""Sanitization pipeline that makes LLM output safe for Logseq blocks.

Steps run in a fixed order:

1. strip code fences (unless preserve_code_blocks)
2. normalize list prefixes
3. flatten nested lists
4. normalize tags (after list structure is settled, so inserted spacing
   around tags is not disturbed by marker rewriting)
5. collapse excessive blank lines

Any exception returns the original content unchanged.
"""

import re
from typing import AsyncIterator, Callable, Optional

from logseq_ai.formatting.code_fences import strip_code_fences
from logseq_ai.formatting.lists import (
    flatten_nested_lists,
    normalize_list_prefixes,
)
from logseq_ai.formatting.tags import normalize_logseq_tags
from logseq_ai.llm.accumulator import accumulate_stream
from logseq_ai.models.formatting import FormatterOptions
from logseq_ai.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_OPTIONS = FormatterOptions()

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def collapse_blank_lines(content: str) -> str:
    """Collapse three or more consecutive newlines to a single blank line."""
    return _EXCESS_BLANK_LINES.sub("\n\n", content)


def _apply_step(
    content: str,
    step: Callable[[str], str],
    label: str,
    modifications: list[str],
) -> str:
    result = step(content)
    if result != content:
        modifications.append(label)
        logger.debug("formatting_step_applied", step=label, length=len(result))
    return result


def sanitize_for_logseq(content: str, options: Optional[FormatterOptions] = None) -> str:
    """
    Sanitize raw LLM output for insertion into Logseq blocks.

    Flashcard output is returned unchanged; it is split by
    split_multiline_flashcard() instead, whose Q/A boundaries generic
    flattening would corrupt.

    Args:
        content: Raw LLM output
        options: Formatting options (defaults to FormatterOptions())

    Returns:
        Sanitized content, or the original content if formatting is disabled,
        does not apply, or fails
    """
    opts = options or DEFAULT_OPTIONS

    if not opts.enable_formatting:
        return content

    if opts.command_type == "flashcard":
        return content

    try:
        modifications: list[str] = []
        sanitized = content

        logger.debug(
            "formatting_started",
            command_type=opts.command_type,
            length=len(content),
        )

        if not opts.preserve_code_blocks:
            sanitized = _apply_step(
                sanitized, strip_code_fences, "Removed code blocks", modifications
            )

        sanitized = _apply_step(
            sanitized, normalize_list_prefixes, "Normalized list prefixes", modifications
        )
        sanitized = _apply_step(
            sanitized, flatten_nested_lists, "Flattened nested lists", modifications
        )
        sanitized = _apply_step(
            sanitized, normalize_logseq_tags, "Normalized Logseq tags", modifications
        )
        sanitized = _apply_step(
            sanitized, collapse_blank_lines, "Removed excessive blank lines", modifications
        )

        if opts.log_modifications and modifications:
            logger.info(
                "formatting_modifications_applied",
                command_type=opts.command_type,
                modifications=modifications,
                original_length=len(content),
                sanitized_length=len(sanitized),
            )

        return sanitized

    except Exception as e:
        logger.error(
            "formatting_failed",
            command_type=opts.command_type,
            error=str(e),
            exc_info=True,
        )
        return content


async def sanitize_stream(
    stream: AsyncIterator[str], options: Optional[FormatterOptions] = None
) -> str:
    """
    Accumulate a streamed LLM response and sanitize the final buffer.

    Args:
        stream: Async iterator of text deltas
        options: Formatting options

    Returns:
        Sanitized full response
    """
    content = await accumulate_stream(stream)
    return sanitize_for_logseq(content, options)
