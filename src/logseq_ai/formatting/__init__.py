"""Sanitization of LLM output for insertion into Logseq blocks."""

from logseq_ai.formatting.code_fences import strip_code_fences
from logseq_ai.formatting.lists import (
    flatten_nested_lists,
    max_list_depth,
    normalize_list_prefixes,
    parse_nested_list,
)
from logseq_ai.formatting.pipeline import sanitize_for_logseq, sanitize_stream
from logseq_ai.formatting.splitters import (
    format_summary_list,
    format_task_subtasks,
    split_multiline_flashcard,
)
from logseq_ai.formatting.tags import normalize_logseq_tags
from logseq_ai.formatting.validation import validate_block_hierarchy

__all__ = [
    "flatten_nested_lists",
    "format_summary_list",
    "format_task_subtasks",
    "max_list_depth",
    "normalize_list_prefixes",
    "normalize_logseq_tags",
    "parse_nested_list",
    "sanitize_for_logseq",
    "sanitize_stream",
    "split_multiline_flashcard",
    "strip_code_fences",
    "validate_block_hierarchy",
]
