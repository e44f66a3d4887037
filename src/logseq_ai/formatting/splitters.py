"""Command-specific post-processing of LLM output.

These run after (or, for flashcards, instead of) the generic pipeline and
repair shapes the LLM is known to produce: multi-line flashcard answers and
list items concatenated on a single line.
"""

import re

from logseq_ai.exceptions import InvalidMarkerError
from logseq_ai.models.formatting import TASK_MARKERS, FlashcardBlock
from logseq_ai.utils.logging import get_logger


logger = get_logger(__name__)

CARD_TAG = "#card"

# Q: ... then A: ... (answer may span lines until a blank line before the next Q:)
QA_PATTERN = re.compile(r"Q:\s*([^\n]+?)\s*\nA:\s*([\s\S]+?)(?=\n\nQ:|\Z)")
TRAILING_CARD_TAG = re.compile(r"\s*#card\s*$")

_MARKER_GROUP = "|".join(TASK_MARKERS)

# "- LATER A- LATER B" -> boundary before the second item
CONCATENATED_TASK_PATTERN = re.compile(
    rf"(- (?:{_MARKER_GROUP})[ \t]+[^\n]+?)(?=- (?:{_MARKER_GROUP})[ \t]+)"
)
MARKED_TEXT_PATTERN = re.compile(rf"^(?:{_MARKER_GROUP})\s+")
BARE_MARKER_LINE_PATTERN = re.compile(rf"^(?:{_MARKER_GROUP})\s+.+$")
LIST_LINE_PATTERN = re.compile(r"^-\s+(.+)$")

# "- X- Y" -> boundary before "- Y"
CONCATENATED_ITEM_PATTERN = re.compile(r"(- [^\n]+?)(?=- )")


def _require_str(value: object, name: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")


def split_multiline_flashcard(qa_content: str) -> list[FlashcardBlock]:
    """
    Split Q&A flashcard output into question and answer blocks.

    Each "Q: ...\\nA: ..." pair becomes a question entry followed by answer
    entries. A multi-line answer yields a tagged head entry for its first
    line plus one untagged entry per remaining line; only the head carries
    #card because the tag marks the whole card for review scheduling.

    Text without any Q/A pair is returned whole as a single question entry so
    no content is lost.

    Args:
        qa_content: Flashcard output from the LLM

    Returns:
        Flashcard entries in insertion order

    Raises:
        TypeError: If qa_content is not a string

    Example:
        >>> blocks = split_multiline_flashcard("Q: What is 1+1?\\nA: 2")
        >>> [(b.type, b.content, b.has_card) for b in blocks]
        [('question', 'Q: What is 1+1?', False), ('answer', 'A: 2 #card', True)]
    """
    _require_str(qa_content, "qa_content")

    matches = list(QA_PATTERN.finditer(qa_content))

    if not matches:
        return [
            FlashcardBlock(
                type="question",
                content=qa_content,
                has_card=CARD_TAG in qa_content,
            )
        ]

    blocks: list[FlashcardBlock] = []

    for match in matches:
        question = match.group(1).strip()
        answer_content = match.group(2).strip()
        answer_lines = [line.strip() for line in answer_content.split("\n") if line.strip()]

        blocks.append(FlashcardBlock(type="question", content=f"Q: {question}", has_card=False))

        if not answer_lines:
            blocks.append(FlashcardBlock(type="answer", content=f"A: {CARD_TAG}", has_card=True))
            continue

        first_line = answer_lines[0]

        if len(answer_lines) == 1:
            suffix = "" if CARD_TAG in first_line else f" {CARD_TAG}"
            blocks.append(
                FlashcardBlock(type="answer", content=f"A: {first_line}{suffix}", has_card=True)
            )
            continue

        # Tag may sit on any line of a multi-line answer
        suffix = "" if CARD_TAG in answer_content else f" {CARD_TAG}"
        blocks.append(
            FlashcardBlock(type="answer", content=f"A: {first_line}{suffix}", has_card=True)
        )

        for line in answer_lines[1:]:
            clean_line = TRAILING_CARD_TAG.sub("", line).strip()
            blocks.append(FlashcardBlock(type="answer", content=clean_line, has_card=False))

    return blocks


def format_task_subtasks(content: str, marker: str) -> str:
    """
    Format task subtasks with a consistent marker and flat structure.

    The LLM sometimes returns several items on one line
    ("- LATER Task1- LATER Task2"); those are split first. Then every
    "- text" line gets `marker` unless it already starts with a task marker,
    bare "TODO text" lines get a "- " prefix, and any other line is treated
    as explanation and dropped.

    Args:
        content: Subtask list from the LLM
        marker: Marker of the parent task (TODO, DOING, DONE, ...)

    Returns:
        One "- MARKER text" line per subtask, newline-joined (empty when
        nothing looked like a subtask)

    Raises:
        TypeError: If content or marker is not a string
        InvalidMarkerError: If marker is not a recognized task marker
    """
    _require_str(content, "content")
    _require_str(marker, "marker")
    if marker not in TASK_MARKERS:
        raise InvalidMarkerError(marker)

    normalized_content = content
    if CONCATENATED_TASK_PATTERN.search(content):
        normalized_content = CONCATENATED_TASK_PATTERN.sub(r"\1\n", content)
        logger.debug("concatenated_tasks_split", marker=marker)

    formatted = []

    for line in normalized_content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        list_match = LIST_LINE_PATTERN.match(trimmed)
        if list_match:
            task_text = list_match.group(1).strip()
            if MARKED_TEXT_PATTERN.match(task_text):
                formatted.append(f"- {task_text}")
            else:
                formatted.append(f"- {marker} {task_text}")
        elif BARE_MARKER_LINE_PATTERN.match(trimmed):
            formatted.append(f"- {trimmed}")

    return "\n".join(formatted)


def format_summary_list(content: str) -> str:
    """
    Put concatenated summary list items back on separate lines.

    Example:
        >>> format_summary_list("- Item1- Item2- Item3")
        '- Item1\\n- Item2\\n- Item3'

    Args:
        content: Summary output, usually already sanitized

    Returns:
        Content with a newline before every list item that followed another
        item on the same line

    Raises:
        TypeError: If content is not a string
    """
    _require_str(content, "content")

    matches = CONCATENATED_ITEM_PATTERN.findall(content)
    if not matches:
        return content

    logger.info(
        "concatenated_list_items_detected",
        match_count=len(matches),
        sample=matches[0][:100],
    )
    return CONCATENATED_ITEM_PATTERN.sub(r"\1\n", content)
