"""Turn formatted LLM output into block plans and apply them to the host.

Each command has its own block shape:

- ask/custom: one child block holding the sanitized answer
- summarize: a header block with one child per list item
- tasks: one child block per subtask under the TODO block
- flashcard: question blocks, each with a tagged answer whose continuation
  lines are nested one level deeper
"""

from typing import Any, Optional

from logseq_ai.blocks.editor import BlockEditor
from logseq_ai.exceptions import BlockPlanError, InvalidMarkerError
from logseq_ai.formatting.pipeline import sanitize_for_logseq
from logseq_ai.formatting.splitters import (
    format_summary_list,
    format_task_subtasks,
    split_multiline_flashcard,
)
from logseq_ai.models.blocks import BlockPlan
from logseq_ai.models.formatting import TASK_MARKERS, CommandType, FormatterOptions
from logseq_ai.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_SUMMARY_HEADER = "Summary"


def _options_for(options: Optional[FormatterOptions], command_type: CommandType) -> FormatterOptions:
    if options is None:
        return FormatterOptions(command_type=command_type)
    return options.model_copy(update={"command_type": command_type})


def detect_todo_marker(block: dict[str, Any]) -> Optional[str]:
    """
    Detect the task marker of a host block.

    Prefers the host's parsed `marker` field and falls back to a marker at
    the start of the content.

    Args:
        block: Host block dict

    Returns:
        The marker, or None if the block is not a task
    """
    marker = block.get("marker")
    if marker in TASK_MARKERS:
        return marker

    content = (block.get("content") or "").strip()
    for candidate in TASK_MARKERS:
        if content.startswith(f"{candidate} "):
            return candidate

    return None


def plan_answer_blocks(
    text: str,
    options: Optional[FormatterOptions] = None,
    command_type: CommandType = "ask",
) -> BlockPlan:
    """Plan a single child block holding the sanitized answer."""
    sanitized = sanitize_for_logseq(text, _options_for(options, command_type))

    plan = BlockPlan()
    if sanitized.strip():
        plan.add(sanitized)
    return plan


def plan_flashcard_blocks(text: str) -> BlockPlan:
    """
    Plan flashcard blocks from Q&A output.

    Questions go under the target block, the tagged answer under its
    question, and continuation lines under the tagged answer. Entries
    without a matching parent fall back to the nearest available level so
    nothing is dropped.

    Args:
        text: Raw flashcard output from the LLM

    Returns:
        BlockPlan with at most three levels below the target
    """
    plan = BlockPlan()
    question_idx: Optional[int] = None
    answer_idx: Optional[int] = None

    flashcard_blocks = split_multiline_flashcard(text)

    for block in flashcard_blocks:
        if block.type == "question":
            question_idx = plan.add(block.content)
            answer_idx = None
        elif question_idx is None:
            plan.add(block.content)
        elif block.has_card:
            answer_idx = plan.add(block.content, parent=question_idx)
        elif answer_idx is not None:
            plan.add(block.content, parent=answer_idx)
        else:
            plan.add(block.content, parent=question_idx)

    question_count = sum(1 for block in flashcard_blocks if block.type == "question")
    logger.info("flashcard_plan_created", questions=question_count, blocks=len(plan.instructions))
    return plan


def plan_subtask_blocks(
    text: str,
    marker: str,
    options: Optional[FormatterOptions] = None,
) -> BlockPlan:
    """
    Plan subtask blocks under a task block.

    An empty plan means no subtasks could be parsed; callers report that to
    the user as a warning.

    Args:
        text: Raw subtask output from the LLM
        marker: Marker of the parent task
        options: Formatting options (command type is forced to "tasks")

    Returns:
        BlockPlan with one child instruction per subtask

    Raises:
        InvalidMarkerError: If marker is not a recognized task marker
    """
    if marker not in TASK_MARKERS:
        raise InvalidMarkerError(marker)

    opts = _options_for(options, "tasks")
    formatted = text

    if opts.enable_formatting:
        formatted = sanitize_for_logseq(formatted, opts)
        formatted = format_task_subtasks(formatted, marker)

    lines = [line.strip() for line in formatted.split("\n") if line.strip()]
    subtasks = [line[2:].strip() for line in lines if line.startswith("- ")]

    if not subtasks:
        logger.warning("subtask_list_unparsed", fallback="marker_detection")
        subtasks = [
            line for line in lines
            if any(line.startswith(f"{m} ") for m in TASK_MARKERS)
        ]

    plan = BlockPlan()
    for subtask in subtasks:
        plan.add(subtask)

    if plan.is_empty():
        logger.warning("no_subtasks_found", length=len(text))
    else:
        logger.info("subtask_plan_created", count=len(subtasks), marker=marker)

    return plan


def plan_summary_blocks(
    text: str,
    options: Optional[FormatterOptions] = None,
    use_target_as_header: bool = False,
) -> BlockPlan:
    """
    Plan summary blocks: a header plus one child block per list item.

    Non-list lines become the header content; with no such lines the header
    reads "Summary".

    Args:
        text: Raw summary output from the LLM
        options: Formatting options (command type is forced to "summarize")
        use_target_as_header: Write the header into the target block itself
            instead of creating a new header block under it

    Returns:
        BlockPlan for the summary
    """
    opts = _options_for(options, "summarize")
    formatted = text

    if opts.enable_formatting:
        formatted = sanitize_for_logseq(formatted, opts)
        formatted = format_summary_list(formatted)

    list_items = []
    non_list_content = []
    for line in formatted.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("- "):
            list_items.append(trimmed[2:].strip())
        elif trimmed:
            non_list_content.append(trimmed)

    header = "\n".join(non_list_content) if non_list_content else DEFAULT_SUMMARY_HEADER

    plan = BlockPlan()
    if use_target_as_header:
        plan.target_content = header
        header_idx = None
    else:
        header_idx = plan.add(header)

    for item in list_items:
        plan.add(item, parent=header_idx)

    logger.debug("summary_plan_created", items=len(list_items), header_lines=len(non_list_content))
    return plan


def apply_block_plan(editor: BlockEditor, target_uuid: str, plan: BlockPlan) -> list[Optional[str]]:
    """
    Execute a block plan through the host editor.

    A failed insert is logged and the blocks planned beneath it are skipped;
    the rest of the plan still runs.

    Args:
        editor: Host editor
        target_uuid: Block the plan is anchored to
        plan: Plan to execute

    Returns:
        UUID of each created block by instruction index (None where it failed)

    Raises:
        BlockPlanError: If the target block does not exist
    """
    if editor.get_block(target_uuid) is None:
        raise BlockPlanError(target_uuid)

    if plan.target_content is not None:
        editor.update_block(target_uuid, plan.target_content)

    created: list[Optional[str]] = []

    for index, instruction in enumerate(plan.instructions):
        parent_uuid = target_uuid if instruction.parent is None else created[instruction.parent]

        if parent_uuid is None:
            logger.warning("block_skipped_missing_parent", index=index, parent=instruction.parent)
            created.append(None)
            continue

        try:
            block = editor.insert_block(parent_uuid, instruction.content, sibling=instruction.sibling)
        except Exception as e:
            logger.error("block_insert_failed", index=index, parent_uuid=parent_uuid, error=str(e))
            block = None

        if block is None:
            logger.error("block_not_created", index=index, content=instruction.content[:100])
            created.append(None)
        else:
            created.append(block["uuid"])

    logger.info(
        "block_plan_applied",
        target_uuid=target_uuid,
        planned=len(plan.instructions),
        created=sum(1 for block_uuid in created if block_uuid is not None),
    )
    return created
