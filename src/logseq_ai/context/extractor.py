"""Prompt context extraction from host block trees."""

from typing import Any, Iterable, Optional

from logseq_ai.models.blocks import ContextStrategy, RequestContext
from logseq_ai.utils.logging import get_logger
from logseq_ai.utils.tokens import estimate_tokens, truncate_to_token_limit


logger = get_logger(__name__)


def _is_block_entity(block: Any) -> bool:
    return (
        isinstance(block, dict)
        and isinstance(block.get("uuid"), str)
        and isinstance(block.get("content"), str)
    )


def extract_from_block_tree(blocks: Iterable[Any]) -> tuple[str, list[str]]:
    """
    Concatenate block contents depth-first, indenting two spaces per level.

    Entries that are not block dicts and blocks with blank content are
    skipped (their children are still visited).

    Args:
        blocks: Root host blocks, children expanded

    Returns:
        Tuple of (indented content, UUIDs of blocks that contributed)
    """
    content_parts: list[str] = []
    uuids: list[str] = []

    def traverse(block: Any, depth: int) -> None:
        if not _is_block_entity(block):
            return

        if block["content"].strip():
            content_parts.append("  " * depth + block["content"])
            uuids.append(block["uuid"])

        children = block.get("children")
        if isinstance(children, list):
            for child in children:
                traverse(child, depth + 1)

    for block in blocks:
        traverse(block, 0)

    return "\n".join(content_parts), uuids


def truncate_context(context: RequestContext, max_tokens: int) -> RequestContext:
    """
    Truncate context content to fit within max_tokens.

    Args:
        context: Context to truncate
        max_tokens: Token limit

    Returns:
        The same context if it fits, otherwise a truncated copy
    """
    if context.estimated_tokens <= max_tokens:
        return context

    truncated = truncate_to_token_limit(context.content, max_tokens)
    result = context.model_copy(
        update={
            "content": truncated.text,
            "estimated_tokens": truncated.estimated_tokens,
            "was_truncated": True,
        }
    )

    logger.info(
        "context_truncated",
        original_tokens=context.estimated_tokens,
        new_tokens=result.estimated_tokens,
    )
    return result


def extract_block_context(
    blocks: Iterable[Any],
    max_tokens: int,
    context_type: ContextStrategy = "block",
    metadata: Optional[dict[str, Any]] = None,
) -> RequestContext:
    """
    Build prompt context from host blocks.

    Args:
        blocks: Host blocks (page tree, a block with children, or a selection)
        max_tokens: Token limit for the context
        context_type: Where the blocks came from
        metadata: Extra information such as the page name

    Returns:
        RequestContext, truncated if needed
    """
    content, uuids = extract_from_block_tree(blocks)

    logger.debug("context_extracted", type=context_type, blocks=len(uuids), length=len(content))

    context = RequestContext(
        type=context_type,
        content=content,
        source_uuids=uuids,
        estimated_tokens=estimate_tokens(content),
        metadata=metadata,
    )
    return truncate_context(context, max_tokens)
