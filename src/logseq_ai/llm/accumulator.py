"""Accumulation of streamed LLM text deltas.

The transport (HTTP, SSE decoding, retries) lives outside this package; it
hands over an async iterator of text deltas and the formatting code only ever
sees the final buffer.
"""

from typing import AsyncIterator, Optional

from logseq_ai.utils.logging import get_logger


logger = get_logger(__name__)


async def accumulate_stream(stream: AsyncIterator[Optional[str]]) -> str:
    """
    Join streamed text deltas into the complete response.

    Empty and None deltas (role-only or finish chunks) are skipped.

    Args:
        stream: Async iterator yielding text deltas

    Returns:
        Complete response text

    Example:
        ```python
        async def llm_stream():
            yield "- First"
            yield None
            yield " point\\n- Second point"

        text = await accumulate_stream(llm_stream())
        # "- First point\\n- Second point"
        ```
    """
    parts: list[str] = []
    chunk_count = 0

    async for delta in stream:
        if not delta:
            continue
        parts.append(delta)
        chunk_count += 1

    content = "".join(parts)
    logger.debug("stream_accumulated", chunks=chunk_count, length=len(content))
    return content
