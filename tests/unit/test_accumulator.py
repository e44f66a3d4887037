"""Unit tests for stream accumulation."""

import pytest

from logseq_ai.llm.accumulator import accumulate_stream


async def stream_of(*deltas):
    for delta in deltas:
        yield delta


class TestAccumulateStream:
    """Test joining streamed deltas."""

    @pytest.mark.asyncio
    async def test_joins_deltas(self):
        """Test that deltas are concatenated in order."""
        result = await accumulate_stream(stream_of("- First", " point\n", "- Second point"))
        assert result == "- First point\n- Second point"

    @pytest.mark.asyncio
    async def test_skips_empty_deltas(self):
        """Test that None and empty deltas are ignored."""
        result = await accumulate_stream(stream_of(None, "a", "", "b", None))
        assert result == "ab"

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        """Test that an empty stream yields an empty string."""
        assert await accumulate_stream(stream_of()) == ""
