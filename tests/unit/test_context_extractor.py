"""Unit tests for prompt context extraction."""

from logseq_ai.context.extractor import (
    extract_block_context,
    extract_from_block_tree,
    truncate_context,
)
from logseq_ai.models.blocks import RequestContext


def make_tree():
    return [
        {
            "uuid": "a",
            "content": "Parent",
            "children": [
                {"uuid": "b", "content": "Child", "children": []},
                {
                    "uuid": "c",
                    "content": "   ",
                    "children": [{"uuid": "d", "content": "Grandchild"}],
                },
            ],
        },
        "not a block",
        {"uuid": "e", "content": "Second root"},
    ]


class TestExtractFromBlockTree:
    """Test depth-first block concatenation."""

    def test_indented_content_and_sources(self):
        """Test indentation per depth and the contributing UUIDs."""
        content, uuids = extract_from_block_tree(make_tree())

        assert content == "Parent\n  Child\n    Grandchild\nSecond root"
        assert uuids == ["a", "b", "d", "e"]

    def test_empty(self):
        """Test that no blocks give empty content."""
        assert extract_from_block_tree([]) == ("", [])


class TestExtractBlockContext:
    """Test building RequestContext objects."""

    def test_context_within_limit(self):
        """Test context that fits is not truncated."""
        context = extract_block_context(make_tree(), 1000, context_type="page", metadata={"page": "Notes"})

        assert context.type == "page"
        assert context.source_uuids == ["a", "b", "d", "e"]
        assert context.estimated_tokens > 0
        assert not context.was_truncated
        assert context.metadata == {"page": "Notes"}

    def test_context_truncated(self):
        """Test context over the limit is truncated."""
        blocks = [{"uuid": "x", "content": "word " * 200}]
        context = extract_block_context(blocks, 10)

        assert context.was_truncated
        assert context.content.endswith("...")
        assert context.type == "block"


class TestTruncateContext:
    """Test truncating an existing context."""

    def test_fits(self):
        """Test that a fitting context is returned unchanged."""
        context = RequestContext(type="block", content="short", estimated_tokens=2)
        assert truncate_context(context, 10) is context

    def test_truncates_copy(self):
        """Test that truncation returns a new context."""
        context = RequestContext(type="selection", content="x" * 100, estimated_tokens=25)
        result = truncate_context(context, 5)

        assert result is not context
        assert result.was_truncated
        assert result.content == "x" * 20 + "..."
        assert result.type == "selection"
        assert context.content == "x" * 100
