"""Unit tests for the sanitization pipeline."""

import pytest
from structlog.testing import capture_logs

import logseq_ai.formatting.pipeline as pipeline
from logseq_ai.formatting.lists import flatten_nested_lists
from logseq_ai.formatting.pipeline import sanitize_for_logseq, sanitize_stream
from logseq_ai.models.formatting import FormatterOptions


class TestSanitizeForLogseq:
    """Test the full sanitization pipeline."""

    def test_lists_flattened_and_blank_lines_collapsed(self):
        """Test the combined effect of every step."""
        content = "* Item 1\n  * Nested\n\n\n\nText #tag"
        assert sanitize_for_logseq(content) == "- Item 1\n- Nested\n\nText #tag"

    def test_code_block_removed_by_default(self):
        """Test that illustrative code is dropped."""
        result = sanitize_for_logseq("Run this:\n```python\nx = 1\n```")
        assert "x = 1" not in result
        assert "```" not in result

    def test_preserve_code_blocks(self):
        """Test that code blocks survive when preservation is enabled."""
        content = "```python\nx = 1\n```"
        options = FormatterOptions(preserve_code_blocks=True)
        assert sanitize_for_logseq(content, options) == content

    def test_structured_fence_unwrapped_then_flattened(self):
        """Test that a fenced nested list ends up as a flat list."""
        content = "Steps:\n```\n1. Install\n   * pip install\n2. Run\n```"
        assert sanitize_for_logseq(content) == "Steps:\n- Install\n- pip install\n- Run"

    def test_tags_normalized(self):
        """Test that glued tags are separated."""
        result = sanitize_for_logseq("Deploy to#production now")
        assert result == "Deploy to [[production]] now"

    def test_disabled_formatting_passes_through(self):
        """Test that disabled formatting returns the input unchanged."""
        content = "* a\n  * b\n```\ncode\n```"
        options = FormatterOptions(enable_formatting=False)
        assert sanitize_for_logseq(content, options) == content

    def test_flashcard_bypass(self):
        """Test that flashcard output is never reformatted."""
        content = "Q: What?\nA: * a\n  * b"
        options = FormatterOptions(command_type="flashcard")
        assert sanitize_for_logseq(content, options) == content

    def test_empty_input(self):
        """Test that empty input yields empty output."""
        assert sanitize_for_logseq("") == ""

    def test_failure_returns_original(self, monkeypatch):
        """Test that an exception in any step returns the input unchanged."""

        def broken(content):
            raise RuntimeError("boom")

        monkeypatch.setattr(pipeline, "flatten_nested_lists", broken)
        content = "* a\n  * b"

        with capture_logs() as logs:
            result = sanitize_for_logseq(content)

        assert result == content
        assert any(log["event"] == "formatting_failed" for log in logs)

    def test_modifications_logged(self):
        """Test that applied steps are reported in order."""
        with capture_logs() as logs:
            sanitize_for_logseq("* a\n  * b", FormatterOptions(command_type="summarize"))

        records = [log for log in logs if log["event"] == "formatting_modifications_applied"]
        assert len(records) == 1
        assert records[0]["modifications"] == ["Normalized list prefixes", "Flattened nested lists"]
        assert records[0]["command_type"] == "summarize"

    def test_very_deep_nesting_is_flattened(self):
        """Test that thousands of nesting levels are flattened, not returned as-is."""
        content = "\n".join(" " * i + "- item" for i in range(1500))

        with capture_logs() as logs:
            result = sanitize_for_logseq(content)

        assert result == flatten_nested_lists(content)
        assert result == "\n".join(["- item"] * 1500)
        assert not any(log["event"] == "formatting_failed" for log in logs)

    def test_modifications_not_logged_when_disabled(self):
        """Test that log_modifications=False suppresses the record."""
        with capture_logs() as logs:
            sanitize_for_logseq("* a", FormatterOptions(log_modifications=False))

        assert not any(log["event"] == "formatting_modifications_applied" for log in logs)

    def test_no_record_when_nothing_changed(self):
        """Test that unchanged content produces no modification record."""
        with capture_logs() as logs:
            sanitize_for_logseq("- already fine")

        assert not any(log["event"] == "formatting_modifications_applied" for log in logs)

    @pytest.mark.parametrize(
        "content",
        [
            "* Item 1\n  * Nested\n\n\n\nText #tag",
            "Steps:\n```\n1. Install\n   * pip install\n2. Run\n```",
            "Deploy to#production now\n+ item",
            "Plain paragraph.\n\nAnother one.",
        ],
    )
    def test_idempotent(self, content):
        """Test that sanitizing sanitized output changes nothing."""
        once = sanitize_for_logseq(content)
        assert sanitize_for_logseq(once) == once

    def test_no_indented_list_items_in_output(self):
        """Test that output never contains an indented list item."""
        result = sanitize_for_logseq("- a\n    - b\n        1. c\n\t+ d")
        for line in result.split("\n"):
            assert not line[:1].isspace()


class TestSanitizeStream:
    """Test sanitizing streamed responses."""

    @pytest.mark.asyncio
    async def test_stream_is_accumulated_then_sanitized(self):
        """Test that chunks split mid-line are joined before formatting."""

        async def chunks():
            yield "* Fir"
            yield None
            yield "st\n  * Sec"
            yield ""
            yield "ond"

        assert await sanitize_stream(chunks()) == "- First\n- Second"
