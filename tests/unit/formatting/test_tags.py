"""Unit tests for hashtag normalization."""

import pytest

from logseq_ai.formatting.tags import normalize_logseq_tags


class TestNormalizeLogseqTags:
    """Test #tag / [[tag]] normalization."""

    def test_tag_at_end_of_line_is_kept(self):
        """Test that a trailing tag keeps its #tag form."""
        assert normalize_logseq_tags("This is a task #important") == "This is a task #important"

    def test_tag_followed_by_text_becomes_page_reference(self):
        """Test that a mid-sentence tag becomes [[tag]]."""
        result = normalize_logseq_tags("Use #python for scripting")
        assert result == "Use [[python]] for scripting"

    def test_glued_tag_gets_space_before(self):
        """Test that a tag glued to the previous word is separated."""
        result = normalize_logseq_tags("Deploy feature to#production environment")
        assert result == "Deploy feature to [[production]] environment"

    def test_glued_trailing_tag(self):
        """Test that a glued tag at the end stays #tag with a space before it."""
        assert normalize_logseq_tags("Done#urgent") == "Done #urgent"

    def test_tag_at_start_of_text(self):
        """Test that a leading tag followed by text needs no space before it."""
        assert normalize_logseq_tags("#meeting notes from today") == "[[meeting]] notes from today"

    def test_tag_before_newline_is_end_of_line(self):
        """Test that a newline after a tag counts as end of line."""
        content = "First line #todo\nSecond line"
        assert normalize_logseq_tags(content) == content

    def test_hierarchical_tag(self):
        """Test that namespaced tags keep their slashes."""
        result = normalize_logseq_tags("See #project/alpha for details")
        assert result == "See [[project/alpha]] for details"

    def test_markdown_heading_is_not_a_tag(self):
        """Test that '# Heading' is not matched."""
        assert normalize_logseq_tags("# Heading") == "# Heading"

    def test_non_ascii_tag_is_not_matched(self):
        """Test that tags in other scripts are left alone."""
        assert normalize_logseq_tags("价格#标签") == "价格#标签"

    def test_ascii_tag_after_cjk_text(self):
        """Test that an ASCII tag glued to CJK text is separated."""
        assert normalize_logseq_tags("中文#tag") == "中文 #tag"

    def test_glued_tag_swallows_following_letters(self):
        """Test that letters directly after a tag are captured as part of it."""
        assert normalize_logseq_tags("Review#APIv2code") == "Review #APIv2code"

    @pytest.mark.parametrize(
        "content",
        [
            "Deploy feature to#production environment",
            "Use #python for scripting",
            "Done#urgent",
            "Plain text without tags",
        ],
    )
    def test_normalization_is_idempotent(self, content):
        """Test that normalizing twice gives the same result as once."""
        once = normalize_logseq_tags(content)
        assert normalize_logseq_tags(once) == once
