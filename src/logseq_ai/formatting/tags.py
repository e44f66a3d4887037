"""Hashtag normalization for Logseq page references."""

import re


# Alphanumeric segments joined by "/". Tags glued to CJK or other scripts are
# deliberately not matched.
HASHTAG_PATTERN = re.compile(r"#([A-Za-z0-9]+(?:/[A-Za-z0-9]+)*)")


def normalize_logseq_tags(content: str) -> str:
    """
    Normalize hashtags so Logseq resolves them as page references.

    - A tag at the end of a line keeps its #tag form.
    - A tag followed by more text on the same line becomes [[tag]].
    - Either form is separated from surrounding text by a single space.

    A tag immediately followed by letters is captured as one token
    ("Review#APIv2code" yields the tag "APIv2code"); well-spaced input is
    required to get word boundaries right.

    Args:
        content: Text with potential tag formatting issues

    Returns:
        Text with normalized tags

    Examples:
        >>> normalize_logseq_tags("This is a task #important")
        'This is a task #important'
        >>> normalize_logseq_tags("Deploy feature to#production environment")
        'Deploy feature to [[production]] environment'
    """

    def replace(match: re.Match) -> str:
        text = match.string
        start, end = match.span()
        before_char = text[start - 1] if start > 0 else ""
        after_char = text[end] if end < len(text) else ""

        has_content_after = after_char != "" and after_char != "\n"
        needs_space_before = before_char != "" and not before_char.isspace()
        needs_space_after = has_content_after and not after_char.isspace()

        replacement = f"[[{match.group(1)}]]" if has_content_after else match.group(0)

        if needs_space_before:
            replacement = " " + replacement
        if needs_space_after:
            replacement = replacement + " "

        return replacement

    return HASHTAG_PATTERN.sub(replace, content)
