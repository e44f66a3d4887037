"""List marker normalization, nested list parsing and flattening.

Logseq blocks cannot reliably represent arbitrary markdown indentation, so
LLM lists are rewritten to a single "- " marker and flattened to one level
before they are inserted.
"""

import re

from logseq_ai.models.formatting import ListNode


# Any list item: "-", "*", "+" or "1." followed by whitespace and content
LIST_ITEM_PATTERN = re.compile(r"^(\s*)(-|\*|\+|\d+\.)\s+(.+)$")

# Non-dash list items only (dash items are already canonical)
NON_DASH_ITEM_PATTERN = re.compile(r"^(\s*)(\*|\+|\d+\.)\s+(.+)$")


def normalize_list_prefixes(content: str) -> str:
    """
    Normalize list prefixes to a consistent "- " marker.

    Handles "*", "+" and numbered ("1.", "2.", ...) items. Indentation is
    preserved here and removed later by flatten_nested_lists().

    Args:
        content: Text with various list formats

    Returns:
        Text with every list marker rewritten to "-"

    Example:
        >>> normalize_list_prefixes("* Item 1\\n  1. Nested item")
        '- Item 1\\n  - Nested item'
    """
    normalized = []

    for line in content.split("\n"):
        match = NON_DASH_ITEM_PATTERN.match(line)
        if match:
            spaces, _marker, text = match.groups()
            normalized.append(f"{spaces}- {text}")
        else:
            normalized.append(line)

    return "\n".join(normalized)


def flatten_nested_lists(content: str) -> str:
    """
    Flatten nested lists by removing indentation.

    Every list item becomes a top-level "- " item regardless of its depth.
    Non-list lines, including blank lines, are kept verbatim. This is a
    line-by-line rewrite; depth information is discarded.

    Args:
        content: Text with potentially nested lists

    Returns:
        Text with flattened lists

    Example:
        >>> flatten_nested_lists("- Level 1\\n  - Level 2\\n    * Level 3")
        '- Level 1\\n- Level 2\\n- Level 3'
    """
    flattened = []

    for line in content.split("\n"):
        match = LIST_ITEM_PATTERN.match(line)
        if match:
            flattened.append(f"- {match.group(3)}")
        else:
            flattened.append(line)

    return "\n".join(flattened)


def parse_nested_list(content: str) -> list[ListNode]:
    """
    Parse an indented list into a forest of ListNode.

    Depth is inferred by comparing each item's leading whitespace with the
    indentation of its would-be ancestors rather than by a fixed divisor:
    ancestors indented at least as deep as the current item are closed, and
    the item becomes a child of whatever remains open (or a new root).
    Lines that are not list items are skipped.

    Args:
        content: Text containing list items

    Returns:
        Root nodes in source order

    Example:
        >>> roots = parse_nested_list("- Parent\\n  - Child\\n- Next")
        >>> [(n.content, len(n.children)) for n in roots]
        [('Parent', 1), ('Next', 0)]
    """
    roots: list[ListNode] = []
    # (indent width, node) for every open ancestor
    stack: list[tuple[int, ListNode]] = []

    for line in content.split("\n"):
        match = LIST_ITEM_PATTERN.match(line)
        if not match:
            continue

        indent = len(match.group(1))
        while stack and stack[-1][0] >= indent:
            stack.pop()

        node = ListNode(content=match.group(3).strip(), level=len(stack))

        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)

        stack.append((indent, node))

    return roots


def max_list_depth(content: str) -> int:
    """Deepest nesting of list items in content (0 when there are none)."""
    return max((root.depth() for root in parse_nested_list(content)), default=0)
