"""Formatting models: options, validation results, flashcards and list trees."""

from dataclasses import dataclass, field
from typing import Iterator, Literal

from pydantic import BaseModel, Field, computed_field


CommandType = Literal["ask", "summarize", "flashcard", "tasks", "custom"]

# Task markers recognized by Logseq's task system
TASK_MARKERS = ("TODO", "DOING", "DONE", "LATER", "NOW", "WAITING", "CANCELLED")


class FormatterOptions(BaseModel):
    """Options controlling one run of the sanitization pipeline."""

    enable_formatting: bool = Field(
        default=True,
        description="Run the pipeline at all (False passes content through untouched)"
    )

    log_modifications: bool = Field(
        default=True,
        description="Emit a diagnostic record listing the applied modifications"
    )

    preserve_code_blocks: bool = Field(
        default=False,
        description="Keep fenced code blocks instead of extracting or removing them"
    )

    command_type: CommandType = Field(
        default="ask",
        description="Command that produced the content (flashcards bypass the pipeline)"
    )

    model_config = {"frozen": True}


class ValidationResult(BaseModel):
    """Outcome of a read-only hierarchy check.

    `is_valid` only reflects `errors`; content with warnings is still valid.
    """

    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.errors


class FlashcardBlock(BaseModel):
    """One entry of a flashcard block sequence.

    A multi-line answer becomes one `answer` entry carrying the #card tag
    (`has_card=True`) followed by untagged continuation entries.
    """

    type: Literal["question", "answer"] = Field(..., description="Question or answer entry")
    content: str = Field(..., description="Block text as it will be inserted")
    has_card: bool = Field(default=False, description="Whether this entry carries #card")

    model_config = {"frozen": True}


@dataclass
class ListNode:
    """Single list item parsed from indented markdown.

    Attributes:
        content: Item text without marker or indentation
        level: Depth in the parsed tree (0 = root item)
        children: Nested items in source order
    """

    content: str
    level: int = 0
    children: list["ListNode"] = field(default_factory=list)

    def walk(self) -> Iterator["ListNode"]:
        """Yield this node and all descendants depth-first, in source order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def depth(self) -> int:
        """Number of levels in this subtree (a leaf has depth 1)."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            node, depth = stack.pop()
            deepest = max(deepest, depth)
            stack.extend((child, depth + 1) for child in node.children)
        return deepest
