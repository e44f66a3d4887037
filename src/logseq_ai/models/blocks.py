"""Block plan and host-context models."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


ContextStrategy = Literal["none", "page", "block", "selection"]


class BlockInstruction(BaseModel):
    """Single block insertion in a plan.

    `parent` refers to an earlier instruction in the same plan by index,
    or is None when the block goes under the plan's target block.
    """

    content: str = Field(..., description="Block content to insert")

    parent: Optional[int] = Field(
        default=None,
        ge=0,
        description="Index of the parent instruction (None = target block)"
    )

    sibling: bool = Field(
        default=False,
        description="Insert as sibling of the parent instead of as a child"
    )

    model_config = {"frozen": True}


class BlockPlan(BaseModel):
    """Ordered block operations produced from one LLM response."""

    target_content: Optional[str] = Field(
        default=None,
        description="Replacement content for the target block itself (None = leave as is)"
    )

    instructions: list[BlockInstruction] = Field(default_factory=list)

    def add(self, content: str, parent: Optional[int] = None, sibling: bool = False) -> int:
        """Append an instruction and return its index for use as a parent."""
        if parent is not None and parent >= len(self.instructions):
            raise ValueError(f"Parent index {parent} does not refer to an earlier instruction")
        self.instructions.append(BlockInstruction(content=content, parent=parent, sibling=sibling))
        return len(self.instructions) - 1

    def is_empty(self) -> bool:
        return self.target_content is None and not self.instructions

    def children_of(self, parent: Optional[int]) -> list[int]:
        """Indices of instructions whose parent is `parent`."""
        return [i for i, instr in enumerate(self.instructions) if instr.parent == parent]


class RequestContext(BaseModel):
    """Text gathered from the host graph to accompany a prompt."""

    type: ContextStrategy = Field(..., description="Where the context came from")
    content: str = Field(default="", description="Indented block text")
    source_uuids: list[str] = Field(default_factory=list)
    estimated_tokens: int = Field(default=0, ge=0)
    was_truncated: bool = Field(default=False)
    metadata: Optional[dict[str, Any]] = Field(default=None)


class BlockPropertySet(BaseModel):
    """Resolved ai-generate-* overrides for a block (own values over inherited)."""

    block_uuid: str
    model: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    use_context: Optional[bool] = None
    streaming: Optional[bool] = None
    is_inherited: bool = False
