"""Custom exceptions for logseq-ai."""

from logseq_ai.models.formatting import TASK_MARKERS


class InvalidMarkerError(ValueError):
    """Raised when a task marker is not one Logseq's task system recognizes.

    Attributes:
        marker: The rejected marker token
    """

    def __init__(self, marker: str):
        """Initialize InvalidMarkerError.

        Args:
            marker: The rejected marker token
        """
        self.marker = marker
        super().__init__(
            f"Unknown task marker: {marker!r} (expected one of: {', '.join(TASK_MARKERS)})"
        )


class BlockPlanError(RuntimeError):
    """Raised when a block plan cannot be applied to the host editor.

    Attributes:
        block_uuid: UUID of the block the plan targeted
        message: Human-readable error message
    """

    def __init__(self, block_uuid: str, message: str = "Target block not found"):
        self.block_uuid = block_uuid
        self.message = message
        super().__init__(f"{message}: {block_uuid}")
