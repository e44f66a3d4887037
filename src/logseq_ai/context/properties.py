"""Block property overrides with inheritance from ancestor blocks.

A block can override model settings with ai-generate-* properties; children
inherit them. Resolved sets are kept in a PropertyCache owned by the caller,
who invalidates entries when blocks change.
"""

from typing import Any, Callable, Optional

from logseq_ai.blocks.editor import BlockEditor
from logseq_ai.models.blocks import BlockPropertySet
from logseq_ai.utils.logging import get_logger


logger = get_logger(__name__)


def _validate_model(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Model name must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Model name cannot be empty")
    return trimmed


def _number_in_range(name: str, low: float, high: float) -> Callable[[Any], float]:
    def validate(value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be a number") from None
        if not low <= number <= high:
            raise ValueError(f"{name} must be between {low} and {high}")
        return number

    return validate


def _validate_max_tokens(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError("Max tokens must be an integer") from None
    if number <= 0:
        raise ValueError("Max tokens must be positive")
    return number


def _validate_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in ("true", "yes", "1"):
            return True
        if lower in ("false", "no", "0"):
            return False
    raise ValueError("Value must be a boolean (true/false)")


# property name -> (BlockPropertySet field, validator)
AI_PROPERTIES: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "ai-generate-model": ("model", _validate_model),
    "ai-generate-temperature": ("temperature", _number_in_range("Temperature", 0.0, 2.0)),
    "ai-generate-top_p": ("top_p", _number_in_range("Top P", 0.0, 1.0)),
    "ai-generate-max_tokens": ("max_tokens", _validate_max_tokens),
    "ai-generate-use_context": ("use_context", _validate_bool),
    "ai-generate-streaming": ("streaming", _validate_bool),
}


class PropertyCache:
    """Cache of resolved property sets keyed by block UUID."""

    def __init__(self) -> None:
        self._entries: dict[str, BlockPropertySet] = {}

    def get(self, block_uuid: str) -> Optional[BlockPropertySet]:
        return self._entries.get(block_uuid)

    def put(self, properties: BlockPropertySet) -> None:
        self._entries[properties.block_uuid] = properties

    def invalidate(self, block_uuid: str) -> None:
        """Drop one block's entry (descendants that inherited from it are not tracked; use clear())."""
        self._entries.pop(block_uuid, None)

    def clear(self) -> None:
        logger.debug("property_cache_cleared", size=len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, block_uuid: object) -> bool:
        return block_uuid in self._entries


def extract_block_properties(block: dict[str, Any]) -> dict[str, Any]:
    """
    Extract valid ai-generate-* overrides from a host block.

    Invalid values are logged and ignored.

    Args:
        block: Host block dict

    Returns:
        Mapping of BlockPropertySet field names to validated values
    """
    raw = block.get("properties") or {}
    properties: dict[str, Any] = {}

    for key, value in raw.items():
        if key not in AI_PROPERTIES:
            continue
        field_name, validate = AI_PROPERTIES[key]
        try:
            properties[field_name] = validate(value)
        except ValueError as e:
            logger.warning(
                "invalid_block_property",
                block_uuid=block.get("uuid"),
                property=key,
                value=value,
                error=str(e),
            )

    return properties


def _parent_uuid(block: dict[str, Any]) -> Optional[str]:
    parent = block.get("parent")
    if isinstance(parent, dict):
        parent = parent.get("id")
    if isinstance(parent, (str, int)) and not isinstance(parent, bool):
        return str(parent)
    return None


def _inherited_properties(editor: BlockEditor, block: dict[str, Any]) -> dict[str, Any]:
    # Walk up to the root, nearer ancestors overriding farther ones
    chain = []
    seen = {block.get("uuid")}
    parent_uuid = _parent_uuid(block)

    while parent_uuid and parent_uuid not in seen:
        seen.add(parent_uuid)
        parent = editor.get_block(parent_uuid)
        if parent is None:
            break
        chain.append(extract_block_properties(parent))
        parent_uuid = _parent_uuid(parent)

    inherited: dict[str, Any] = {}
    for properties in reversed(chain):
        inherited.update(properties)
    return inherited


def resolve_block_properties(
    editor: BlockEditor, block_uuid: str, cache: Optional[PropertyCache] = None
) -> BlockPropertySet:
    """
    Resolve a block's ai-generate-* overrides including inherited ones.

    Args:
        editor: Host editor used to read the block and its ancestors
        block_uuid: Block to resolve
        cache: Optional cache consulted first and filled on success

    Returns:
        Merged BlockPropertySet; an empty set if the block is missing or the
        host lookup fails
    """
    if cache is not None and (cached := cache.get(block_uuid)) is not None:
        logger.debug("block_properties_cache_hit", block_uuid=block_uuid)
        return cached

    try:
        block = editor.get_block(block_uuid)
        if block is None:
            logger.warning("block_not_found", block_uuid=block_uuid)
            return BlockPropertySet(block_uuid=block_uuid)

        own = extract_block_properties(block)
        inherited = _inherited_properties(editor, block)

    except Exception as e:
        logger.error("block_properties_failed", block_uuid=block_uuid, error=str(e))
        return BlockPropertySet(block_uuid=block_uuid)

    resolved = BlockPropertySet(
        block_uuid=block_uuid,
        is_inherited=not own,
        **{**inherited, **own},
    )

    if cache is not None:
        cache.put(resolved)

    logger.debug("block_properties_resolved", block_uuid=block_uuid, properties=resolved.model_dump())
    return resolved
