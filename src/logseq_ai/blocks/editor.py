"""Host editor interface and an in-memory implementation.

The Logseq host owns the real block tree. Everything in this package that
needs to read or write blocks goes through the BlockEditor protocol, which
mirrors the subset of the host Editor API the plugin uses. Blocks are plain
dicts shaped like the host's block entities:

    {"uuid": str, "content": str, "properties": dict,
     "parent": {"id": str} | None, "children": [block, ...]}
"""

import copy
import uuid
from typing import Any, Optional, Protocol


Block = dict[str, Any]


class BlockEditor(Protocol):
    """Subset of the host editor API used for block creation and lookup."""

    def insert_block(self, parent_uuid: str, content: str, sibling: bool = False) -> Optional[Block]:
        ...

    def update_block(self, block_uuid: str, content: str) -> None:
        ...

    def remove_block(self, block_uuid: str) -> None:
        ...

    def get_block(self, block_uuid: str, include_children: bool = False) -> Optional[Block]:
        ...


class InMemoryBlockEditor:
    """BlockEditor backed by a dict of blocks.

    Used to preview block plans from the CLI and as the host stand-in in
    tests. `render()` produces Logseq outline markdown (2 spaces per level).
    """

    def __init__(self, indent_str: str = "  "):
        self.indent_str = indent_str
        self._blocks: dict[str, Block] = {}
        self._roots: list[str] = []

    def add_block(
        self,
        content: str,
        parent_uuid: Optional[str] = None,
        properties: Optional[dict[str, Any]] = None,
        block_uuid: Optional[str] = None,
    ) -> str:
        """Seed a block directly (bypassing insert semantics) and return its UUID."""
        block_uuid = block_uuid or str(uuid.uuid4())
        self._blocks[block_uuid] = {
            "uuid": block_uuid,
            "content": content,
            "properties": dict(properties or {}),
            "parent": {"id": parent_uuid} if parent_uuid else None,
            "children": [],
        }
        if parent_uuid is None:
            self._roots.append(block_uuid)
        else:
            self._blocks[parent_uuid]["children"].append(block_uuid)
        return block_uuid

    def insert_block(self, parent_uuid: str, content: str, sibling: bool = False) -> Optional[Block]:
        """Insert a block as last child of `parent_uuid`, or right after it when `sibling`."""
        anchor = self._blocks.get(parent_uuid)
        if anchor is None:
            return None

        if not sibling:
            new_uuid = self.add_block(content, parent_uuid=parent_uuid)
            return self.get_block(new_uuid)

        parent_ref = anchor["parent"]
        grandparent_uuid = parent_ref["id"] if parent_ref else None
        new_uuid = self.add_block(content, parent_uuid=grandparent_uuid)

        # add_block appended; move it to just after the anchor
        siblings = self._blocks[grandparent_uuid]["children"] if grandparent_uuid else self._roots
        siblings.remove(new_uuid)
        siblings.insert(siblings.index(parent_uuid) + 1, new_uuid)
        return self.get_block(new_uuid)

    def update_block(self, block_uuid: str, content: str) -> None:
        if block_uuid not in self._blocks:
            raise KeyError(f"Block not found: {block_uuid}")
        self._blocks[block_uuid]["content"] = content

    def remove_block(self, block_uuid: str) -> None:
        block = self._blocks.get(block_uuid)
        if block is None:
            return
        for child_uuid in list(block["children"]):
            self.remove_block(child_uuid)

        parent_ref = block["parent"]
        if parent_ref:
            self._blocks[parent_ref["id"]]["children"].remove(block_uuid)
        else:
            self._roots.remove(block_uuid)
        del self._blocks[block_uuid]

    def get_block(self, block_uuid: str, include_children: bool = False) -> Optional[Block]:
        block = self._blocks.get(block_uuid)
        if block is None:
            return None

        result = copy.deepcopy(block)
        if include_children:
            result["children"] = [
                self.get_block(child_uuid, include_children=True)
                for child_uuid in block["children"]
            ]
        else:
            result["children"] = [{"uuid": child_uuid} for child_uuid in block["children"]]
        return result

    def render(self, root_uuid: Optional[str] = None) -> str:
        """Render the tree (or one subtree) as Logseq outline markdown."""
        lines: list[str] = []

        def render_block(block_uuid: str, depth: int) -> None:
            block = self._blocks[block_uuid]
            indent = self.indent_str * depth
            first, *rest = block["content"].split("\n")
            lines.append(f"{indent}- {first}" if first else f"{indent}-")
            for line in rest:
                lines.append(f"{indent}  {line}")
            for child_uuid in block["children"]:
                render_block(child_uuid, depth + 1)

        for block_uuid in ([root_uuid] if root_uuid else self._roots):
            render_block(block_uuid, 0)

        return "\n".join(lines)
