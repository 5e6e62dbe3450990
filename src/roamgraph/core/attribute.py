"""Attribute pages and the values declared for them across the graph."""

from collections import Counter

from roamgraph.core.entity import Block, Page


class Attribute(Page):
    """A page whose title is used as an attribute key.

    Every block that references the page (``Status:: [[Done]]`` references
    ``Status``) contributes its declared values. Values are recomputed from
    back-references on every call.
    """

    def _referencing_blocks(self) -> list[Block]:
        blocks = (Block.from_uid(self.graph, uid) for uid in self.graph.block_uids_referencing_page(self.text))
        return [block for block in blocks if block is not None]

    def get_all_values(self) -> list[str]:
        """Values of every referencing block, in back-reference order."""
        return [value for block in self._referencing_blocks() for value in block.list_attribute_values()]

    def get_unique_values(self) -> set[str]:
        return set(self.get_all_values())

    def get_values_by_count(self) -> list[tuple[str, int]]:
        """(value, count) pairs, most frequent first."""
        counts = Counter(self.get_all_values())
        return sorted(counts.items(), key=lambda item: item[1])[::-1]

    def find_blocks_with_value(self, value: str) -> list[Block]:
        """Blocks that reference both this attribute and the page titled value.

        This is co-occurrence only: a block referencing both pages anywhere
        in its text matches, whether or not value sits in the attribute slot.
        """
        value_blocks = set(self.graph.block_uids_referencing_page(value))
        shared = dict.fromkeys(uid for uid in self.graph.block_uids_referencing_page(self.text) if uid in value_blocks)
        blocks = (Block.from_uid(self.graph, uid) for uid in shared)
        return [block for block in blocks if block is not None]
