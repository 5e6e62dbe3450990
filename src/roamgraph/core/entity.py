"""Navigable views over pages and blocks.

An entity wraps one ``RawNode`` snapshot and a ``Graph``. Children are
looked up by position, by exact text, or by attribute name through
``Entity.get``:

    page = Page.from_name(graph, "Project")
    page.get(0)                          # first child block
    page.get("Status")                   # the "Status:: ..." child
    page.child_at_path(["Tasks", "0"])   # walk down

Entities are throwaway views. Nothing is cached, so every access re-reads
the graph.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from roamgraph.core.graph import APPEND_ORDER, BLOCK_BY_UID_QUERY, PAGE_BY_TITLE_QUERY, Graph, generate_uid
from roamgraph.core.models import RawNode, ViewType
from roamgraph.core.parser import (
    attribute_key,
    attribute_string,
    defines_attribute,
    extract_page_links,
    in_place_value,
    split_values,
    strip_block_ref,
)

logger = logging.getLogger(__name__)

INDEX_PATTERN = re.compile(r"-?\d+")


def _sibling_order(raw: RawNode) -> tuple[bool, int]:
    # Children without an order go last, keeping their fetch order.
    return raw.order is None, raw.order or 0


class Entity(ABC):
    """Shared behaviour of pages and blocks."""

    def __init__(self, graph: Graph, raw: RawNode):
        self.graph = graph
        self.raw = raw

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uid={self.uid!r}, text={self.text!r})"

    @abstractmethod
    def _read_text(self) -> str: ...

    @abstractmethod
    def set_text(self, value: str) -> Any:
        """Write new text through the graph. Returns the host's result."""
        ...

    @property
    def text(self) -> str:
        return self._read_text()

    @text.setter
    def text(self, value: str) -> None:
        self.set_text(value)

    @property
    def uid(self) -> str | None:
        return self.raw.uid

    @property
    def url(self) -> str:
        return self.graph.url_for_uid(self.uid)

    @property
    def raw_children(self) -> list[RawNode]:
        """Child records sorted by sibling order.

        The host returns children in arbitrary order, so they are pulled and
        sorted on every access.
        """
        pulled = (self.graph.pull(ref.db_id) for ref in self.raw.children or [])
        return sorted((child for child in pulled if child is not None), key=_sibling_order)

    @property
    def children(self) -> list["Block"]:
        return [Block(self.graph, raw) for raw in self.raw_children]

    def get(self, key: str | int) -> Any:
        """Look up a child by position, member name, text or attribute name.

        Resolution order:

        1. An integer (or integer string) indexes ``children``.
        2. A name of a member of this entity returns that member. Members
           shadow content, so a child whose text is ``"children"`` cannot be
           reached this way; use ``child_with_value`` instead.
        3. The first non-empty of: the child whose text equals ``key``; the
           first child declaring ``key::``; every child matching ``key`` as
           a regex.

        Returns None when nothing matches.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            return self._child_at_index(key)
        if INDEX_PATTERN.fullmatch(key):
            return self._child_at_index(int(key))

        if key in dir(self):
            return getattr(self, key)

        exact = self.child_with_value(key)
        if exact:
            return exact
        try:
            declared = self.children_matching(f"^{key}::")
            if declared:
                return declared[0]
            return self.children_matching(key)
        except re.error:
            logger.debug("Key %r is not a valid pattern, skipping pattern lookup", key)
            return None

    child = get

    def __getitem__(self, key: str | int) -> Any:
        return self.get(key)

    # __getitem__ never raises IndexError, so iteration and ``in`` are
    # defined over children instead of falling back to it.
    def __iter__(self) -> Iterator["Block"]:
        return iter(self.children)

    def __contains__(self, text: object) -> bool:
        return any(child.text == text for child in self.children)

    def _child_at_index(self, index: int) -> "Block | None":
        if index < 0:
            return None
        children = self.children
        return children[index] if index < len(children) else None

    def child_with_value(self, content: str) -> "Block | None":
        return next((child for child in self.children if child.text == content), None)

    def child_at_path(self, path: list[str | int]) -> Any:
        """Apply ``get`` along path, stopping at the first absent step."""
        current: Any = self
        for key in path:
            if not isinstance(current, Entity):
                return None
            current = current.get(key)
        return current

    def children_matching(self, regex: "str | re.Pattern[str]") -> list["Block"] | None:
        """Children whose text matches regex anywhere, or None if none do."""
        pattern = re.compile(regex)
        result = [child for child in self.children if pattern.search(child.text)]
        return result or None

    @property
    def linked_entities(self) -> list[RawNode | None] | None:
        """Records this entity references. Pages and blocks come mixed."""
        if self.raw.refs is None:
            return None
        return [self.graph.pull(ref.db_id) for ref in self.raw.refs]

    def set_attribute(self, name: str, value: str) -> str | None:
        """Write ``name::value`` into the matching child, or append one.

        The existing child is found with ``get``, so any child that ``get``
        resolves for ``name`` is overwritten. Returns the uid of the block
        holding the attribute.
        """
        existing = self.get(name)
        if isinstance(existing, list):
            existing = existing[0] if existing else None
        if isinstance(existing, Entity):
            existing.set_as_attribute(name, value)
            return existing.uid

        return self.append_child(attribute_string(name, value))

    def set_as_attribute(self, name: str, value: str) -> Any:
        return self.set_text(attribute_string(name, value))

    def append_child(self, text: str) -> str:
        """Create a child block after the last one. Returns its new uid."""
        uid = generate_uid()
        self.graph.create_block(self.uid, text, order=APPEND_ORDER, uid=uid)
        return uid


class Page(Entity):
    """A top-level, title-addressed node."""

    @classmethod
    def from_name(cls, graph: Graph, name: str) -> "Page | None":
        raw = graph.query_first(PAGE_BY_TITLE_QUERY, name)
        return cls(graph, raw) if raw else None

    def _read_text(self) -> str:
        return self.raw.title or ""

    def set_text(self, value: str) -> Any:
        return self.graph.update_page(self.uid, value)


class Block(Entity):
    """A nested block with free text content."""

    @classmethod
    def from_uid(cls, graph: Graph, uid: str) -> "Block | None":
        """Load a block by uid. Accepts the ``((uid))`` reference form too."""
        raw = graph.query_first(BLOCK_BY_UID_QUERY, strip_block_ref(uid))
        return cls(graph, raw) if raw else None

    def _read_text(self) -> str:
        return self.raw.string or ""

    def set_text(self, value: str) -> Any:
        return self.graph.update_block(self.uid, text=value)

    @property
    def container_page(self) -> Page | None:
        if self.raw.page is None:
            return None
        raw = self.graph.pull(self.raw.page.db_id)
        return Page(self.graph, raw) if raw else None

    @property
    def is_open(self) -> bool:
        return self.raw.open is not False

    @property
    def heading(self) -> int:
        return self.raw.heading or 0

    @property
    def view_type(self) -> ViewType:
        return self.raw.view_type or ViewType.BULLET

    @property
    def page_links(self) -> list[str]:
        return extract_page_links(self.text)

    @property
    def attribute_name(self) -> str | None:
        return attribute_key(self.text)

    @property
    def attribute_value(self) -> str | None:
        """The same-line value. Values may also live in child blocks."""
        return in_place_value(self.text)

    @property
    def defines_attribute(self) -> bool:
        return defines_attribute(self.text)

    def list_attribute_values(self, split_regex: "str | re.Pattern[str] | None" = None) -> list[str]:
        """In-place values followed by the text of each child block."""
        if not self.defines_attribute:
            return []

        children_values = [child.text for child in self.children]
        return self.list_in_place_attribute_values(split_regex) + children_values

    def list_in_place_attribute_values(self, split_regex: "str | re.Pattern[str] | None" = None) -> list[str]:
        value = in_place_value(self.text)
        if value is None:
            return []
        return split_values(value, split_regex)
