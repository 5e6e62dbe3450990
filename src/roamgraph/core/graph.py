"""Graph accessor over the host application's query/mutation API.

The host API is whatever object exposes ``q``, ``pull`` and the block/page
mutation primitives (see ``RoamAPI``). A ``Graph`` wraps one such object and
is passed explicitly to every entity, so tests can substitute a fake.
"""

import logging
import secrets
import string
from collections.abc import Mapping
from typing import Any, Protocol

from roamgraph.config import Settings
from roamgraph.core.exceptions import ConfigurationError
from roamgraph.core.models import BlockParams, Location, NodeRef, PageParams, RawNode

logger = logging.getLogger(__name__)

PAGE_BY_TITLE_QUERY = "[:find ?e :in $ ?a :where [?e :node/title ?a]]"
BLOCK_BY_UID_QUERY = "[:find ?e :in $ ?a :where [?e :block/uid ?a]]"
PAGE_IDS_QUERY = "[:find ?page :where [?page :node/title ?title] [?page :block/uid ?uid]]"
BLOCKS_REFERENCING_PAGE_QUERY = (
    "[:find ?uid :in $ ?title :where [?page :node/title ?title] "
    "[?block :block/refs ?page] [?block :block/uid ?uid]]"
)

# Sibling order the host reads as "insert after the last child"
APPEND_ORDER = -1

UID_ALPHABET = string.ascii_letters + string.digits + "-_"
UID_LENGTH = 9


class RoamAPI(Protocol):
    """The primitives the host application provides."""

    def q(self, query: str, *inputs: Any) -> list[list[Any]]: ...

    def pull(self, selector: str, eid: Any) -> Mapping[str, Any] | None: ...

    def create_block(self, params: dict[str, Any]) -> Any: ...

    def update_block(self, params: dict[str, Any]) -> Any: ...

    def move_block(self, params: dict[str, Any]) -> Any: ...

    def delete_block(self, params: dict[str, Any]) -> Any: ...

    def create_page(self, params: dict[str, Any]) -> Any: ...

    def update_page(self, params: dict[str, Any]) -> Any: ...

    def delete_page(self, params: dict[str, Any]) -> Any: ...


def generate_uid() -> str:
    """Generate a block uid in the host's nine-character format."""
    return "".join(secrets.choice(UID_ALPHABET) for _ in range(UID_LENGTH))


def _node_id(node: Any) -> Any:
    """Extract the internal id from a ref stub, record, mapping or bare id."""
    if isinstance(node, (NodeRef, RawNode)):
        return node.db_id
    if isinstance(node, Mapping):
        return node.get(":db/id")
    return node


class Graph:
    """Facade over one host API connection.

    Every read is a fresh round trip; nothing is cached.
    """

    def __init__(
        self,
        api: RoamAPI,
        graph_name: str | None = None,
        app_url: str | None = None,
    ):
        config = Settings()
        self.api = api
        self.graph_name = graph_name or config.graph_name
        self.app_url = app_url or config.app_url

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def query(self, query: str, *params: Any) -> list[Any]:
        """Run a datalog query and return its result rows."""
        return list(self.api.q(query, *params) or [])

    def pull(self, id: Any, selector: str = "[*]") -> RawNode | None:
        """Pull one record by internal id. Returns None if absent."""
        if not id:
            logger.warning("Refusing to pull with empty id %r", id)
            return None

        result = self.api.pull(selector, id)
        if not result:
            return None
        if isinstance(result, RawNode):
            return result
        return RawNode.model_validate(result)

    def query_first(self, query: str, *params: Any) -> RawNode | None:
        """Pull the record whose id is in the first column of the first row."""
        results = self.query(query, *params)
        if not results or not results[0]:
            return None

        return self.pull(results[0][0])

    def list_page_ids(self) -> list[Any]:
        """Ids of every record that has both a title and a uid."""
        return [value for row in self.query(PAGE_IDS_QUERY) for value in row]

    def list_pages(self) -> list[RawNode]:
        pages = (self.pull(db_id) for db_id in self.list_page_ids())
        return [page for page in pages if page is not None]

    def get_uid(self, node: Any) -> str | None:
        """Return the uid of the record a ref stub points at."""
        raw = self.pull(_node_id(node))
        return raw.uid if raw else None

    def block_uids_referencing_page(self, title: str) -> list[str]:
        """Uids of the blocks whose references include the titled page."""
        return [row[0] for row in self.query(BLOCKS_REFERENCING_PAGE_QUERY, title) if row]

    def url_for_uid(self, uid: str) -> str:
        """Deep link into the app for a page or block uid."""
        if not self.graph_name:
            raise ConfigurationError("Graph name missing: pass graph_name or set ROAM_CLIENT_GRAPH_NAME")
        return f"{self.app_url}/#/app/{self.graph_name}/page/{uid}"

    # ------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------

    def create_block(
        self,
        parent_uid: str,
        text: str,
        order: int = APPEND_ORDER,
        uid: str | None = None,
    ) -> Any:
        """Create a block under parent_uid. Returns the host's result."""
        logger.debug("Creating block under %s at order %d", parent_uid, order)
        return self.api.create_block(
            {
                "location": Location(parent_uid=parent_uid, order=order).model_dump(by_alias=True),
                "block": BlockParams(string=text, uid=uid).model_dump(exclude_none=True),
            }
        )

    def update_block(self, uid: str, text: str | None = None, open: bool | None = None) -> Any:
        logger.debug("Updating block %s", uid)
        return self.api.update_block(
            {"block": BlockParams(uid=uid, string=text, open=open).model_dump(exclude_none=True)}
        )

    def move_block(self, uid: str, parent_uid: str, order: int = APPEND_ORDER) -> Any:
        logger.debug("Moving block %s under %s at order %d", uid, parent_uid, order)
        return self.api.move_block(
            {
                "location": Location(parent_uid=parent_uid, order=order).model_dump(by_alias=True),
                "block": {"uid": uid},
            }
        )

    def delete_block(self, uid: str) -> Any:
        logger.debug("Deleting block %s", uid)
        return self.api.delete_block({"block": {"uid": uid}})

    def create_page(self, title: str, uid: str | None = None) -> Any:
        logger.debug("Creating page %r", title)
        return self.api.create_page(
            {"page": PageParams(title=title, uid=uid).model_dump(exclude_none=True)}
        )

    def update_page(self, uid: str, title: str) -> Any:
        logger.debug("Renaming page %s to %r", uid, title)
        return self.api.update_page({"page": {"uid": uid, "title": title}})

    def delete_page(self, uid: str) -> Any:
        logger.debug("Deleting page %s", uid)
        return self.api.delete_page({"page": {"uid": uid}})
