"""Shared fixtures: an in-memory stand-in for the host graph API."""

from typing import Any

import pytest

from roamgraph.core.graph import (
    BLOCK_BY_UID_QUERY,
    BLOCKS_REFERENCING_PAGE_QUERY,
    PAGE_BY_TITLE_QUERY,
    PAGE_IDS_QUERY,
    Graph,
)


class FakeRoamAPI:
    """Answers the queries roamgraph issues and applies its mutations.

    Records are stored the way ``pull`` returns them, keyed by internal id.
    Every mutation is also appended to ``calls``.
    """

    def __init__(self) -> None:
        self.records: dict[int, dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.pulls: list[Any] = []
        self._next_id = 1

    # -- building --------------------------------------------------

    def _new_id(self) -> int:
        db_id = self._next_id
        self._next_id += 1
        return db_id

    def add_page(self, title: str, uid: str | None = None) -> int:
        db_id = self._new_id()
        self.records[db_id] = {
            ":db/id": db_id,
            ":node/title": title,
            ":block/uid": uid or f"page-{db_id}",
        }
        return db_id

    def add_block(
        self,
        parent: int,
        text: str,
        order: int | None = None,
        uid: str | None = None,
        refs: tuple[int, ...] = (),
    ) -> int:
        db_id = self._new_id()
        parent_record = self.records[parent]
        siblings = parent_record.setdefault(":block/children", [])
        record: dict[str, Any] = {
            ":db/id": db_id,
            ":block/string": text,
            ":block/uid": uid or f"block-{db_id}",
            ":block/page": {":db/id": self._page_of(parent)},
        }
        if order is not None:
            record[":block/order"] = order
        if refs:
            record[":block/refs"] = [{":db/id": ref} for ref in refs]
        self.records[db_id] = record
        siblings.append({":db/id": db_id})
        return db_id

    def _page_of(self, db_id: int) -> int:
        record = self.records[db_id]
        if ":node/title" in record:
            return db_id
        return record[":block/page"][":db/id"]

    def _by_uid(self, uid: str) -> dict[str, Any] | None:
        return next((r for r in self.records.values() if r.get(":block/uid") == uid), None)

    # -- host API --------------------------------------------------

    def q(self, query: str, *inputs: Any) -> list[list[Any]]:
        if query == PAGE_BY_TITLE_QUERY:
            return [[i] for i, r in self.records.items() if r.get(":node/title") == inputs[0]]
        if query == BLOCK_BY_UID_QUERY:
            return [[i] for i, r in self.records.items() if r.get(":block/uid") == inputs[0]]
        if query == PAGE_IDS_QUERY:
            return [[i] for i, r in self.records.items() if ":node/title" in r and ":block/uid" in r]
        if query == BLOCKS_REFERENCING_PAGE_QUERY:
            pages = {i for i, r in self.records.items() if r.get(":node/title") == inputs[0]}
            return [
                [r[":block/uid"]]
                for r in self.records.values()
                if any(ref[":db/id"] in pages for ref in r.get(":block/refs", []))
            ]
        raise ValueError(f"Unsupported query: {query}")

    def pull(self, selector: str, eid: Any) -> dict[str, Any] | None:
        self.pulls.append(eid)
        record = self.records.get(eid)
        return dict(record) if record else None

    def create_block(self, params: dict[str, Any]) -> bool:
        self.calls.append(("create-block", params))
        parent = self._by_uid(params["location"]["parent-uid"])
        order = params["location"]["order"]
        if order == -1:
            order = len(parent.get(":block/children", []))
        self.add_block(parent[":db/id"], params["block"]["string"], order, params["block"].get("uid"))
        return True

    def update_block(self, params: dict[str, Any]) -> bool:
        self.calls.append(("update-block", params))
        record = self._by_uid(params["block"]["uid"])
        if "string" in params["block"]:
            record[":block/string"] = params["block"]["string"]
        return True

    def update_page(self, params: dict[str, Any]) -> bool:
        self.calls.append(("update-page", params))
        self._by_uid(params["page"]["uid"])[":node/title"] = params["page"]["title"]
        return True

    def move_block(self, params: dict[str, Any]) -> bool:
        self.calls.append(("move-block", params))
        return True

    def delete_block(self, params: dict[str, Any]) -> bool:
        self.calls.append(("delete-block", params))
        return True

    def create_page(self, params: dict[str, Any]) -> bool:
        self.calls.append(("create-page", params))
        self.add_page(params["page"]["title"], params["page"].get("uid"))
        return True

    def delete_page(self, params: dict[str, Any]) -> bool:
        self.calls.append(("delete-page", params))
        return True


@pytest.fixture
def api():
    return FakeRoamAPI()


@pytest.fixture
def graph(api):
    return Graph(api, graph_name="test-graph")


@pytest.fixture(autouse=True)
def away_from_dotenv(monkeypatch, tmp_path):
    """Run each test where no stray .env file can feed Settings."""
    monkeypatch.chdir(tmp_path)
