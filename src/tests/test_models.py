"""Unit tests for raw records and wire models."""

import pytest
from pydantic import ValidationError

from roamgraph.core.models import BlockParams, ClientParams, Location, RawNode, ViewType


class TestRawNode:
    def test_block_record(self):
        raw = RawNode.model_validate(
            {
                ":db/id": 7,
                ":block/uid": "abc",
                ":block/string": "hello",
                ":block/order": 2,
                ":block/children": [{":db/id": 8}, {":db/id": 9}],
                ":block/page": {":db/id": 1},
                ":block/open": False,
                ":children/view-type": ":numbered",
            }
        )
        assert raw.uid == "abc"
        assert raw.string == "hello"
        assert raw.order == 2
        assert [ref.db_id for ref in raw.children] == [8, 9]
        assert raw.page.db_id == 1
        assert raw.open is False
        assert raw.is_page is False
        assert raw.view_type is ViewType.NUMBERED

    def test_page_record(self):
        raw = RawNode.model_validate({":db/id": 1, ":block/uid": "p", ":node/title": "Home"})
        assert raw.is_page
        assert raw.children is None
        assert raw.refs is None
        assert raw.view_type is None

    @pytest.mark.parametrize(
        "value, expected",
        [(":bullet", ViewType.BULLET), ("document", ViewType.DOCUMENT)],
    )
    def test_view_type_keyword(self, value, expected):
        raw = RawNode.model_validate({":db/id": 3, ":children/view-type": value})
        assert raw.view_type is expected

    def test_unknown_view_type_rejected(self):
        with pytest.raises(ValidationError):
            RawNode.model_validate({":db/id": 3, ":children/view-type": ":grid"})

    def test_frozen(self):
        raw = RawNode.model_validate({":db/id": 1, ":node/title": "Home"})
        with pytest.raises(ValidationError):
            raw.title = "Other"


class TestClientParams:
    def test_body_uses_wire_names(self):
        params = ClientParams(
            action="create-block",
            graph_name="g",
            location=Location(parent_uid="p", order=0),
            block=BlockParams(string="s"),
        )
        assert params.to_body() == {
            "action": "create-block",
            "graph-name": "g",
            "location": {"parent-uid": "p", "order": 0},
            "block": {"string": "s"},
        }

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError):
            ClientParams(action="drop-graph", graph_name="g")
