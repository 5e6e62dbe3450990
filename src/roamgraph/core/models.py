"""Data models for roamgraph.

Raw records mirror the keyword keys the host graph returns from ``pull``
(``:block/uid``, ``:node/title`` ...). Wire models mirror the request and
response bodies of the REST endpoint.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ViewType(str, Enum):
    """How a block renders its children."""

    DOCUMENT = "document"
    BULLET = "bullet"
    NUMBERED = "numbered"


class NodeRef(BaseModel):
    """A reference stub carrying only the internal entity id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    db_id: int = Field(alias=":db/id")


class RawNode(BaseModel):
    """Snapshot of one page or block record as returned by ``pull``.

    Pages carry ``title``; blocks carry ``string``, ``order`` and ``page``.
    Keys the model does not name are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    db_id: int | None = Field(default=None, alias=":db/id")
    uid: str | None = Field(default=None, alias=":block/uid")
    string: str | None = Field(default=None, alias=":block/string")
    title: str | None = Field(default=None, alias=":node/title")
    order: int | None = Field(default=None, alias=":block/order")
    children: list[NodeRef] | None = Field(default=None, alias=":block/children")
    refs: list[NodeRef] | None = Field(default=None, alias=":block/refs")
    page: NodeRef | None = Field(default=None, alias=":block/page")
    open: bool | None = Field(default=None, alias=":block/open")
    heading: int | None = Field(default=None, alias=":block/heading")
    view_type: ViewType | None = Field(default=None, alias=":children/view-type")
    edit_time: int | None = Field(default=None, alias=":edit/time")
    create_time: int | None = Field(default=None, alias=":create/time")

    @field_validator("view_type", mode="before")
    @classmethod
    def _strip_keyword_colon(cls, value: Any) -> Any:
        # the host sends keywords such as ":bullet"
        if isinstance(value, str):
            return value.lstrip(":")
        return value

    @property
    def is_page(self) -> bool:
        """Pages are the only records with a title."""
        return self.title is not None


class RoamError(BaseModel):
    """Error body the endpoint sends in place of ``success``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    raw: str | None = None
    status_code: int | None = Field(default=None, alias="status-code")


class BasicBlock(BaseModel):
    """Block record echoed back by block mutations."""

    model_config = ConfigDict(extra="allow")

    string: str | None = None
    uid: str | None = None


class BasicPage(BaseModel):
    """Page record echoed back by page mutations."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    uid: str | None = None


Action = Literal[
    "pull",
    "q",
    "create-block",
    "update-block",
    "create-page",
    "move-block",
    "delete-block",
    "delete-page",
    "update-page",
]


class Location(BaseModel):
    """Where a block goes: parent uid and sibling order."""

    model_config = ConfigDict(populate_by_name=True)

    parent_uid: str = Field(alias="parent-uid")
    order: int


class BlockParams(BaseModel):
    string: str | None = None
    uid: str | None = None
    open: bool | None = None


class PageParams(BaseModel):
    title: str | None = None
    uid: str | None = None


class ClientParams(BaseModel):
    """Request body sent to the REST endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    action: Action
    graph_name: str = Field(alias="graph-name")
    selector: str | None = None
    uid: str | None = None
    query: str | None = None
    inputs: list[Any] | None = None
    location: Location | None = None
    block: BlockParams | None = None
    page: PageParams | None = None

    def to_body(self) -> dict[str, Any]:
        """Serialize with wire aliases, leaving out unset keys."""
        return self.model_dump(by_alias=True, exclude_none=True)
