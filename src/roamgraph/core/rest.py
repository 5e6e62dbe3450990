"""HTTP client for the graph's backend API.

Mirrors the in-process primitives (pull, q, block and page mutations) for
use outside the host application. Every call is one POST to a fixed
endpoint; the action name and graph name travel in the body and the
credentials in headers.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from roamgraph.config import Settings
from roamgraph.core.exceptions import ConfigurationError, RoamAPIError
from roamgraph.core.models import (
    Action,
    BasicBlock,
    BasicPage,
    BlockParams,
    ClientParams,
    Location,
    PageParams,
    RoamError,
)

logger = logging.getLogger(__name__)


def default_timeout() -> httpx.Timeout:
    return httpx.Timeout(connect=10.0, read=60.0, write=20.0, pool=10.0)


def _as_record(payload: Any, model: type[BaseModel]) -> Any:
    """Parse a mutation payload into model, or reduce it to a bool.

    The endpoint sometimes wraps the record in a one-element list.
    """
    if isinstance(payload, list) and len(payload) == 1 and isinstance(payload[0], dict):
        payload = payload[0]
    if isinstance(payload, dict):
        return model.model_validate(payload)
    return bool(payload)


class RestClient:
    """Async client for one graph.

    Credentials come from the arguments or, failing that, from
    ``ROAM_CLIENT_API_KEY`` / ``ROAM_CLIENT_API_TOKEN``. Missing credentials
    fail here, before any request is made.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_token: str | None = None,
        graph_name: str | None = None,
        content_type: str | None = None,
        api_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        config = Settings()
        self.api_key = api_key or config.api_key
        self.api_token = api_token or config.api_token
        self.graph_name = graph_name or config.graph_name
        self.content_type = content_type or config.content_type
        self.api_url = api_url or config.api_url

        if not self.api_key:
            raise ConfigurationError("API key missing: pass api_key or set ROAM_CLIENT_API_KEY")
        if not self.api_token:
            raise ConfigurationError("API token missing: pass api_token or set ROAM_CLIENT_API_TOKEN")
        if not self.graph_name:
            raise ConfigurationError("Graph name missing: pass graph_name or set ROAM_CLIENT_GRAPH_NAME")

        # an injected client stays open; its owner closes it
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=default_timeout())

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "x-api-token": self.api_token,
            "Content-Type": self.content_type,
        }

    def _params(self, action: Action, **kwargs: Any) -> ClientParams:
        return ClientParams(action=action, graph_name=self.graph_name, **kwargs)

    async def _post(self, params: ClientParams) -> Any:
        """Send one request and return the ``success`` payload."""
        logger.debug("POST %s action=%s graph=%s", self.api_url, params.action, self.graph_name)
        response = await self._client.post(self.api_url, json=params.to_body(), headers=self.headers)
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict) or "success" not in body:
            error = RoamError.model_validate(body if isinstance(body, dict) else {})
            raise RoamAPIError(
                error.raw or f"No success payload for {params.action}",
                status_code=error.status_code or response.status_code,
            )
        return body["success"]

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    async def pull(self, selector: str, uid: str) -> Any:
        return await self._post(self._params("pull", selector=selector, uid=uid))

    async def q(self, query: str, inputs: list[Any] | None = None) -> Any:
        return await self._post(self._params("q", query=query, inputs=inputs))

    # ------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------

    async def create_block(
        self,
        parent_uid: str,
        order: int,
        text: str,
        uid: str | None = None,
    ) -> BasicBlock | bool:
        params = self._params(
            "create-block",
            location=Location(parent_uid=parent_uid, order=order),
            block=BlockParams(string=text, uid=uid),
        )
        return _as_record(await self._post(params), BasicBlock)

    async def update_block(
        self,
        uid: str,
        text: str | None = None,
        open: bool | None = None,
    ) -> BasicBlock | bool:
        params = self._params("update-block", block=BlockParams(uid=uid, string=text, open=open))
        return _as_record(await self._post(params), BasicBlock)

    async def move_block(self, parent_uid: str, order: int, uid: str) -> bool:
        params = self._params(
            "move-block",
            location=Location(parent_uid=parent_uid, order=order),
            block=BlockParams(uid=uid),
        )
        return bool(await self._post(params))

    async def delete_block(self, uid: str) -> bool:
        return bool(await self._post(self._params("delete-block", block=BlockParams(uid=uid))))

    # ------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------

    async def create_page(self, title: str, uid: str | None = None) -> BasicPage | bool:
        params = self._params("create-page", page=PageParams(title=title, uid=uid))
        return _as_record(await self._post(params), BasicPage)

    async def update_page(self, uid: str, title: str) -> BasicPage | bool:
        params = self._params("update-page", page=PageParams(uid=uid, title=title))
        return _as_record(await self._post(params), BasicPage)

    async def delete_page(self, uid: str) -> bool:
        return bool(await self._post(self._params("delete-page", page=PageParams(uid=uid))))
