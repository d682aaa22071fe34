"""HTTP implementations of the collaborator ABCs, backed by httpx.

All three talk to one API base URL:

    GET  {api_url}/properties   property catalog
    POST {api_url}/chat         conversational assistant
    POST {api_url}/leads        lead intake
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from leadbot.config import settings
from leadbot.models.property import PropertySnapshot

from .base import (
    AssistantBackend,
    AssistantReply,
    AssistantRequest,
    LeadIntake,
    MalformedResponse,
    PropertyCatalog,
    RemoteServiceError,
)

log = logging.getLogger("leadbot.backends.http")


class _HttpBackend:
    """Shared request plumbing.

    A caller-supplied ``client`` is reused across calls (and is how tests
    inject ``httpx.MockTransport``); otherwise each call opens its own.
    """

    def __init__(
        self,
        api_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = (api_url or settings.api_url).rstrip("/")
        self._timeout = settings.request_timeout if timeout is None else timeout
        self._client = client

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._api_url}{path}"
        try:
            if self._client is not None:
                resp = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteServiceError(
                f"{method} {path} returned status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"{method} {path} failed: {exc}") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponse(f"{method} {path} returned non-JSON body") from exc


class HttpPropertyCatalog(_HttpBackend, PropertyCatalog):
    async def fetch(self) -> PropertySnapshot | None:
        body = await self._request("GET", "/properties")
        if not isinstance(body, dict) or not body.get("success") or not body.get("data"):
            log.info("Catalog returned no property")
            return None
        try:
            return PropertySnapshot.from_catalog(body["data"])
        except (KeyError, TypeError, ValidationError) as exc:
            raise MalformedResponse(f"Unexpected property payload: {exc}") from exc


class HttpAssistantBackend(_HttpBackend, AssistantBackend):
    async def chat(self, request: AssistantRequest) -> AssistantReply:
        body = await self._request(
            "POST", "/chat",
            json=request.model_dump(mode="json", by_alias=True),
        )
        try:
            return AssistantReply.model_validate(body)
        except ValidationError as exc:
            raise MalformedResponse(f"Unexpected assistant payload: {exc}") from exc


class HttpLeadIntake(_HttpBackend, LeadIntake):
    async def submit(self, envelope: dict[str, Any]) -> None:
        await self._request("POST", "/leads", json=envelope)
