"""httpx-backed deployment API client."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from launchpad.api.errors import ApiError
from launchpad.api.types import DeploymentRequest, DeploymentSource, EnvironmentDescriptor, SourceValidation

logger = logging.getLogger(__name__)


class HttpDeploymentApi:
    def __init__(
        self,
        *,
        base_url: str | None,
        token: str | None = None,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required for HttpDeploymentApi.")
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout_s, transport=transport)

    async def validate_source(self, property_identifier: str, source: DeploymentSource) -> SourceValidation:
        data = await self._request("POST", "/applications/validate", json=source.to_body(property_identifier))
        payload = _unwrap(data)
        port = payload.get("port")
        if port is None:
            raise ApiError(
                status_code=None,
                message="Validation response did not include a port.",
                response_text=str(data),
                endpoint="/applications/validate",
            )
        return SourceValidation(port=str(port), raw=payload)

    async def create_deployment(self, request: DeploymentRequest) -> dict[str, Any]:
        data = await self._request("POST", "/applications/deploy", json=request.to_dict())
        return _unwrap(data)

    async def list_environments(self, property_identifier: str) -> dict[str, EnvironmentDescriptor]:
        data = await self._request("GET", f"/properties/{quote(property_identifier, safe='')}/environments")
        payload = _unwrap(data)
        return {name: EnvironmentDescriptor.from_payload(name, value) for name, value in payload.items()}

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpDeploymentApi":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        try:
            response = await self._client.request(method, endpoint, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed without a response: %s", method, endpoint, exc)
            raise ApiError(status_code=None, message=None, response_text=str(exc), endpoint=endpoint) from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise ApiError(
                status_code=response.status_code,
                message=_extract_message(response),
                response_text=response.text,
                endpoint=endpoint,
            )
        if not response.content:
            return {}
        return response.json()


def _unwrap(data: Any) -> dict[str, Any]:
    # The API wraps payloads as {"status": ..., "data": {...}}; older
    # endpoints return the object directly.
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    if isinstance(data, dict):
        return data
    return {}


def _extract_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None
