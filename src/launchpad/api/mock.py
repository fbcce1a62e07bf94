"""In-memory deployment API for offline use and tests."""

from __future__ import annotations

import asyncio
from typing import Any

from launchpad.api.errors import ApiError
from launchpad.api.types import DeploymentRequest, DeploymentSource, EnvironmentDescriptor, SourceValidation

DEFAULT_ENVIRONMENTS = ("dev", "qa", "prod")
_URL_PREFIXES = ("https://", "http://", "git@", "ssh://")


class MockDeploymentApi:
    """Mirrors the backend contract without a network.

    ``validate_error`` / ``deploy_error`` make every call to that operation
    fail with the given error; otherwise validation rejects repository URLs
    that do not look like a git remote, and refuses properties outside
    ``allowed_properties`` when that set is given.
    """

    def __init__(
        self,
        *,
        environments: dict[str, list[str]] | None = None,
        port: str = "3000",
        latency_ms: int = 0,
        allowed_properties: set[str] | None = None,
        validate_error: ApiError | None = None,
        deploy_error: ApiError | None = None,
    ) -> None:
        self._environments = environments
        self._port = port
        self._latency_ms = latency_ms
        self._allowed = allowed_properties
        self._validate_error = validate_error
        self._deploy_error = deploy_error
        self.validations: list[tuple[str, DeploymentSource]] = []
        self.deployments: list[DeploymentRequest] = []

    async def validate_source(self, property_identifier: str, source: DeploymentSource) -> SourceValidation:
        await self._delay()
        self.validations.append((property_identifier, source))
        self._check_access(property_identifier, "/applications/validate")
        if self._validate_error is not None:
            raise self._validate_error
        if not source.repo_url.strip().startswith(_URL_PREFIXES):
            raise ApiError(
                status_code=400,
                message=f"Repository {source.repo_url} is not reachable",
                endpoint="/applications/validate",
            )
        return SourceValidation(port=self._port, raw={"port": self._port, "mock": True})

    async def create_deployment(self, request: DeploymentRequest) -> dict[str, Any]:
        await self._delay()
        self._check_access(request.property_identifier, "/applications/deploy")
        if self._deploy_error is not None:
            raise self._deploy_error
        self.deployments.append(request)
        return {"mock": True, **request.to_dict()}

    async def list_environments(self, property_identifier: str) -> dict[str, EnvironmentDescriptor]:
        await self._delay()
        names = DEFAULT_ENVIRONMENTS
        if self._environments is not None:
            names = tuple(self._environments.get(property_identifier, []))
        return {
            name: EnvironmentDescriptor(
                name=name,
                url=f"https://{property_identifier}.{name}.example.com",
                cluster="mock",
                raw={"mock": True},
            )
            for name in names
        }

    async def aclose(self) -> None:
        return

    async def _delay(self) -> None:
        if self._latency_ms > 0:
            await asyncio.sleep(self._latency_ms / 1000.0)
        else:
            await asyncio.sleep(0)

    def _check_access(self, property_identifier: str, endpoint: str) -> None:
        if self._allowed is not None and property_identifier not in self._allowed:
            raise ApiError(status_code=403, message="Forbidden", endpoint=endpoint)
