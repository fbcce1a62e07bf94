"""Client interface and factory for the deployment API."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from launchpad.api.types import DeploymentRequest, DeploymentSource, EnvironmentDescriptor, SourceValidation
from launchpad.config import Settings


@runtime_checkable
class DeploymentApi(Protocol):
    async def validate_source(self, property_identifier: str, source: DeploymentSource) -> SourceValidation:
        """Check that a deployment source is reachable and resolve its port."""

    async def create_deployment(self, request: DeploymentRequest) -> dict[str, Any]:
        """Create and deploy a containerized application."""

    async def list_environments(self, property_identifier: str) -> dict[str, EnvironmentDescriptor]:
        """Return the environments of a web property keyed by name."""

    async def aclose(self) -> None:
        """Release any underlying client resources."""


def create_api(settings: Settings, **kwargs: Any) -> DeploymentApi:
    if settings.api_mode == "mock":
        from launchpad.api.mock import MockDeploymentApi

        return MockDeploymentApi(**kwargs)
    if settings.api_mode == "http":
        from launchpad.api.http import HttpDeploymentApi

        return HttpDeploymentApi(
            base_url=settings.api_url,
            token=settings.api_token,
            timeout_s=settings.timeout_s,
            **kwargs,
        )
    raise ValueError(f"Unsupported API mode: {settings.api_mode}")
