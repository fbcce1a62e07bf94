"""Deployment API client interfaces and implementations."""

from launchpad.api.client import DeploymentApi, create_api
from launchpad.api.errors import ApiError
from launchpad.api.http import HttpDeploymentApi
from launchpad.api.mock import MockDeploymentApi
from launchpad.api.types import DeploymentRequest, DeploymentSource, EnvironmentDescriptor, SourceValidation

__all__ = [
    "ApiError",
    "DeploymentApi",
    "DeploymentRequest",
    "DeploymentSource",
    "EnvironmentDescriptor",
    "HttpDeploymentApi",
    "MockDeploymentApi",
    "SourceValidation",
    "create_api",
]
