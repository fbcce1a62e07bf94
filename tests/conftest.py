from __future__ import annotations

import asyncio
from typing import Any

import pytest
import pytest_asyncio

from launchpad.api.errors import ApiError
from launchpad.api.mock import MockDeploymentApi
from launchpad.api.types import DeploymentRequest, DeploymentSource, EnvironmentDescriptor, SourceValidation
from launchpad.workflow.notices import Notice
from launchpad.workflow.state import FormState


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def messages(self, level: str | None = None) -> list[str]:
        return [notice.message for notice in self.notices if level is None or notice.level == level]


class ScriptedApi:
    """Deployment API whose calls block until the test resolves them."""

    def __init__(self, environments: tuple[str, ...] = ("dev", "prod")) -> None:
        self.environments = environments
        self.validate_calls: list[tuple[str, DeploymentSource, asyncio.Future]] = []
        self.deploy_calls: list[tuple[DeploymentRequest, asyncio.Future]] = []

    async def validate_source(self, property_identifier: str, source: DeploymentSource) -> SourceValidation:
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self.validate_calls.append((property_identifier, source, future))
        return await future

    async def create_deployment(self, request: DeploymentRequest) -> dict[str, Any]:
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self.deploy_calls.append((request, future))
        return await future

    async def list_environments(self, property_identifier: str) -> dict[str, EnvironmentDescriptor]:
        return {name: EnvironmentDescriptor(name=name) for name in self.environments}

    async def aclose(self) -> None:
        return

    def accept(self, index: int, port: str) -> None:
        self.validate_calls[index][2].set_result(SourceValidation(port=port))

    def reject(self, index: int, error: BaseException) -> None:
        self.validate_calls[index][2].set_exception(error)

    def finish_deploy(self, index: int, error: BaseException | None = None) -> None:
        future = self.deploy_calls[index][1]
        if error is None:
            future.set_result({})
        else:
            future.set_exception(error)


async def settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def forbidden() -> ApiError:
    return ApiError(status_code=403, message="Forbidden")


def bad_request(message: str) -> ApiError:
    return ApiError(status_code=400, message=message)


def fill_source_steps(state: FormState) -> FormState:
    state.repo_url = "https://example/repo"
    state.context_dir = "app"
    state.git_ref = "main"
    state.name = "svc"
    state.env = "prod"
    return state


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def scripted_api() -> ScriptedApi:
    return ScriptedApi()


@pytest_asyncio.fixture
async def mock_api():
    api = MockDeploymentApi(port="8080")
    yield api
    await api.aclose()
