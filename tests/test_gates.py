from __future__ import annotations

import asyncio

import pytest

from conftest import ScriptedApi, bad_request, forbidden, settle
from launchpad.api.errors import ApiError
from launchpad.api.types import DeploymentSource
from launchpad.workflow.failures import FORBIDDEN_MESSAGE, VALIDATE_FAILED_MESSAGE
from launchpad.workflow.gates import RemoteValidationGate, SingleFlight
from launchpad.workflow.state import OutcomeStatus

SOURCE = DeploymentSource(name="svc", repo_url="https://example/repo", git_ref="main", context_dir="app")


def test_single_flight_tokens() -> None:
    flight = SingleFlight()
    first = flight.begin()
    second = flight.begin()
    assert flight.in_flight
    assert not flight.finish(first)
    assert flight.in_flight
    assert flight.finish(second)
    assert not flight.in_flight


@pytest.mark.asyncio
async def test_accepted_sets_port_and_clears_banner(scripted_api: ScriptedApi, notifier) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    gate.banner = "old rejection"
    task = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    assert gate.in_flight
    assert gate.outcome.status is OutcomeStatus.PENDING
    scripted_api.accept(0, "8080")
    outcome = await task
    assert outcome.is_accepted
    assert outcome.accepts(SOURCE)
    assert gate.resolved_port == "8080"
    assert gate.banner == ""
    assert not gate.in_flight
    assert notifier.notices == []


@pytest.mark.asyncio
async def test_bad_request_sets_banner_and_notice(scripted_api: ScriptedApi, notifier) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    task = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    scripted_api.reject(0, bad_request("branch not found"))
    outcome = await task
    assert outcome.status is OutcomeStatus.REJECTED
    assert gate.banner == "branch not found"
    assert notifier.messages("error") == ["branch not found"]


@pytest.mark.asyncio
async def test_forbidden_clears_banner(scripted_api: ScriptedApi, notifier) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    gate.banner = "stale"
    task = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    scripted_api.reject(0, forbidden())
    outcome = await task
    assert outcome.status is OutcomeStatus.REJECTED
    assert gate.banner == ""
    assert notifier.messages("error") == [FORBIDDEN_MESSAGE]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ApiError(status_code=None, message=None), ApiError(status_code=500, message="boom"), ConnectionError("reset")],
)
async def test_other_failures_use_generic_notice(scripted_api: ScriptedApi, notifier, error) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    task = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    scripted_api.reject(0, error)
    outcome = await task
    assert outcome.status is OutcomeStatus.REJECTED
    assert gate.banner == ""
    assert notifier.messages("error") == [VALIDATE_FAILED_MESSAGE]


@pytest.mark.asyncio
async def test_superseded_result_is_ignored(scripted_api: ScriptedApi, notifier) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    other = DeploymentSource(name="svc", repo_url="https://example/other", git_ref="main", context_dir="app")
    first = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    second = asyncio.create_task(gate.validate("prop", other))
    await settle()

    scripted_api.reject(0, bad_request("late rejection"))
    assert await first is None
    assert gate.banner == ""
    assert gate.outcome.status is OutcomeStatus.PENDING
    assert gate.in_flight
    assert notifier.notices == []

    scripted_api.accept(1, "9000")
    outcome = await second
    assert outcome.accepts(other)
    assert gate.resolved_port == "9000"


@pytest.mark.asyncio
async def test_late_success_does_not_override_newer_rejection(scripted_api: ScriptedApi, notifier) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    first = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    second = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    scripted_api.reject(1, bad_request("branch not found"))
    await second
    scripted_api.accept(0, "8080")
    assert await first is None
    assert gate.outcome.status is OutcomeStatus.REJECTED
    assert gate.resolved_port is None
    assert gate.banner == "branch not found"


@pytest.mark.asyncio
async def test_reset_keeps_banner(scripted_api: ScriptedApi, notifier) -> None:
    gate = RemoteValidationGate(scripted_api, notifier)
    task = asyncio.create_task(gate.validate("prop", SOURCE))
    await settle()
    scripted_api.reject(0, bad_request("branch not found"))
    await task
    gate.reset()
    assert gate.outcome.status is OutcomeStatus.PENDING
    assert gate.banner == "branch not found"
