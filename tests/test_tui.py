from __future__ import annotations

import pytest
from textual.widgets import Input

from launchpad.api.mock import MockDeploymentApi
from launchpad.config import load_settings
from launchpad.ui.app import DeployConsoleApp
from launchpad.ui.screens import SubmittedScreen, WizardScreen
from launchpad.workflow.state import WizardStep


@pytest.mark.asyncio
async def test_tui_walks_to_submitted_screen() -> None:
    api = MockDeploymentApi(port="8080")
    app = DeployConsoleApp(load_settings({}), "prop", api=api)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        screen = app.screen
        assert isinstance(screen, WizardScreen)
        wizard = app.wizard

        await screen.action_next()
        await pilot.pause()
        assert wizard.step is WizardStep.REPOSITORY
        assert {"repo_url", "context_dir"} <= set(wizard.errors)

        screen.query_one("#field-repo_url", Input).value = "https://example/repo"
        screen.query_one("#field-context_dir", Input).value = "app"
        await pilot.pause()
        await screen.action_next()
        await pilot.pause()
        assert wizard.step is WizardStep.APPLICATION

        screen.query_one("#field-name", Input).value = "svc"
        screen.query_one("#field-path", Input).value = "/api"
        await pilot.pause()
        assert wizard.state.health_check_path == "/api"
        wizard.set_field("env", "prod")
        await screen.action_next()
        await pilot.pause()
        assert wizard.step is WizardStep.RUNTIME_CONFIG
        assert wizard.port_locked

        wizard.jump(5)
        await screen.refresh_step()
        await screen.action_next()
        await pilot.pause()
        assert wizard.submitted
        await wizard.submission
        await pilot.pause()
        assert isinstance(app.screen, SubmittedScreen)

    assert len(api.deployments) == 1
    assert api.deployments[0].path == "/api"
    assert api.deployments[0].port == "8080"


@pytest.mark.asyncio
async def test_tui_smoke_mode_deploys_and_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAUNCHPAD_TUI_SMOKE", "1")
    api = MockDeploymentApi()
    app = DeployConsoleApp(load_settings({}), "prop", api=api)
    await app.run_async(headless=True)
    assert [(request.name, request.env) for request in api.deployments] == [("smoke", "dev")]
    assert app.wizard.submitted
