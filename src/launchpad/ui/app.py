"""Textual TUI entrypoint for launchpad."""

from __future__ import annotations

import os

from textual.app import App

from launchpad.api.client import DeploymentApi, create_api
from launchpad.config import Settings
from launchpad.ui.screens import SubmittedScreen, WizardScreen
from launchpad.workflow.machine import DeploymentWizard
from launchpad.workflow.notices import Notice
from launchpad.workflow.state import FormState

_SEVERITY = {"success": "information", "info": "information", "warning": "warning", "error": "error"}


class TextualNotifier:
    def __init__(self, app: App) -> None:
        self.app = app
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        self.app.notify(notice.message, severity=_SEVERITY.get(notice.level, "information"))


class DeployConsoleApp(App):
    CSS_PATH = "styles.tcss"
    BINDINGS = [("q", "quit", "Quit")]

    def __init__(self, settings: Settings, property_identifier: str, api: DeploymentApi | None = None) -> None:
        super().__init__()
        self.settings = settings
        self.property_identifier = property_identifier
        self.api = api or create_api(settings)
        self.notifier = TextualNotifier(self)
        self.wizard: DeploymentWizard | None = None
        self.smoke = os.getenv("LAUNCHPAD_TUI_SMOKE") == "1"

    async def on_mount(self) -> None:
        self.title = f"launchpad · {self.property_identifier}"
        self.wizard = DeploymentWizard(
            self.api,
            self.property_identifier,
            self.notifier,
            on_close=self.handle_wizard_closed,
            state=_smoke_state() if self.smoke else None,
        )
        if self.smoke:
            await self._run_smoke()
            self.exit()
            return
        await self.push_screen(WizardScreen(self.wizard))

    async def on_unmount(self) -> None:
        await self.api.aclose()

    async def _run_smoke(self) -> None:
        wizard = self.wizard
        await wizard.load_environments()
        names = wizard.environment_names()
        if not wizard.state.env and names:
            wizard.set_field("env", names[0])
        while wizard.step < 5:
            if not await wizard.next():
                return
        if await wizard.submit() and wizard.submission is not None:
            await wizard.submission

    def handle_wizard_closed(self) -> None:
        if self.smoke:
            return
        if not self.wizard.submitted:
            self.exit()
            return
        self.switch_screen(SubmittedScreen(self.wizard))


def run_app(settings: Settings, property_identifier: str) -> None:
    DeployConsoleApp(settings, property_identifier).run()


def _smoke_state() -> FormState:
    return FormState.from_dict(
        {"name": "smoke", "repo_url": "https://example.com/smoke.git", "context_dir": "."}
    )
