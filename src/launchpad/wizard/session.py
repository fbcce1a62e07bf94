"""Prompt session wrapping one deployment wizard."""

from __future__ import annotations

from dataclasses import dataclass

from launchpad.ui.render import ConsoleNotifier
from launchpad.workflow.machine import DeploymentWizard


@dataclass
class PromptSession:
    wizard: DeploymentWizard
    notifier: ConsoleNotifier
    interactive: bool = True
