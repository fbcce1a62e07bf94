"""Prompt-driven wizard package."""

from launchpad.wizard.flow import run_wizard
from launchpad.wizard.session import PromptSession

__all__ = ["PromptSession", "run_wizard"]
