"""Prompt handlers for each wizard step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import typer

from launchpad.ui.render import (
    render_error,
    render_info,
    render_pairs,
    render_stage_banner,
    render_step_header,
    render_summary_table,
    render_warning,
)
from launchpad.wizard.session import PromptSession
from launchpad.workflow.machine import DeploymentWizard
from launchpad.workflow.schema import LABELS
from launchpad.workflow.state import WizardStep


@dataclass(frozen=True)
class Step:
    step: WizardStep
    handler: Callable[[PromptSession], None]


_REGISTRY: dict[WizardStep, Step] = {}


def register_step(step: Step) -> None:
    _REGISTRY[step.step] = step


def get_step(step: WizardStep) -> Step:
    return _REGISTRY[step]


def run_step(step: WizardStep, session: PromptSession) -> None:
    render_step_header(step)
    get_step(step).handler(session)


def prompt_choice(prompt: str, choices: list[str], default: str) -> str:
    normalized_choices = {choice.lower(): choice for choice in choices}
    while True:
        response = typer.prompt(f"{prompt} ({'/'.join(choices)})", default=default)
        normalized = response.strip().lower()
        if normalized in normalized_choices:
            return normalized_choices[normalized]
        render_warning(f"Invalid choice: {response}. Choose from {', '.join(choices)}.")


def prompt_int(prompt: str, default: int, min_value: int, max_value: int) -> int:
    while True:
        response = typer.prompt(prompt, default=str(default))
        try:
            value = int(response)
        except ValueError:
            render_warning("Please enter an integer.")
            continue
        if value < min_value or value > max_value:
            render_warning(f"Value must be between {min_value} and {max_value}.")
            continue
        return value


def _prompt_field(wizard: DeploymentWizard, name: str, label: str | None = None) -> None:
    label = label or LABELS.get(name, name)
    while True:
        current = wizard.state.get(name)
        response = typer.prompt(label, default=current, show_default=bool(current))
        wizard.set_field(name, response)
        wizard.blur(name)
        if name not in wizard.errors:
            return
        render_warning(wizard.errors[name])


def _prompt_env(wizard: DeploymentWizard) -> None:
    names = wizard.environment_names()
    if wizard.environments is not None and not names:
        render_error(f"{wizard.property_identifier} has no environments to deploy to.")
        return
    if not names:
        _prompt_field(wizard, "env")
        return
    default = wizard.state.env if wizard.state.env in names else names[0]
    wizard.set_field("env", prompt_choice(LABELS["env"], names, default))
    wizard.blur("env")


def _prompt_pair(wizard: DeploymentWizard, list_name: str, index: int) -> None:
    entry = wizard.state.pairs(list_name)[index]
    while True:
        key = typer.prompt("Key", default=entry.key, show_default=bool(entry.key))
        value = typer.prompt("Value", default=entry.value, show_default=bool(entry.value))
        wizard.set_pair(list_name, index, key=key, value=value)
        wizard.blur_pair(list_name, index)
        problems = [message for error_key, message in wizard.errors.items() if error_key.startswith(f"{list_name}[{index}].")]
        if not problems:
            return
        for message in problems:
            render_warning(message)


def _edit_pairs(session: PromptSession, list_name: str, title: str) -> None:
    wizard = session.wizard
    pairs = wizard.state.pairs(list_name)
    while True:
        render_pairs(title, pairs.items(), wizard.errors, list_name)
        warning = wizard.warnings.get(list_name)
        if warning:
            render_warning(warning)
        if not session.interactive:
            return
        choices = ["add", "edit", "remove", "done"] if len(pairs) else ["add", "done"]
        action = prompt_choice("Entries", choices, "done")
        if action == "done":
            return
        if action == "add":
            wizard.add_pair(list_name)
            _prompt_pair(wizard, list_name, len(pairs) - 1)
            continue
        index = prompt_int("Entry #", 0, 0, len(pairs) - 1)
        if action == "edit":
            _prompt_pair(wizard, list_name, index)
        else:
            wizard.remove_pair(list_name, index)


def step_repository(session: PromptSession) -> None:
    wizard = session.wizard
    if not session.interactive:
        return
    _prompt_field(wizard, "repo_url")
    _prompt_field(wizard, "context_dir")
    _prompt_field(wizard, "repo_type")
    _prompt_field(wizard, "git_ref", "Git Branch")


def step_application(session: PromptSession) -> None:
    wizard = session.wizard
    if wizard.banner:
        render_stage_banner(wizard.banner)
    if session.interactive:
        _prompt_field(wizard, "name")
        _prompt_env(wizard)
        _prompt_field(wizard, "path")
        _prompt_field(wizard, "health_check_path")
        _prompt_field(wizard, "ref", "Ref (optional)")
    if wizard.port_locked:
        render_info(f"Port {wizard.state.port} (resolved by validation)")
    elif session.interactive:
        _prompt_field(wizard, "port")


def step_runtime_config(session: PromptSession) -> None:
    _edit_pairs(session, "config", "Configuration")


def step_build_args(session: PromptSession) -> None:
    _edit_pairs(session, "build_args", "Build Arguments")


def step_review(session: PromptSession) -> None:
    wizard = session.wizard
    state = wizard.state
    port = wizard.outcome.port if wizard.outcome.accepts(state.source()) else "(not validated)"
    summary = {
        "Property": wizard.property_identifier,
        "Repository URL": state.repo_url,
        "Context Directory": state.context_dir,
        "Repository Type": state.repo_type,
        "Git Branch": state.git_ref,
        "Application Name": state.name,
        "Environment": state.env,
        "Path": state.path,
        "Health Check Path": state.health_check_path,
        "Port": port,
        "Configuration": ", ".join(key for key, _ in state.config.items()) or "(none)",
        "Build Arguments": ", ".join(key for key, _ in state.build_args.items()) or "(none)",
    }
    if state.ref:
        summary["Ref"] = state.ref
    render_summary_table(summary, title="Review")
    for message in wizard.warnings.values():
        render_warning(message)
    unvalidated = wizard.unvalidated_steps()
    if unvalidated:
        titles = ", ".join(step.title for step in unvalidated)
        render_warning(f"Not yet validated: {titles}. They will be checked on deploy.")


register_step(Step(WizardStep.REPOSITORY, step_repository))
register_step(Step(WizardStep.APPLICATION, step_application))
register_step(Step(WizardStep.RUNTIME_CONFIG, step_runtime_config))
register_step(Step(WizardStep.BUILD_ARGS, step_build_args))
register_step(Step(WizardStep.REVIEW, step_review))
