"""Prompt-driven navigation over the deployment wizard."""

from __future__ import annotations

from launchpad.ui.render import (
    render_field_errors,
    render_info,
    render_stage_banner,
    render_step_list,
    status_spinner,
)
from launchpad.wizard.session import PromptSession
from launchpad.wizard.steps import prompt_choice, prompt_int, run_step
from launchpad.workflow.schema import LABELS
from launchpad.workflow.state import WizardStep


async def run_wizard(session: PromptSession) -> bool:
    """Walk the steps until the workflow is submitted or cancelled.

    Returns whether a submission was started. In non-interactive mode the
    first blocked transition ends the walk.
    """
    wizard = session.wizard
    with status_spinner("Loading environments"):
        await wizard.load_environments()

    while not wizard.closed:
        render_step_list(wizard.step, wizard.unvalidated_steps())
        run_step(wizard.step, session)
        action = _next_action(session)

        if action == "cancel":
            wizard.cancel()
            render_info("Deployment cancelled.")
            break
        if action == "back":
            wizard.back()
            continue
        if action == "goto":
            wizard.jump(prompt_int("Go to step", int(wizard.step), 1, len(WizardStep)))
            continue
        if action == "deploy":
            if await wizard.submit():
                break
            render_field_errors(wizard.errors, LABELS)
            if not session.interactive:
                return False
            continue

        if wizard.step is WizardStep.APPLICATION:
            with status_spinner("Validating deployment source"):
                advanced = await wizard.next()
        else:
            advanced = await wizard.next()
        if advanced:
            continue
        render_field_errors(wizard.errors, LABELS)
        if wizard.step is WizardStep.APPLICATION and wizard.banner:
            render_stage_banner(wizard.banner)
        if not session.interactive:
            return False

    return wizard.submitted


def _next_action(session: PromptSession) -> str:
    step = session.wizard.step
    forward = "deploy" if step is WizardStep.REVIEW else "next"
    if not session.interactive:
        return forward
    choices = [forward]
    if step is not WizardStep.REPOSITORY:
        choices.append("back")
    choices.extend(["goto", "cancel"])
    return prompt_choice("Action", choices, forward)
