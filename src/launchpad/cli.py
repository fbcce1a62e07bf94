"""CLI entrypoint for launchpad."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from launchpad.api.client import create_api
from launchpad.api.errors import ApiError
from launchpad.api.types import DeploymentSource, EnvironmentDescriptor
from launchpad.config import Settings, load_settings
from launchpad.env import load_dotenv
from launchpad.logs import configure_logging
from launchpad.ui.render import (
    ConsoleNotifier,
    render_banner,
    render_error,
    render_info,
    render_stage_banner,
    render_success,
    render_summary_table,
    status_spinner,
)
from launchpad.wizard import PromptSession, run_wizard
from launchpad.workflow.gates import RemoteValidationGate
from launchpad.workflow.machine import DeploymentWizard
from launchpad.workflow.state import FormState, ValidationOutcome
from launchpad.workflow.submit import SubmissionResult

app = typer.Typer(add_completion=False, help="Deploy containerized applications to web properties.")


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """launchpad deployment console."""
    load_dotenv()
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("deploy")
def deploy(
    property_identifier: str = typer.Option(..., "--property", "-p", help="Target web property."),
    values: Optional[Path] = typer.Option(None, "--values", help="JSON file pre-filling the form."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept pre-filled values without prompting."),
    print_payload: bool = typer.Option(False, "--print-payload", help="Print the submitted request body."),
) -> None:
    """Walk the five-step wizard and deploy an application."""
    settings = _settings_or_exit()
    state = _load_values(values) if values is not None else FormState()
    render_banner("launchpad", f"Deploy a containerized application to {property_identifier}")

    wizard, result = asyncio.run(_deploy(settings, property_identifier, state, interactive=not yes))
    if wizard.submitted and print_payload and wizard.request is not None:
        print(json.dumps(wizard.request.to_dict(), indent=2, sort_keys=True, ensure_ascii=True))
    if result is not None and result.ok:
        return
    if wizard.closed and not wizard.submitted:
        return
    raise typer.Exit(code=1)


@app.command("validate")
def validate(
    property_identifier: str = typer.Option(..., "--property", "-p"),
    name: str = typer.Option(..., "--name", help="Application name."),
    repo_url: str = typer.Option(..., "--repo-url"),
    git_ref: str = typer.Option("master", "--git-ref"),
    context_dir: str = typer.Option(..., "--context-dir"),
) -> None:
    """Check a deployment source against the backend and print its port."""
    settings = _settings_or_exit()
    source = DeploymentSource(name=name, repo_url=repo_url.strip(), git_ref=git_ref, context_dir=context_dir)
    gate, outcome = asyncio.run(_validate(settings, property_identifier, source))
    if outcome is not None and outcome.is_accepted:
        render_success(f"Source accepted. Port: {outcome.port}")
        return
    if gate.banner:
        render_stage_banner(gate.banner)
    raise typer.Exit(code=1)


@app.command("envs")
def envs(property_identifier: str = typer.Option(..., "--property", "-p")) -> None:
    """List the environments of a web property."""
    settings = _settings_or_exit()
    environments = asyncio.run(_list_environments(settings, property_identifier))
    if environments is None:
        raise typer.Exit(code=1)
    if not environments:
        render_info(f"No environments found for {property_identifier}.")
        return
    rows = [(name, descriptor.url or "-") for name, descriptor in environments.items()]
    render_summary_table(rows, title=f"Environments · {property_identifier}")


@app.command("tui")
def tui(property_identifier: str = typer.Option(..., "--property", "-p")) -> None:
    """Open the deployment wizard as a terminal UI."""
    settings = _settings_or_exit()
    from launchpad.ui.app import run_app

    run_app(settings, property_identifier)


async def _deploy(
    settings: Settings,
    property_identifier: str,
    state: FormState,
    *,
    interactive: bool,
) -> tuple[DeploymentWizard, SubmissionResult | None]:
    api = create_api(settings)
    notifier = ConsoleNotifier()
    wizard = DeploymentWizard(
        api,
        property_identifier,
        notifier,
        on_close=lambda: render_info("Wizard closed; the deployment continues in the background."),
        state=state,
    )
    session = PromptSession(wizard=wizard, notifier=notifier, interactive=interactive)
    try:
        started = await run_wizard(session)
        if not started or wizard.submission is None:
            return wizard, None
        with status_spinner(f"Deploying {wizard.state.name}"):
            result = await wizard.submission
        return wizard, result
    finally:
        await api.aclose()


async def _validate(
    settings: Settings,
    property_identifier: str,
    source: DeploymentSource,
) -> tuple[RemoteValidationGate, ValidationOutcome | None]:
    api = create_api(settings)
    gate = RemoteValidationGate(api, ConsoleNotifier())
    try:
        with status_spinner("Validating deployment source"):
            outcome = await gate.validate(property_identifier, source)
        return gate, outcome
    finally:
        await api.aclose()


async def _list_environments(settings: Settings, property_identifier: str) -> dict[str, EnvironmentDescriptor] | None:
    api = create_api(settings)
    try:
        with status_spinner("Loading environments"):
            return await api.list_environments(property_identifier)
    except ApiError as exc:
        render_error(f"Failed to load environments: {exc}")
        return None
    finally:
        await api.aclose()


def _settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ValueError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc


def _load_values(path: Path) -> FormState:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        render_error(f"Invalid values file: {exc}")
        raise typer.Exit(code=1) from exc
    if not isinstance(raw, dict):
        render_error("Values file must be a JSON object.")
        raise typer.Exit(code=1)
    try:
        return FormState.from_dict(raw)
    except KeyError as exc:
        render_error(f"Unknown form field in values file: {exc.args[0]}")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        render_error(f"Invalid values file: {exc}")
        raise typer.Exit(code=1) from exc


def main() -> None:
    app()


if __name__ == "__main__":
    main()
