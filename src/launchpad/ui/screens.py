"""Textual screens for the deployment wizard."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widget import Widget
from textual.widgets import Button, Footer, Input, Label, OptionList, Select, Static

from launchpad.workflow.machine import DeploymentWizard
from launchpad.workflow.schema import LABELS, STEP_FIELDS
from launchpad.workflow.state import PAIR_FIELDS, WizardStep

_PAIR_TITLES = {"config": "Configuration", "build_args": "Build Arguments"}


class BaseScreen(Screen):
    def __init__(self, wizard: DeploymentWizard) -> None:
        super().__init__()
        self.wizard = wizard


class WizardScreen(BaseScreen):
    BINDINGS = [("ctrl+n", "next", "Next"), ("ctrl+b", "back", "Back"), ("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        with Horizontal(id="wizard"):
            yield OptionList(*[f"{int(step)}  {step.title}" for step in WizardStep], id="step-list")
            with Vertical(id="step-panel"):
                yield Static("", id="step-title")
                yield Static("", id="banner")
                yield VerticalScroll(id="step-body")
                with Horizontal(id="nav"):
                    yield Button("Back", id="back")
                    yield Button("Next", id="next", variant="primary")
        yield Footer()

    async def on_mount(self) -> None:
        await self.wizard.load_environments()
        await self.refresh_step()

    async def refresh_step(self) -> None:
        step = self.wizard.step
        self.query_one("#step-list", OptionList).highlighted = int(step) - 1
        self.query_one("#step-title", Static).update(f"Step {int(step)}/{len(WizardStep)} · {step.title}")
        self._sync_banner()
        body = self.query_one("#step-body", VerticalScroll)
        await body.remove_children()
        await body.mount(*self._build_body(step))
        self.query_one("#back", Button).disabled = step is WizardStep.REPOSITORY
        self.query_one("#next", Button).label = "Deploy" if step is WizardStep.REVIEW else "Next"
        self._sync_errors()

    def _build_body(self, step: WizardStep) -> list[Widget]:
        if step is WizardStep.REVIEW:
            return self._review_widgets()
        widgets: list[Widget] = []
        for name in STEP_FIELDS[step]:
            if name in PAIR_FIELDS:
                widgets.extend(self._pair_widgets(name))
                continue
            widgets.append(Label(LABELS.get(name, "Ref")))
            if name == "env" and self.wizard.environment_names():
                value = self.wizard.state.env or Select.BLANK
                widgets.append(
                    Select([(env, env) for env in self.wizard.environment_names()], value=value, id="field-env")
                )
            else:
                widgets.append(
                    Input(
                        value=self.wizard.state.get(name),
                        id=f"field-{name}",
                        disabled=name == "port" and self.wizard.port_locked,
                    )
                )
            widgets.append(Static("", id=f"error-{name}", classes="error"))
        return widgets

    def _pair_widgets(self, list_name: str) -> list[Widget]:
        widgets: list[Widget] = [
            Horizontal(
                Label(_PAIR_TITLES[list_name], classes="section"),
                Button("Add Key Value", id=f"add-{list_name}"),
                classes="pair-header",
            )
        ]
        for entry in self.wizard.state.pairs(list_name):
            prefix = f"{list_name}-{entry.entry_id}"
            widgets.append(
                Horizontal(
                    Input(value=entry.key, placeholder="Key", id=f"{prefix}-key"),
                    Input(value=entry.value, placeholder="Value", id=f"{prefix}-value"),
                    Button("✕", id=f"remove-{prefix}", classes="remove"),
                    classes="pair",
                )
            )
            widgets.append(Static("", id=f"error-{prefix}", classes="error"))
        widgets.append(Static("", id=f"warning-{list_name}", classes="warning"))
        return widgets

    def _review_widgets(self) -> list[Widget]:
        wizard = self.wizard
        state = wizard.state
        port = wizard.outcome.port if wizard.outcome.accepts(state.source()) else "(not validated)"
        rows = [
            ("Repository URL", state.repo_url),
            ("Context Directory", state.context_dir),
            ("Repository Type", state.repo_type),
            ("Git Branch", state.git_ref),
            ("Application Name", state.name),
            ("Environment", state.env),
            ("Path", state.path),
            ("Health Check Path", state.health_check_path),
            ("Port", port),
            ("Configuration", ", ".join(key for key, _ in state.config.items()) or "(none)"),
            ("Build Arguments", ", ".join(key for key, _ in state.build_args.items()) or "(none)"),
        ]
        widgets: list[Widget] = [Static(f"{label}: {value}", classes="review-row") for label, value in rows]
        for key, message in wizard.errors.items():
            widgets.append(Static(f"{LABELS.get(key, key)}: {message}", classes="review-error"))
        for message in wizard.warnings.values():
            widgets.append(Static(message, classes="warning"))
        unvalidated = wizard.unvalidated_steps()
        if unvalidated:
            titles = ", ".join(step.title for step in unvalidated)
            widgets.append(Static(f"Not yet validated: {titles}", classes="warning"))
        return widgets

    def _sync_banner(self) -> None:
        banner = self.query_one("#banner", Static)
        message = self.wizard.banner if self.wizard.step is WizardStep.APPLICATION else ""
        banner.update(message)
        banner.display = bool(message)

    def _sync_errors(self) -> None:
        errors = self.wizard.errors
        for static in self.query("#step-body .error").results(Static):
            target = (static.id or "").removeprefix("error-")
            if target in LABELS or target == "ref":
                static.update(errors.get(target, ""))
                continue
            list_name, _, entry_id = target.rpartition("-")
            try:
                index = self.wizard.state.pairs(list_name).index_of(int(entry_id))
            except (KeyError, ValueError):
                continue
            messages = [errors[key] for key in (f"{list_name}[{index}].key", f"{list_name}[{index}].value") if key in errors]
            static.update(" · ".join(messages))
        for list_name in PAIR_FIELDS:
            for static in self.query(f"#warning-{list_name}").results(Static):
                static.update(self.wizard.warnings.get(list_name, ""))

    def _pair_target(self, widget_id: str) -> tuple[str, int, str] | None:
        list_name, entry_id, part = widget_id.rsplit("-", 2)
        if list_name not in PAIR_FIELDS:
            return None
        try:
            index = self.wizard.state.pairs(list_name).index_of(int(entry_id))
        except KeyError:
            # Event from a row that has since been removed.
            return None
        return list_name, index, part

    def on_input_changed(self, event: Input.Changed) -> None:
        widget_id = event.input.id or ""
        if widget_id.startswith("field-"):
            name = widget_id.removeprefix("field-")
            if name == "port" and self.wizard.port_locked:
                return
            self.wizard.set_field(name, event.value)
            if name == "path":
                health = self.query_one("#field-health_check_path", Input)
                if health.value != self.wizard.state.health_check_path:
                    health.value = self.wizard.state.health_check_path
        else:
            target = self._pair_target(widget_id)
            if target is None:
                return
            list_name, index, part = target
            if part == "key":
                self.wizard.set_pair(list_name, index, key=event.value)
            else:
                self.wizard.set_pair(list_name, index, value=event.value)
        self._sync_errors()

    def on_input_blurred(self, event: Input.Blurred) -> None:
        widget_id = event.input.id or ""
        if widget_id.startswith("field-"):
            self.wizard.blur(widget_id.removeprefix("field-"))
        else:
            target = self._pair_target(widget_id)
            if target is None:
                return
            list_name, index, _part = target
            self.wizard.blur_pair(list_name, index)
        self._sync_errors()

    def on_select_changed(self, event: Select.Changed) -> None:
        value = "" if event.value is Select.BLANK else str(event.value)
        self.wizard.set_field("env", value)
        self.wizard.blur("env")
        self._sync_errors()

    async def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id != "step-list":
            return
        self.wizard.jump(event.option_index + 1)
        await self.refresh_step()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "next":
            await self.action_next()
        elif button_id == "back":
            await self.action_back()
        elif button_id.startswith("add-"):
            self.wizard.add_pair(button_id.removeprefix("add-"))
            await self.refresh_step()
        elif button_id.startswith("remove-"):
            list_name, _, entry_id = button_id.removeprefix("remove-").rpartition("-")
            self.wizard.remove_pair(list_name, self.wizard.state.pairs(list_name).index_of(int(entry_id)))
            await self.refresh_step()

    async def action_next(self) -> None:
        if self.wizard.validating:
            return
        if self.wizard.step is WizardStep.REVIEW:
            if await self.wizard.submit():
                return
        else:
            self.query_one("#step-title", Static).update(f"Validating {self.wizard.step.title}…")
            await self.wizard.next()
        await self.refresh_step()

    async def action_back(self) -> None:
        if self.wizard.back():
            await self.refresh_step()

    def action_cancel(self) -> None:
        self.wizard.cancel()


class SubmittedScreen(BaseScreen):
    BINDINGS = [("q", "quit", "Quit")]

    def compose(self) -> ComposeResult:
        request = self.wizard.request
        target = f"{request.name} → {request.env}" if request is not None else "application"
        with Vertical(id="submitted"):
            yield Static(f"Deployment of {target} submitted.", id="submitted-title")
            yield Static("The outcome will appear as a notification. Press q to quit.", id="submitted-hint")
        yield Footer()

    def action_quit(self) -> None:
        self.app.exit()
