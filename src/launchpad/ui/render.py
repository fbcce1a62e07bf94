"""Render helpers for the launchpad CLI."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from launchpad.ui.console import get_console
from launchpad.workflow.notices import Notice
from launchpad.workflow.state import WizardStep


def render_banner(title: str, subtitle: str) -> None:
    console = get_console()
    panel = Panel(
        Group(Text(subtitle, style="subtitle")),
        title=Text(title, style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style="border",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)
    console.print()


def render_step_list(current: WizardStep, unvalidated: Sequence[WizardStep] = ()) -> None:
    """One-line navigator; ``*`` marks steps that have not passed validation."""
    line = Text()
    for step in WizardStep:
        if line:
            line.append("  ›  ", style="label")
        style = "step" if step is current else "step.inactive"
        line.append(f"{int(step)} {step.title}", style=style)
        if step in unvalidated and step is not current:
            line.append("*", style="warning")
    get_console().print(line)


def render_step_header(step: WizardStep, description: str | None = None) -> None:
    console = get_console()
    content = [Text(description or step.description, style="subtitle")]
    panel = Panel(
        Group(*content),
        title=Text(f"Step {int(step)}/{len(WizardStep)} · {step.title}", style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style="border",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_info(text: str) -> None:
    get_console().print(text, style="info", markup=False)


def render_warning(text: str) -> None:
    get_console().print(text, style="warning", markup=False)


def render_success(text: str) -> None:
    get_console().print(text, style="success", markup=False)


def render_error(text: str) -> None:
    console = get_console()
    panel = Panel(
        Text(text, style="error"),
        box=box.ROUNDED,
        border_style="error",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_stage_banner(text: str) -> None:
    console = get_console()
    panel = Panel(
        Text(text, style="error"),
        title=Text("Validation failed", style="error"),
        title_align="left",
        box=box.HEAVY,
        border_style="error",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_field_errors(errors: Mapping[str, str], labels: Mapping[str, str]) -> None:
    if not errors:
        return
    lines = [Text(f"- {labels.get(key, key)}: {message}", style="error") for key, message in errors.items()]
    panel = Panel(
        Group(*lines),
        title=Text("Fix these fields", style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style="border",
        padding=(0, 2),
        expand=True,
    )
    get_console().print(panel)


def render_summary_table(rows: Mapping[str, str] | Sequence[tuple[str, str]], title: str = "Summary") -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")

    items = rows.items() if hasattr(rows, "items") else rows
    for key, value in items:
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))

    panel = Panel(
        table,
        title=Text(title, style="step"),
        title_align="left",
        border_style="border",
        box=box.ROUNDED,
        padding=(0, 2),
        expand=True,
    )
    console.print()
    console.print(panel)


def render_pairs(title: str, pairs: Sequence[tuple[str, str]], errors: Mapping[str, str], list_name: str) -> None:
    table = Table(show_header=True, box=box.SIMPLE, pad_edge=False)
    table.add_column("#", style="label", justify="right")
    table.add_column("Key", style="value")
    table.add_column("Value", style="value")
    for index, (key, value) in enumerate(pairs):
        key_text = Text(key or "(empty)", style="error" if f"{list_name}[{index}].key" in errors else "value")
        value_text = Text(value or "(empty)", style="error" if f"{list_name}[{index}].value" in errors else "value")
        table.add_row(str(index), key_text, value_text)
    body = table if pairs else Text("No entries.", style="subtitle")
    panel = Panel(
        body,
        title=Text(title, style="step"),
        title_align="left",
        border_style="border",
        box=box.ROUNDED,
        padding=(0, 2),
        expand=True,
    )
    get_console().print(panel)


@contextmanager
def status_spinner(message: str) -> Iterator[object]:
    console = get_console()
    with console.status(message, spinner="dots", spinner_style="accent") as status:
        yield status


class ConsoleNotifier:
    """Prints transient notices and keeps them for the final exit code."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        if notice.level == "success":
            render_success(notice.message)
        elif notice.level == "error":
            render_error(notice.message)
        else:
            render_warning(notice.message)
