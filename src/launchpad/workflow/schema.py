"""Field rules for the deployment form."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Iterable

from launchpad.workflow.pairs import PairList, duplicate_keys
from launchpad.workflow.state import FormState, WizardStep

PATH_PATTERN = re.compile(r"^[a-zA-Z0-9/-]+$")
PATH_MESSAGE = "Only letters, numbers, forward slash and dashes are allowed"
MAX_PORT = 65536

LABELS = {
    "name": "Application Name",
    "repo_url": "Repository URL",
    "context_dir": "Context Directory",
    "git_ref": "Branch",
    "repo_type": "Repository Type",
    "env": "Environment",
    "path": "Path",
    "health_check_path": "Health Check Path",
    "port": "Port",
}

PAIR_LABELS = {
    "config": ("Configuration Key", "Configuration Value"),
    "build_args": ("Key", "Value"),
}

STEP_FIELDS: dict[WizardStep, tuple[str, ...]] = {
    WizardStep.REPOSITORY: ("repo_url", "context_dir", "repo_type", "git_ref"),
    WizardStep.APPLICATION: ("name", "env", "path", "health_check_path", "ref", "port"),
    WizardStep.RUNTIME_CONFIG: ("config",),
    WizardStep.BUILD_ARGS: ("build_args",),
    WizardStep.REVIEW: (),
}


@dataclass(frozen=True)
class ValidationContext:
    environments: tuple[str, ...] | None = None


@dataclass(frozen=True)
class FieldResult:
    valid: bool
    message: str | None = None


@dataclass(frozen=True)
class FormValidation:
    errors: dict[str, str] = field(default_factory=dict)
    warnings: dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


def step_of(name: str) -> WizardStep:
    base = name.split("[", 1)[0]
    for step, names in STEP_FIELDS.items():
        if base in names:
            return step
    raise KeyError(name)


def validate_field(name: str, value: Any, context: ValidationContext | None = None) -> FieldResult:
    """Validate one scalar field. Pair lists go through ``validate_pairs``."""
    text = "" if value is None else str(value)
    if name in {"name", "context_dir", "repo_type", "git_ref"}:
        return _required(name, text)
    if name == "repo_url":
        return _required(name, text.strip())
    if name == "env":
        result = _required(name, text)
        if result.valid and context is not None and context.environments is not None:
            if text not in context.environments:
                return FieldResult(False, f"Environment must be one of: {', '.join(context.environments) or '(none)'}")
        return result
    if name in {"path", "health_check_path"}:
        result = _required(name, text)
        if not result.valid:
            return result
        if not PATH_PATTERN.match(text):
            return FieldResult(False, PATH_MESSAGE)
        return FieldResult(True)
    if name == "port":
        return _validate_port(text)
    if name == "ref":
        return FieldResult(True)
    raise KeyError(name)


def validate_pairs(name: str, pairs: PairList) -> dict[str, str]:
    key_label, value_label = PAIR_LABELS[name]
    errors: dict[str, str] = {}
    for index, entry in enumerate(pairs):
        if not entry.key.strip():
            errors[f"{name}[{index}].key"] = f"{key_label} is a required field"
        if not entry.value.strip():
            errors[f"{name}[{index}].value"] = f"{value_label} is a required field"
    return errors


def validate_fields(
    state: FormState,
    names: Iterable[str],
    context: ValidationContext | None = None,
) -> FormValidation:
    errors: dict[str, str] = {}
    warnings: dict[str, str] = {}
    for name in names:
        if name in PAIR_LABELS:
            pairs = state.pairs(name)
            errors.update(validate_pairs(name, pairs))
            duplicates = duplicate_keys(pairs)
            if duplicates:
                warnings[name] = f"Duplicate keys, last value wins: {', '.join(duplicates)}"
            continue
        result = validate_field(name, state.get(name), context)
        if not result.valid:
            errors[name] = result.message or "Invalid value"
    return FormValidation(errors=errors, warnings=warnings)


def validate_steps(
    state: FormState,
    steps: Iterable[WizardStep],
    context: ValidationContext | None = None,
) -> FormValidation:
    names: list[str] = []
    for step in steps:
        names.extend(STEP_FIELDS[step])
    return validate_fields(state, names, context)


def validate_all(state: FormState, context: ValidationContext | None = None) -> FormValidation:
    return validate_steps(state, list(WizardStep), context)


def _required(name: str, text: str) -> FieldResult:
    if not text:
        return FieldResult(False, f"{LABELS[name]} is a required field")
    return FieldResult(True)


def _validate_port(raw: str) -> FieldResult:
    text = raw.strip()
    if not text:
        return FieldResult(False, "Port is required")
    if not text.isascii() or not text.isdigit():
        return FieldResult(False, "Port must contain only numbers")
    if len(text) > 5:
        return FieldResult(False, "Port must be less than or equal to 5 digits")
    if int(text) > MAX_PORT:
        return FieldResult(False, f"Port must be less than or equal to {MAX_PORT}")
    return FieldResult(True)
