"""Five-step deployment wizard state machine."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Callable

from launchpad.api.client import DeploymentApi
from launchpad.api.types import DeploymentRequest, EnvironmentDescriptor
from launchpad.workflow import notices
from launchpad.workflow.assemble import assemble
from launchpad.workflow.gates import RemoteValidationGate
from launchpad.workflow.notices import Notifier
from launchpad.workflow.pairs import KeyValuePair
from launchpad.workflow.schema import (
    FormValidation,
    ValidationContext,
    step_of,
    validate_all,
    validate_field,
    validate_fields,
    validate_pairs,
    validate_steps,
)
from launchpad.workflow.state import SOURCE_FIELDS, FormState, ValidationOutcome, WizardStep
from launchpad.workflow.submit import SubmissionExecutor, SubmissionResult

logger = logging.getLogger(__name__)

_PAIR_ERROR_KEY = re.compile(r"^(?P<list>\w+)\[(?P<index>\d+)\]\.(?P<part>key|value)$")

UNVALIDATED_SOURCE_MESSAGE = "Validate the application details before deploying"


class ReadOnlyFieldError(ValueError):
    """Raised when writing a field that remote validation has locked."""


class DeploymentWizard:
    """Drives one deployment submission from repository details to deploy.

    ``on_submit_workflow(True)`` and ``on_close()`` fire as soon as a
    submission starts; the create call keeps running as ``self.submission``
    and reports its outcome through ``notifier`` only.
    """

    def __init__(
        self,
        api: DeploymentApi,
        property_identifier: str,
        notifier: Notifier,
        *,
        on_close: Callable[[], None] | None = None,
        on_submit_workflow: Callable[[bool], None] | None = None,
        state: FormState | None = None,
    ) -> None:
        self.api = api
        self.property_identifier = property_identifier
        self.notifier = notifier
        self.state = state if state is not None else FormState()
        self.step = WizardStep.REPOSITORY
        self.errors: dict[str, str] = {}
        self.warnings: dict[str, str] = {}
        self.validated_steps: set[WizardStep] = set()
        self.environments: dict[str, EnvironmentDescriptor] | None = None
        self.port_locked = False
        self.submitted = False
        self.closed = False
        self.request: DeploymentRequest | None = None
        self.submission: asyncio.Task[SubmissionResult] | None = None
        self._on_close = on_close
        self._on_submit_workflow = on_submit_workflow
        self._gate = RemoteValidationGate(api, notifier)
        self._executor = SubmissionExecutor(api, notifier)
        self._environments_requested = False

    @property
    def banner(self) -> str:
        return self._gate.banner

    @property
    def outcome(self) -> ValidationOutcome:
        return self._gate.outcome

    @property
    def resolved_port(self) -> str | None:
        return self._gate.resolved_port

    @property
    def validating(self) -> bool:
        return self._gate.in_flight

    def context(self) -> ValidationContext:
        if self.environments is None:
            return ValidationContext()
        return ValidationContext(environments=tuple(self.environments))

    def environment_names(self) -> list[str]:
        return list(self.environments or {})

    def unvalidated_steps(self) -> list[WizardStep]:
        missing = [
            step for step in WizardStep if step is not WizardStep.REVIEW and step not in self.validated_steps
        ]
        if WizardStep.APPLICATION not in missing and not self.outcome.accepts(self.state.source()):
            missing.append(WizardStep.APPLICATION)
        return sorted(missing)

    async def load_environments(self) -> dict[str, EnvironmentDescriptor]:
        if self._environments_requested:
            return self.environments or {}
        self._environments_requested = True
        try:
            self.environments = await self.api.list_environments(self.property_identifier)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not list environments for %s: %s", self.property_identifier, exc)
            self.notifier.notify(notices.error("Failed to load environments"))
            return {}
        if not self.state.env and len(self.environments) == 1:
            self.state.env = next(iter(self.environments))
        return self.environments

    def set_field(self, name: str, value: str) -> None:
        if name == "port" and self.port_locked:
            raise ReadOnlyFieldError("Port is set by remote validation and cannot be edited.")
        previous = self.state.get(name)
        if name == "path" and self.state.health_check_path == previous:
            self.state.health_check_path = value
            self._revalidate("health_check_path")
        self.state.set(name, value)
        if value == previous:
            return
        if name in SOURCE_FIELDS:
            self._gate.reset()
            self.validated_steps.discard(WizardStep.APPLICATION)
        self.validated_steps.discard(step_of(name))
        if name in self.errors:
            self._revalidate(name)

    def blur(self, name: str) -> None:
        self._revalidate(name)

    def add_pair(self, list_name: str) -> KeyValuePair:
        entry = self.state.pairs(list_name).append()
        self.validated_steps.discard(step_of(list_name))
        return entry

    def remove_pair(self, list_name: str, index: int) -> None:
        self.state.pairs(list_name).remove_at(index)
        self._reindex_pair_errors(list_name, index)
        self._refresh_warnings(list_name)
        self.validated_steps.discard(step_of(list_name))

    def set_pair(self, list_name: str, index: int, *, key: str | None = None, value: str | None = None) -> None:
        pairs = self.state.pairs(list_name)
        entry = pairs[index]
        if (key is None or key == entry.key) and (value is None or value == entry.value):
            return
        if key is not None:
            pairs.set_key(index, key)
        if value is not None:
            pairs.set_value(index, value)
        self.validated_steps.discard(step_of(list_name))
        if any(error_key.startswith(f"{list_name}[{index}].") for error_key in self.errors):
            self.blur_pair(list_name, index)

    def blur_pair(self, list_name: str, index: int) -> None:
        prefix = f"{list_name}[{index}]."
        entry_errors = validate_pairs(list_name, self.state.pairs(list_name))
        self.errors = {key: message for key, message in self.errors.items() if not key.startswith(prefix)}
        self.errors.update({key: message for key, message in entry_errors.items() if key.startswith(prefix)})
        self._refresh_warnings(list_name)

    async def next(self) -> bool:
        """Advance one step when the steps visited so far validate."""
        if self.step is WizardStep.REVIEW:
            return False
        origin = self.step
        steps = [step for step in WizardStep if step <= origin]
        result = validate_steps(self.state, steps, self.context())
        self._publish(result, steps)
        if not result.valid:
            logger.debug("Step %s blocked by %d field error(s).", origin.name, len(result.errors))
            return False
        if origin is WizardStep.APPLICATION and not await self._pass_remote_gate():
            return False
        if self.step is not origin:
            return False
        self.validated_steps.update(steps)
        self.step = WizardStep(origin + 1)
        return True

    def back(self) -> bool:
        if self.step is WizardStep.REPOSITORY:
            return False
        self.step = WizardStep(self.step - 1)
        return True

    def jump(self, step: int) -> None:
        self.step = WizardStep(step)

    def cancel(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close()

    async def submit(self) -> bool:
        """Start the deployment; returns whether the workflow started."""
        if self.submitted or self.closed:
            return False
        steps = list(WizardStep)
        result = validate_all(self.state, self.context())
        self._publish(result, steps)
        if not result.valid:
            return False
        source = self.state.source()
        if not self.outcome.accepts(source) or self.banner:
            self.notifier.notify(notices.error(UNVALIDATED_SOURCE_MESSAGE))
            return False
        self.validated_steps.update(step for step in steps if step is not WizardStep.REVIEW)

        self.request = assemble(self.state, self.outcome.port, self.property_identifier)
        self.submitted = True
        if self._on_submit_workflow is not None:
            self._on_submit_workflow(True)
        self.closed = True
        if self._on_close is not None:
            self._on_close()
        self.submission = asyncio.create_task(self._executor.execute(self.request))
        return True

    async def _pass_remote_gate(self) -> bool:
        source = self.state.source()
        if self.outcome.accepts(source) and not self.banner:
            return True
        outcome = await self._gate.validate(self.property_identifier, source)
        if outcome is None or not outcome.is_accepted:
            return False
        if outcome.source != self.state.source():
            logger.debug("Source changed while validating; not advancing.")
            return False
        self._lock_port(outcome.port or "")
        return True

    def _lock_port(self, port: str) -> None:
        self.state.port = port
        self.port_locked = True
        self.errors.pop("port", None)

    def _revalidate(self, name: str) -> None:
        result = validate_field(name, self.state.get(name), self.context())
        if result.valid:
            self.errors.pop(name, None)
        else:
            self.errors[name] = result.message or "Invalid value"

    def _publish(self, result: FormValidation, steps: list[WizardStep]) -> None:
        scope = set(steps)
        self.errors = {key: message for key, message in self.errors.items() if step_of(key) not in scope}
        self.errors.update(result.errors)
        self.warnings = {key: message for key, message in self.warnings.items() if step_of(key) not in scope}
        self.warnings.update(result.warnings)

    def _refresh_warnings(self, list_name: str) -> None:
        self.warnings.pop(list_name, None)
        self.warnings.update(validate_fields(self.state, [list_name]).warnings)

    def _reindex_pair_errors(self, list_name: str, removed: int) -> None:
        reindexed: dict[str, str] = {}
        for key, message in self.errors.items():
            match = _PAIR_ERROR_KEY.match(key)
            if match is None or match.group("list") != list_name:
                reindexed[key] = message
                continue
            index = int(match.group("index"))
            if index == removed:
                continue
            if index > removed:
                index -= 1
            reindexed[f"{list_name}[{index}].{match.group('part')}"] = message
        self.errors = reindexed
