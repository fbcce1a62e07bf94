"""Deployment submission workflow."""

from launchpad.workflow.assemble import assemble, normalize_path
from launchpad.workflow.machine import DeploymentWizard, ReadOnlyFieldError
from launchpad.workflow.notices import Notice, Notifier
from launchpad.workflow.pairs import KeyValuePair, PairList
from launchpad.workflow.schema import validate_all, validate_field
from launchpad.workflow.state import FormState, OutcomeStatus, ValidationOutcome, WizardStep
from launchpad.workflow.submit import SubmissionResult

__all__ = [
    "DeploymentWizard",
    "FormState",
    "KeyValuePair",
    "Notice",
    "Notifier",
    "OutcomeStatus",
    "PairList",
    "ReadOnlyFieldError",
    "SubmissionResult",
    "ValidationOutcome",
    "WizardStep",
    "assemble",
    "normalize_path",
    "validate_all",
    "validate_field",
]
