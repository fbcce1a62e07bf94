"""Form state, wizard steps and remote validation outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum
from typing import Any

from launchpad.api.types import DeploymentSource
from launchpad.workflow.pairs import PairList


class WizardStep(IntEnum):
    REPOSITORY = 1
    APPLICATION = 2
    RUNTIME_CONFIG = 3
    BUILD_ARGS = 4
    REVIEW = 5

    @property
    def title(self) -> str:
        return _STEP_TITLES[self]

    @property
    def description(self) -> str:
        return _STEP_DESCRIPTIONS[self]


_STEP_TITLES = {
    WizardStep.REPOSITORY: "Repository Details",
    WizardStep.APPLICATION: "Application Details",
    WizardStep.RUNTIME_CONFIG: "Deployment Config",
    WizardStep.BUILD_ARGS: "Build Args",
    WizardStep.REVIEW: "Review",
}

_STEP_DESCRIPTIONS = {
    WizardStep.REPOSITORY: "Where the application source lives.",
    WizardStep.APPLICATION: "Name, environment and routing; validated against the backend.",
    WizardStep.RUNTIME_CONFIG: "Key/value configuration available to the application at runtime.",
    WizardStep.BUILD_ARGS: "Key/value arguments passed to the container image build.",
    WizardStep.REVIEW: "Confirm and deploy.",
}

# Inputs whose change invalidates a remote validation result.
SOURCE_FIELDS = ("name", "repo_url", "git_ref", "context_dir")
PAIR_FIELDS = ("config", "build_args")


@dataclass
class FormState:
    name: str = ""
    repo_url: str = ""
    context_dir: str = ""
    git_ref: str = "master"
    repo_type: str = "monolithic"
    ref: str = ""
    path: str = "/"
    health_check_path: str = "/"
    env: str = ""
    port: str = "3000"
    config: PairList = field(default_factory=PairList)
    build_args: PairList = field(default_factory=PairList)

    @classmethod
    def scalar_fields(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls) if item.name not in PAIR_FIELDS)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FormState":
        state = cls()
        for name, value in data.items():
            if name in PAIR_FIELDS:
                items = value or []
                if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                    raise ValueError(f"{name} must be a list of {{\"key\": ..., \"value\": ...}} objects")
                pairs = state.pairs(name)
                for item in items:
                    pairs.append(str(item.get("key", "")), str(item.get("value", "")))
            else:
                state.set(name, "" if value is None else str(value))
        return state

    def get(self, name: str) -> str:
        if name not in self.scalar_fields():
            raise KeyError(name)
        return getattr(self, name)

    def set(self, name: str, value: str) -> None:
        if name not in self.scalar_fields():
            raise KeyError(name)
        setattr(self, name, value)

    def pairs(self, name: str) -> PairList:
        if name not in PAIR_FIELDS:
            raise KeyError(name)
        return getattr(self, name)

    def source(self) -> DeploymentSource:
        return DeploymentSource(
            name=self.name,
            repo_url=self.repo_url.strip(),
            git_ref=self.git_ref,
            context_dir=self.context_dir,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {name: getattr(self, name) for name in self.scalar_fields()}
        data["config"] = self.config.to_list()
        data["build_args"] = self.build_args.to_list()
        return data


class OutcomeStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ValidationOutcome:
    status: OutcomeStatus
    source: DeploymentSource | None = None
    port: str | None = None
    reason: str | None = None

    @classmethod
    def pending(cls) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.PENDING)

    @classmethod
    def accepted(cls, source: DeploymentSource, port: str) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.ACCEPTED, source=source, port=port)

    @classmethod
    def rejected(cls, source: DeploymentSource, reason: str) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.REJECTED, source=source, reason=reason)

    @property
    def is_accepted(self) -> bool:
        return self.status is OutcomeStatus.ACCEPTED

    def accepts(self, source: DeploymentSource) -> bool:
        return self.is_accepted and self.source == source
