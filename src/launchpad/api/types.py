"""Request/response types shared by API clients and the workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class DeploymentSource:
    """What to build: the triple checked by remote validation, plus the app name."""

    name: str
    repo_url: str
    git_ref: str
    context_dir: str

    def to_body(self, property_identifier: str) -> dict[str, str]:
        return {
            "propertyIdentifier": property_identifier,
            "identifier": self.name,
            "repoUrl": self.repo_url,
            "gitRef": self.git_ref,
            "contextDir": self.context_dir,
        }


@dataclass(frozen=True)
class SourceValidation:
    port: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EnvironmentDescriptor:
    name: str
    url: str | None = None
    cluster: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, name: str, payload: Any) -> "EnvironmentDescriptor":
        # Environments come back grouped by name; each group is a list of
        # property records or a single record.
        record: dict[str, Any] = {}
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            record = payload[0]
        elif isinstance(payload, dict):
            record = payload
        return cls(
            name=name,
            url=record.get("url"),
            cluster=record.get("cluster"),
            raw=record,
        )


@dataclass(frozen=True)
class DeploymentRequest:
    property_identifier: str
    name: str
    env: str
    repo_url: str
    git_ref: str
    context_dir: str
    repo_type: str
    path: str
    health_check_path: str
    port: str
    config: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    build_args: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    ref: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "config", MappingProxyType(dict(self.config)))
        object.__setattr__(self, "build_args", MappingProxyType(dict(self.build_args)))

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "propertyIdentifier": self.property_identifier,
            "name": self.name,
            "env": self.env,
            "repoUrl": self.repo_url,
            "gitRef": self.git_ref,
            "contextDir": self.context_dir,
            "type": self.repo_type,
            "path": self.path,
            "healthCheckPath": self.health_check_path,
            "port": self.port,
            "config": dict(self.config),
            "buildArgs": dict(self.build_args),
        }
        if self.ref:
            body["ref"] = self.ref
        return body
