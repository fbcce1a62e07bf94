"""Build the deployment request from accumulated form state."""

from __future__ import annotations

from launchpad.api.types import DeploymentRequest
from launchpad.workflow.pairs import collapse_pairs
from launchpad.workflow.state import FormState

_REQUIRED = ("name", "repo_url", "git_ref", "context_dir", "repo_type", "env", "path", "health_check_path")


def normalize_path(value: str) -> str:
    trimmed = value.strip()
    if trimmed.startswith("/"):
        return trimmed
    return f"/{trimmed}"


def assemble(state: FormState, resolved_port: str | None, property_identifier: str) -> DeploymentRequest:
    """Return the immutable request for ``state``.

    The port always comes from remote validation; the form's own port value
    is ignored. Missing required values raise ``ValueError``: validation is
    expected to have rejected them already.
    """
    if not resolved_port:
        raise ValueError("assemble() requires a port resolved by remote validation.")
    missing = [name for name in _REQUIRED if not state.get(name).strip()]
    if missing:
        raise ValueError(f"assemble() called with missing required fields: {', '.join(missing)}")
    identifier = property_identifier.strip()
    if not identifier:
        raise ValueError("assemble() requires a property identifier.")

    return DeploymentRequest(
        property_identifier=identifier,
        name=state.name,
        env=state.env,
        repo_url=state.repo_url.strip(),
        git_ref=state.git_ref,
        context_dir=state.context_dir,
        repo_type=state.repo_type,
        ref=state.ref.strip() or None,
        path=normalize_path(state.path),
        health_check_path=normalize_path(state.health_check_path),
        port=resolved_port,
        config=collapse_pairs(state.config),
        build_args=collapse_pairs(state.build_args),
    )
