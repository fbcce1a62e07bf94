"""Runtime settings for launchpad."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

API_MODES = ("mock", "http")
DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class Settings:
    api_mode: str
    api_url: str | None
    api_token: str | None
    timeout_s: float

    @property
    def is_mock(self) -> bool:
        return self.api_mode == "mock"

    def to_dict(self) -> dict:
        return {
            "api_mode": self.api_mode,
            "api_url": self.api_url,
            "api_token": "***" if self.api_token else None,
            "timeout_s": self.timeout_s,
        }


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Resolve settings from the process environment.

    ``LAUNCHPAD_API_MODE`` is the single switch between the in-memory mock
    backend and the real HTTP backend. The HTTP backend requires
    ``LAUNCHPAD_API_URL``.
    """
    env = os.environ if environ is None else environ
    api_mode = (env.get("LAUNCHPAD_API_MODE") or "mock").strip().lower()
    if api_mode not in API_MODES:
        raise ValueError(f"Unsupported LAUNCHPAD_API_MODE: {api_mode} (expected one of {', '.join(API_MODES)})")

    api_url = (env.get("LAUNCHPAD_API_URL") or "").strip() or None
    if api_mode == "http" and not api_url:
        raise ValueError("LAUNCHPAD_API_URL is required when LAUNCHPAD_API_MODE=http.")

    api_token = (env.get("LAUNCHPAD_API_TOKEN") or "").strip() or None

    raw_timeout = (env.get("LAUNCHPAD_TIMEOUT_S") or "").strip()
    if raw_timeout:
        try:
            timeout_s = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"LAUNCHPAD_TIMEOUT_S must be a number: {raw_timeout}") from exc
        if timeout_s <= 0:
            raise ValueError("LAUNCHPAD_TIMEOUT_S must be > 0.")
    else:
        timeout_s = DEFAULT_TIMEOUT_S

    return Settings(api_mode=api_mode, api_url=api_url, api_token=api_token, timeout_s=timeout_s)
