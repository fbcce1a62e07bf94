"""Classification of failed API calls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from launchpad.api.errors import ApiError

FORBIDDEN_MESSAGE = "You don't have access to perform this action"
VALIDATE_FAILED_MESSAGE = "Failed to validate the containerized application"
DEPLOY_FAILED_MESSAGE = "Failed to deploy containerized application"
DEPLOY_SUCCESS_MESSAGE = "Deployed Containerized Application successfully"


class FailureKind(str, Enum):
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str | None = None


def classify_failure(exc: BaseException) -> Failure:
    if isinstance(exc, ApiError):
        if exc.status_code == 403:
            return Failure(FailureKind.FORBIDDEN)
        if exc.status_code == 400:
            return Failure(FailureKind.BAD_REQUEST, exc.message or exc.response_text or "Bad request")
    return Failure(FailureKind.UNKNOWN)
