"""Create-deployment call and outcome routing."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from launchpad.api.client import DeploymentApi
from launchpad.api.errors import ApiError
from launchpad.api.types import DeploymentRequest
from launchpad.workflow import notices
from launchpad.workflow.failures import (
    DEPLOY_FAILED_MESSAGE,
    DEPLOY_SUCCESS_MESSAGE,
    FORBIDDEN_MESSAGE,
    FailureKind,
    classify_failure,
)
from launchpad.workflow.notices import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    kind: FailureKind | None
    message: str


class SubmissionExecutor:
    def __init__(self, api: DeploymentApi, notifier: Notifier) -> None:
        self._api = api
        self._notifier = notifier

    async def execute(self, request: DeploymentRequest) -> SubmissionResult:
        """Call create and report the outcome as a notice; never raises on API failure."""
        logger.debug("Creating deployment %s in %s/%s.", request.name, request.property_identifier, request.env)
        try:
            await self._api.create_deployment(request)
        except Exception as exc:  # noqa: BLE001
            failure = classify_failure(exc)
            if failure.kind is FailureKind.FORBIDDEN:
                message = FORBIDDEN_MESSAGE
            elif failure.kind is FailureKind.BAD_REQUEST:
                message = failure.message or DEPLOY_FAILED_MESSAGE
            else:
                logger.warning("Deployment of %s failed: %s", request.name, exc, exc_info=not isinstance(exc, ApiError))
                message = DEPLOY_FAILED_MESSAGE
            self._notifier.notify(notices.error(message))
            return SubmissionResult(ok=False, kind=failure.kind, message=message)

        self._notifier.notify(notices.success(DEPLOY_SUCCESS_MESSAGE))
        return SubmissionResult(ok=True, kind=None, message=DEPLOY_SUCCESS_MESSAGE)
