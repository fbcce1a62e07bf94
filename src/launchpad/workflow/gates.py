"""Single-flight async gates around the remote validation call."""

from __future__ import annotations

import logging

from launchpad.api.client import DeploymentApi
from launchpad.api.errors import ApiError
from launchpad.api.types import DeploymentSource
from launchpad.workflow import notices
from launchpad.workflow.failures import FORBIDDEN_MESSAGE, VALIDATE_FAILED_MESSAGE, FailureKind, classify_failure
from launchpad.workflow.notices import Notifier
from launchpad.workflow.state import OutcomeStatus, ValidationOutcome

logger = logging.getLogger(__name__)


class SingleFlight:
    """Generation counter: only the most recently issued token is current."""

    def __init__(self) -> None:
        self._generation = 0
        self._pending: int | None = None

    def begin(self) -> int:
        self._generation += 1
        self._pending = self._generation
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def finish(self, token: int) -> bool:
        """Mark ``token`` resolved; returns False when it was superseded."""
        if not self.is_current(token):
            return False
        self._pending = None
        return True

    @property
    def in_flight(self) -> bool:
        return self._pending is not None


class RemoteValidationGate:
    def __init__(self, api: DeploymentApi, notifier: Notifier) -> None:
        self._api = api
        self._notifier = notifier
        self._flight = SingleFlight()
        self.outcome = ValidationOutcome.pending()
        self.banner = ""
        self.resolved_port: str | None = None

    @property
    def in_flight(self) -> bool:
        return self._flight.in_flight

    def reset(self) -> None:
        """Inputs changed: forget the outcome but keep the banner."""
        if self.outcome.status is not OutcomeStatus.PENDING:
            logger.debug("Deployment source changed; validation outcome reset to pending.")
        self.outcome = ValidationOutcome.pending()

    async def validate(self, property_identifier: str, source: DeploymentSource) -> ValidationOutcome | None:
        """Run one validation attempt.

        Returns ``None`` when a newer attempt superseded this one; in that case
        nothing on the gate is touched.
        """
        token = self._flight.begin()
        self.outcome = ValidationOutcome.pending()
        logger.debug("Validating source %s (attempt %d).", source, token)
        try:
            result = await self._api.validate_source(property_identifier, source)
        except Exception as exc:  # noqa: BLE001
            if not self._flight.finish(token):
                logger.debug("Dropping superseded validation failure (attempt %d).", token)
                return None
            return self._reject(source, exc)

        if not self._flight.finish(token):
            logger.debug("Dropping superseded validation result (attempt %d).", token)
            return None
        self.banner = ""
        self.resolved_port = result.port
        self.outcome = ValidationOutcome.accepted(source, result.port)
        logger.debug("Source accepted with port %s.", result.port)
        return self.outcome

    def _reject(self, source: DeploymentSource, exc: Exception) -> ValidationOutcome:
        failure = classify_failure(exc)
        if failure.kind is FailureKind.FORBIDDEN:
            self.banner = ""
            reason = FORBIDDEN_MESSAGE
        elif failure.kind is FailureKind.BAD_REQUEST:
            reason = failure.message or VALIDATE_FAILED_MESSAGE
            self.banner = reason
        else:
            logger.warning("Source validation failed: %s", exc, exc_info=not isinstance(exc, ApiError))
            self.banner = ""
            reason = VALIDATE_FAILED_MESSAGE
        self._notifier.notify(notices.error(reason))
        self.outcome = ValidationOutcome.rejected(source, reason)
        return self.outcome

