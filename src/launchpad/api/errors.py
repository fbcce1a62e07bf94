"""Transport-level API error."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(RuntimeError):
    """A failed API call.

    ``status_code`` is ``None`` when no response was received at all
    (connection refused, timeout). ``message`` is the server-supplied
    ``message`` field when the body carried one.
    """

    status_code: int | None
    message: str | None = None
    response_text: str = ""
    endpoint: str = ""

    def __str__(self) -> str:
        status = self.status_code if self.status_code is not None else "no-response"
        detail = f", message={self.message!r}" if self.message else ""
        return f"ApiError(status={status}, endpoint={self.endpoint}{detail})"
