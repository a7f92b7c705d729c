"""Error channels used when a worker call is rejected.

Callers pick the channel explicitly: inside a web request the failure is
surfaced through the framework (an ``HTTPException`` that FastAPI turns into
a response), otherwise it is raised to the caller as a ``WorkerRequestError``.
"""

from typing import NoReturn, Protocol

from fastapi import HTTPException

from core.exceptions import WorkerRequestError


class ErrorChannel(Protocol):
    """Capability for reporting a failed worker operation."""

    def fail(self, status_code: int, message: str, *, operation: str) -> NoReturn: ...


class RaiseToCaller:
    """Raise the failure to whoever made the call."""

    def fail(self, status_code: int, message: str, *, operation: str) -> NoReturn:
        raise WorkerRequestError(message, status_code=status_code, operation=operation)


class FrameworkErrorChannel:
    """Surface the failure as an HTTP error response of the current request."""

    def fail(self, status_code: int, message: str, *, operation: str) -> NoReturn:
        raise HTTPException(status_code=status_code, detail=message)


RAISE_TO_CALLER = RaiseToCaller()
FRAMEWORK = FrameworkErrorChannel()
