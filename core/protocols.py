"""Shared protocol definitions."""

from typing import Any, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_worker_call(
        self,
        operation: str,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        body: Any = None,
    ) -> None: ...
    def log_worker_result(self, operation: str, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...


class NullRequestLogger:
    """Logger that discards everything, for library use without a dashboard."""

    def log_worker_call(
        self,
        operation: str,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        body: Any = None,
    ) -> None:
        return None

    def log_worker_result(self, operation: str, status: int) -> None:
        return None

    def log_error(self, route: str, status: int, message: str) -> None:
        return None
