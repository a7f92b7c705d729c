"""Custom exception hierarchy for worker-bridge."""


class ProxyError(Exception):
    """Base exception for all worker-bridge errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class UpstreamError(ProxyError):
    """Raised when the worker service returns an error.

    Attributes:
        message: Error message
        status_code: HTTP status code from the worker (optional)
        provider: Upstream service name (e.g., 'worker')
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.provider = provider


class WorkerRequestError(UpstreamError):
    """Raised to the caller when a worker operation is rejected.

    The message has the form ``Unable to <operation> - <detail>``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, provider="worker")
        self.operation = operation


class UpstreamTimeoutError(UpstreamError):
    """Raised when a worker request times out."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, status_code=None, provider=provider)


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the worker service."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, status_code=None, provider=provider)


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""


class InvalidJSON(ProxyError):
    """Request body is not valid JSON."""
