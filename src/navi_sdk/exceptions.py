"""Custom exceptions for Navi SDK."""

from __future__ import annotations

from typing import Any


class NaviError(Exception):
    """Base exception for all Navi SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class AuthenticationError(NaviError):
    """Raised when the API key is rejected (401) or malformed."""

    def __init__(
        self,
        message: str = "Invalid or missing API key",
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=401, detail=detail)


class AuthorizationError(NaviError):
    """Raised when access is denied (403)."""

    def __init__(
        self,
        message: str = "Access denied",
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=403, detail=detail)


class NotFoundError(NaviError):
    """Raised when a resource is not found (404)."""

    def __init__(
        self,
        message: str = "Resource not found",
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=404, detail=detail)


class ValidationError(NaviError):
    """Raised when request validation fails (400 or 422).

    The server's per-field messages, when it sends any, are kept in
    ``errors``.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Any = None,
        status_code: int = 400,
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, detail=detail)
        self.errors = errors if errors is not None else []


class RateLimitError(NaviError):
    """Raised when the integration's rate limit is exceeded (429).

    The SDK never retries on its own. ``retry_after`` holds the number of
    seconds suggested by the server's ``Retry-After`` header, if any.

    Example:
        try:
            client.conversations.chat_sync(conversation_id, "Hello")
        except RateLimitError as e:
            time.sleep(e.retry_after or 1)
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=429, detail=detail)
        self.retry_after = retry_after


class APIError(NaviError):
    """Raised for other API errors."""

    pass


class InvalidResponseError(NaviError):
    """Raised when a successful response body is not valid JSON."""

    pass


class ConfigurationError(NaviError):
    """Raised when SDK configuration is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=None, detail=None)


# =============================================================================
# Transport Exceptions
# =============================================================================


class APIConnectionError(NaviError):
    """Raised when the API cannot be reached or the connection drops."""

    def __init__(
        self,
        message: str = "Failed to connect to Navi API",
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=None, detail=detail)


class APITimeoutError(APIConnectionError):
    """Raised when a connect or read timeout expires."""

    def __init__(
        self,
        message: str = "Request to Navi API timed out",
        detail: Any = None,
    ) -> None:
        super().__init__(message, detail=detail)
