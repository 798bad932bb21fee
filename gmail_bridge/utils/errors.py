"""Custom exception hierarchy for the Gmail bridge.

Every failure that can abort a tool call or a webhook request is expressed
as one of these exceptions. Tools let them propagate so the MCP layer turns
them into a single error result; the webhook maps them to HTTP status codes.
"""

from __future__ import annotations


class GmailBridgeError(Exception):
    """Base exception for all Gmail bridge errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class AuthenticationError(GmailBridgeError):
    """Exception raised for OAuth and credential-related errors.

    Examples:
        - Authorization header missing or not in the GMAIL scheme
        - client_id, client_secret or refresh_token absent
        - GMAIL_* environment variables not configured
        - Refresh token rejected by the token endpoint
    """

    pass


class GmailAPIError(GmailBridgeError):
    """Exception raised for errors from Gmail API calls.

    Wraps errors returned by the Gmail API (invalid ID, insufficient scope,
    rate limit, network failure). The original error text is kept in the
    message.

    Attributes:
        status_code: HTTP status code from the API response.
        error_code: Gmail API-specific error code, if available.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the Gmail API error exception.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code from the API response.
            error_code: Gmail API-specific error code, if available.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.error_code = error_code


class ValidationError(GmailBridgeError):
    """Exception raised for input validation errors.

    Raised when a tool or webhook parameter is missing or has the wrong
    shape, and when a provider response lacks a required field.

    Attributes:
        field: The name of the field that failed validation, if applicable.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the validation error exception.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message, details)
        self.field = field


def api_error(message: str, exc: Exception) -> GmailAPIError:
    """Wrap an exception raised by the Gmail client library.

    The HTTP status is read from ``exc.resp.status`` when present, which is
    where ``googleapiclient.errors.HttpError`` keeps it.

    Args:
        message: Description of the failed operation.
        exc: The underlying exception.

    Returns:
        GmailAPIError carrying ``"<message>: <exc>"``.
    """
    status = getattr(getattr(exc, "resp", None), "status", None)
    try:
        status_code = int(status) if status is not None else None
    except (TypeError, ValueError):
        status_code = None
    return GmailAPIError(
        f"{message}: {exc}",
        status_code=status_code,
        error_code=type(exc).__name__,
    )


__all__ = [
    "GmailBridgeError",
    "AuthenticationError",
    "GmailAPIError",
    "ValidationError",
    "api_error",
]
