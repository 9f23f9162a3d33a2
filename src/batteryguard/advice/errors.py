"""Exception classes for advice provider interactions.

This module defines a hierarchy of exception classes for the
conditions that can stop the external advice service from answering.
None of them reach the user; the advisor turns each into a fixed
informational message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AdviceError(Exception):
    """Error during an advice request or response parsing.

    Includes the underlying status code and response details
    when available.
    """

    def __init__(
        self, code: int, message: str, response: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize the exception.

        Args:
            code: HTTP status code or custom error code
            message: Human-readable error message
            response: Optional raw API response for debugging
        """
        super().__init__(f"[{code}] {message}")
        self.code: int = code
        self.message: str = message
        self.response: Optional[Dict[str, Any]] = response

    @property
    def is_client_error(self) -> bool:
        """Check if this is a client-side error (4xx)."""
        return 400 <= self.code < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a server-side error (5xx)."""
        return self.code >= 500

    @classmethod
    def from_response(
        cls, response: Dict[str, Any], status_code: int = 0
    ) -> AdviceError:
        """Create an error from an API error response.

        Args:
            response: API response dictionary (``{"error": {"message": ...}}``)
            status_code: HTTP status code

        Returns:
            Appropriate AdviceError subclass
        """
        error = response.get("error")
        message = error.get("message") if isinstance(error, dict) else None
        if 400 <= status_code < 500:
            if status_code in (401, 403):
                return AuthenticationError(
                    status_code, message or "Authentication failed", response
                )
            if status_code == 429:
                return RateLimitError(
                    status_code, message or "Rate limit exceeded", response
                )
            return ClientError(status_code, message or "Client error", response)
        if status_code >= 500:
            return ServerError(status_code, message or "Server error", response)
        return cls(status_code, message or "Unknown error", response)


class MissingCredentialError(AdviceError):
    """Raised when no API key is configured."""

    def __init__(self) -> None:
        super().__init__(0, "No advice API key configured")


class NetworkError(AdviceError):
    """Raised when a network issue prevents API communication."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        """Initialize with network error details.

        Args:
            message: Description of the network error
            original_error: The original exception that was caught
        """
        super().__init__(0, message)
        self.original_error = original_error


class AuthenticationError(AdviceError):
    """Raised when API authentication fails (invalid API key)."""

    pass


class RateLimitError(AdviceError):
    """Raised when rate limits are exceeded."""

    pass


class ClientError(AdviceError):
    """Raised for general 4xx client errors."""

    pass


class ServerError(AdviceError):
    """Raised for 5xx server errors."""

    pass


class ParseError(AdviceError):
    """Raised when the advice response cannot be understood."""

    def __init__(
        self, message: str, original_error: Optional[Exception] = None
    ) -> None:
        """Initialize with parsing error details.

        Args:
            message: Description of the parsing error
            original_error: The original exception that was caught
        """
        super().__init__(0, message)
        self.original_error = original_error
