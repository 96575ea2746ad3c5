"""
Error types raised by the Twitter API client.

Every error carries a standardized code so callers can branch on the
failure class without string matching.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional, Self


class ErrorCode(StrEnum):
    """Standardized client error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    RESPONSE_PARSE_ERROR = "RESPONSE_PARSE_ERROR"


class TwitterApiError(Exception):
    """Base error for the client, with a standardized error code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        http_status: Optional[int] = None,
    ) -> None:
        """
        Initialize the error.

        Args:
            code: Standardized error code
            message: Human-readable error message
            http_status: HTTP status of the response involved, if any
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status

    def is_code(self, code: ErrorCode) -> bool:
        """Check if this error matches a specific code."""
        return self.code == code


class ConfigurationError(TwitterApiError):
    """Credentials or auth settings are missing or unusable."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.CONFIGURATION_ERROR, message)

    @classmethod
    def missing_credentials(cls) -> Self:
        """Create error for an empty application key or secret."""
        return cls("Application key and secret are required")

    @classmethod
    def missing_oauth_secret(cls) -> Self:
        """Create error for OAuth authorization without a token secret."""
        return cls("OAuth authorization requires a token secret")

    @classmethod
    def missing_bearer_token(cls) -> Self:
        """Create error for Bearer mode without a stored token."""
        return cls("Bearer auth requires a token; call auth(AuthMode.BEARER, token) first")

    @classmethod
    def missing_rsa_key(cls) -> Self:
        """Create error for RSA-SHA1 signing without a private key."""
        return cls("RSA-SHA1 signing requires a PEM private key")

    @classmethod
    def unsupported_signature_method(cls, method: str) -> Self:
        """Create error for an unknown OAuth signature method."""
        return cls(f"Unsupported signature method: {method}")


class TransportError(TwitterApiError):
    """The HTTP call itself failed (network, TLS, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.TRANSPORT_ERROR, message)

    @classmethod
    def network_error(cls, details: str) -> Self:
        """Create network error."""
        return cls(f"Network error: {details}")


class ResponseParseError(TwitterApiError):
    """A non-empty response body could not be decoded."""

    def __init__(self, message: str, *, http_status: Optional[int] = None) -> None:
        super().__init__(ErrorCode.RESPONSE_PARSE_ERROR, message, http_status=http_status)

    @classmethod
    def invalid_json(cls, http_status: int, details: str) -> Self:
        """Create error for a response body that is not valid JSON."""
        return cls(
            f"API response was not valid JSON: {details}",
            http_status=http_status,
        )
