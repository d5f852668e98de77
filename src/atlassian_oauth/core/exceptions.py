"""Exception hierarchy for atlassian-oauth."""

from typing import Any


class AtlassianOAuthError(Exception):
    """Base exception for all atlassian-oauth errors."""

    def __init__(
        self,
        message: str,
        strategy: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize AtlassianOAuthError.

        Args:
            message: Error message
            strategy: Strategy name (e.g., 'atlassian-oauth')
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.strategy = strategy
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.strategy:
            return f"[{self.strategy}] {self.message}"
        return self.message


class ConfigurationError(AtlassianOAuthError):
    """A required strategy option is missing or invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        strategy: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize ConfigurationError.

        Args:
            message: Error message
            field: Option that failed validation
            strategy: Strategy name
            details: Additional error details
        """
        super().__init__(message, strategy, details)
        self.field = field


class InternalOAuthError(AtlassianOAuthError):
    """OAuth handshake, signing or transport failure."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        status_code: int | None = None,
        strategy: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize InternalOAuthError.

        Args:
            message: Error message
            cause: Underlying exception
            status_code: HTTP status code, when the server answered
            strategy: Strategy name
            details: Additional error details
        """
        super().__init__(message, strategy, details)
        self.cause = cause
        self.status_code = status_code

    def __str__(self) -> str:
        """Return string representation including the cause."""
        text = super().__str__()
        if self.cause is not None:
            return f"{text}: {self.cause}"
        return text


class ProfileFetchError(InternalOAuthError):
    """A signed request for the user's identity or profile failed."""


class ProfileParseError(AtlassianOAuthError):
    """The user profile response could not be parsed."""

    def __init__(
        self,
        message: str,
        body: str | None = None,
        strategy: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize ProfileParseError.

        Args:
            message: Error message
            body: Raw response body that failed to parse
            strategy: Strategy name
            details: Additional error details
        """
        super().__init__(message, strategy, details)
        self.body = body
