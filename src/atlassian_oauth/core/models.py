"""Data models for the OAuth handshake and normalized user profiles."""

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class Credentials(NamedTuple):
    """OAuth 1.0a token pair (request token or access token)."""

    token: str
    token_secret: str


class SecureResponse(NamedTuple):
    """Body and raw HTTP response of a signed request."""

    body: str
    response: Any


class StrategyConfig(BaseModel):
    """Options for an OAuth 1.0a strategy.

    Endpoint URLs and the signature method are left empty here and filled in
    by the strategy that owns the config.
    """

    application_url: str | None = Field(default=None, description="Base URL of the Atlassian application")
    callback_url: str | None = Field(default=None, description="URL the user is sent back to after authorizing")
    consumer_key: str | None = Field(default=None, description="Consumer key from the application link")
    consumer_secret: str | None = Field(
        default=None,
        description="PEM-encoded RSA private key (or shared secret for HMAC signing)",
    )
    request_token_url: str | None = Field(default=None, description="Request token endpoint")
    access_token_url: str | None = Field(default=None, description="Access token endpoint")
    user_authorization_url: str | None = Field(default=None, description="User authorization endpoint")
    signature_method: str | None = Field(default=None, description="OAuth signature method")
    timeout: float = Field(default=30, description="HTTP timeout in seconds")
    session_key: str | None = Field(default=None, description="Session key for the pending request token")

    model_config = ConfigDict(frozen=True)


class Email(BaseModel):
    """Email address attached to a profile."""

    value: str | None = Field(default=None, description="Email address")

    model_config = ConfigDict(frozen=True)


class UserProfile(BaseModel):
    """Normalized profile of the authenticated Atlassian user."""

    provider: str = Field(default="atlassian-oauth", description="Strategy that produced the profile")
    id: str = Field(description="Unique user identifier (the username)")
    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Full name")
    avatar_urls: str | None = Field(default=None, description="User slug as returned by the application")
    emails: list[Email] = Field(default_factory=list, description="Email addresses")
    token: str = Field(description="OAuth access token")
    token_secret: str = Field(description="OAuth access token secret")
    raw_body: str = Field(default="", description="Raw profile response body")
    raw_json: dict[str, Any] = Field(default_factory=dict, description="Parsed profile response")

    model_config = ConfigDict(frozen=True)


class AuthAction(str, Enum):
    """Outcome of one authentication step."""

    REDIRECT = "redirect"
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"


class AuthResult(BaseModel):
    """Result handed back to the host after an authentication step."""

    action: AuthAction = Field(description="What the host should do next")
    url: str | None = Field(default=None, description="Redirect target")
    user: Any = Field(default=None, description="User returned by the verify callback")
    info: Any = Field(default=None, description="Extra info from the verify callback")
    error: Exception | None = Field(default=None, description="Error for failed handshakes")

    @property
    def success(self) -> bool:
        """Check if the user was authenticated."""
        return self.action == AuthAction.SUCCESS

    model_config = ConfigDict(arbitrary_types_allowed=True)
