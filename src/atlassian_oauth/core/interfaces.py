"""Abstract interfaces for OAuth 1.0a strategies.

A strategy is assembled from two capabilities: an OAuthEngine that performs
the three-legged handshake and signs requests, and a ProfileResolver that
turns access credentials into a normalized UserProfile. Neither knows about
the other; the strategy wires them together.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from atlassian_oauth.core.models import AuthResult, Credentials, SecureResponse, UserProfile

# done(error, profile)
ProfileCallback = Callable[[Exception | None, UserProfile | None], Any]

# verify(token, token_secret, profile, done) where done(error, user, info=None)
VerifyCallback = Callable[..., Any]


class OAuthEngine(ABC):
    """Abstract interface for an OAuth 1.0a client.

    Implementations: OAuth1Engine
    """

    @abstractmethod
    def get_request_token(self) -> Credentials:
        """Obtain a temporary request token.

        Returns:
            Request token and secret

        Raises:
            InternalOAuthError: If the provider refuses or the request fails
        """

    @abstractmethod
    def get_authorization_url(self, request_token: Credentials) -> str:
        """Build the URL the user is redirected to for authorization.

        Args:
            request_token: Token returned by get_request_token

        Returns:
            Authorization URL
        """

    @abstractmethod
    def get_access_token(
        self,
        request_token: Credentials,
        verifier: str | None,
    ) -> tuple[Credentials, dict[str, str]]:
        """Exchange an authorized request token for an access token.

        Args:
            request_token: Authorized request token
            verifier: oauth_verifier from the callback

        Returns:
            Tuple of (access credentials, extra response parameters)

        Raises:
            InternalOAuthError: If the exchange fails
        """

    @abstractmethod
    def perform_secure_request(
        self,
        token: str,
        token_secret: str,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: str | bytes | None = None,
        content_type: str | None = None,
    ) -> SecureResponse:
        """Perform an OAuth-signed HTTP request.

        Args:
            token: Access token
            token_secret: Access token secret
            method: HTTP method
            url: Absolute URL
            headers: Additional headers
            body: Request body
            content_type: Content-Type of the body

        Returns:
            SecureResponse with the body text and the raw response

        Raises:
            InternalOAuthError: On transport, signing or HTTP errors
        """


class ProfileResolver(ABC):
    """Resolves access credentials into a normalized user profile."""

    @abstractmethod
    def resolve_profile(
        self,
        credentials: Credentials,
        extra_params: Mapping[str, Any] | None = None,
    ) -> UserProfile:
        """Fetch and normalize the profile of the credentials' owner.

        Args:
            credentials: Access token pair
            extra_params: Extra parameters from the access token response

        Returns:
            UserProfile

        Raises:
            AtlassianOAuthError: If the profile cannot be fetched or parsed
        """


class AuthStrategy(ABC):
    """Abstract interface for strategies registrable with the host."""

    name: str = ""

    @abstractmethod
    def authenticate(
        self,
        params: Mapping[str, str],
        session: MutableMapping[str, Any],
    ) -> AuthResult:
        """Run one step of the authentication flow.

        Args:
            params: Query parameters of the incoming request
            session: Per-user session storage owned by the host

        Returns:
            AuthResult telling the host what to do next
        """

    @abstractmethod
    def fetch_profile(
        self,
        token: str,
        token_secret: str,
        extra_params: Mapping[str, Any] | None,
        done: ProfileCallback,
    ) -> None:
        """Load the user profile and deliver it through ``done``.

        Args:
            token: Access token
            token_secret: Access token secret
            extra_params: Extra access token parameters
            done: Called exactly once with (error, profile)
        """
