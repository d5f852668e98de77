"""Atlassian OAuth 1.0a strategy.

Authenticates users by delegating to an Atlassian application (JIRA,
Confluence, Bitbucket Server) over three-legged OAuth 1.0a with RSA-SHA1
signing. The consumer key and public key must be registered as an incoming
application link on the Atlassian side.

Example:
    from atlassian_oauth.atlassian import AtlassianOAuthStrategy

    def verify(token, token_secret, profile, done):
        user = users.find_or_create(profile.username)
        done(None, user)

    strategy = AtlassianOAuthStrategy(
        {
            "application_url": "https://jira.example.com",
            "callback_url": "https://app.example.com/auth/atlassian/callback",
            "consumer_key": "sample-python-app",
            "consumer_secret": private_key_pem,
        },
        verify,
    )

    # Or via registry
    from atlassian_oauth import get_strategy
    strategy = get_strategy("atlassian-oauth", config, verify)
"""

import json
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from oauthlib.oauth1 import SIGNATURE_RSA

from atlassian_oauth.core.exceptions import (
    ConfigurationError,
    InternalOAuthError,
    ProfileFetchError,
    ProfileParseError,
)
from atlassian_oauth.core.interfaces import (
    AuthStrategy,
    OAuthEngine,
    ProfileCallback,
    ProfileResolver,
    VerifyCallback,
)
from atlassian_oauth.core.models import AuthResult, Credentials, Email, StrategyConfig, UserProfile
from atlassian_oauth.core.registry import register_strategy
from atlassian_oauth.oauth.engine import OAuth1Engine
from atlassian_oauth.oauth.strategy import OAuthStrategy

logger = logging.getLogger(__name__)

STRATEGY_NAME = "atlassian-oauth"

# OAuth endpoints of the Atlassian OAuth provider plugin
REQUEST_TOKEN_PATH = "/plugins/servlet/oauth/request-token"
ACCESS_TOKEN_PATH = "/plugins/servlet/oauth/access-token"
AUTHORIZE_PATH = "/plugins/servlet/oauth/authorize"

# Identity and profile resources
WHOAMI_PATH = "/plugins/servlet/applinks/whoami"
USER_PROFILE_PATH = "/rest/api/1.0/users/"


def configure(
    options: StrategyConfig | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> StrategyConfig:
    """Validate strategy options and fill in the Atlassian endpoints.

    Endpoint URLs are derived by appending the fixed plugin paths to
    ``application_url`` unless given explicitly.

    Args:
        options: Strategy options
        **overrides: Options taking precedence over ``options``

    Returns:
        Fully populated StrategyConfig

    Raises:
        ConfigurationError: If application_url or callback_url is missing
    """
    if isinstance(options, StrategyConfig):
        values = options.model_dump()
    else:
        values = dict(options or {})
    values.update({k: v for k, v in overrides.items() if v is not None})

    application_url = values.get("application_url")
    if not application_url:
        raise ConfigurationError(
            "Atlassian OAuth strategy requires an application_url option",
            field="application_url",
            strategy=STRATEGY_NAME,
        )
    if not values.get("callback_url"):
        raise ConfigurationError(
            "Atlassian OAuth strategy requires a callback_url option",
            field="callback_url",
            strategy=STRATEGY_NAME,
        )

    values["request_token_url"] = values.get("request_token_url") or application_url + REQUEST_TOKEN_PATH
    values["access_token_url"] = values.get("access_token_url") or application_url + ACCESS_TOKEN_PATH
    values["user_authorization_url"] = (
        values.get("user_authorization_url") or application_url + AUTHORIZE_PATH
    )
    values["signature_method"] = values.get("signature_method") or SIGNATURE_RSA

    return StrategyConfig(**values)


class AtlassianProfileResolver(ProfileResolver):
    """Looks up the authenticated user on an Atlassian application.

    Resolution takes two signed requests: ``whoami`` returns the username as
    plain text, then the REST user resource returns the profile as JSON.
    """

    def __init__(self, application_url: str, engine: OAuthEngine) -> None:
        self.application_url = application_url
        self.engine = engine

    def resolve_profile(
        self,
        credentials: Credentials,
        extra_params: Mapping[str, Any] | None = None,
    ) -> UserProfile:
        """Fetch and normalize the profile of the credentials' owner.

        Args:
            credentials: Access token pair
            extra_params: Ignored

        Returns:
            UserProfile

        Raises:
            ProfileFetchError: If either request fails
            ProfileParseError: If the profile body is not a usable JSON object
        """
        username = self._fetch_username(credentials)
        body = self._fetch_profile_body(credentials, username)
        profile = self._parse_profile(body, credentials)
        logger.info("Resolved Atlassian profile for %s", profile.username)
        return profile

    def _fetch_username(self, credentials: Credentials) -> str:
        url = self.application_url + WHOAMI_PATH
        try:
            result = self.engine.perform_secure_request(
                credentials.token, credentials.token_secret, "GET", url
            )
        except InternalOAuthError as e:
            raise ProfileFetchError(
                "failed to fetch username",
                cause=e,
                status_code=e.status_code,
                strategy=STRATEGY_NAME,
                details={"url": url},
            ) from e
        return result.body

    def _fetch_profile_body(self, credentials: Credentials, username: str) -> str:
        # Username goes into the path as-is
        url = self.application_url + USER_PROFILE_PATH + username
        try:
            result = self.engine.perform_secure_request(
                credentials.token,
                credentials.token_secret,
                "GET",
                url,
                headers={"Accept": "application/json"},
            )
        except InternalOAuthError as e:
            raise ProfileFetchError(
                "failed to fetch user profile",
                cause=e,
                status_code=e.status_code,
                strategy=STRATEGY_NAME,
                details={"url": url, "username": username},
            ) from e
        return result.body

    def _parse_profile(self, body: str, credentials: Credentials) -> UserProfile:
        try:
            data = json.loads(body)
        except ValueError as e:
            raise ProfileParseError(
                f"failed to parse user profile: {e}",
                body=body,
                strategy=STRATEGY_NAME,
            ) from e

        if not isinstance(data, dict):
            raise ProfileParseError(
                "user profile is not a JSON object",
                body=body,
                strategy=STRATEGY_NAME,
            )
        if not isinstance(data.get("name"), str):
            raise ProfileParseError(
                "user profile has no name",
                body=body,
                strategy=STRATEGY_NAME,
            )

        return UserProfile(
            provider=STRATEGY_NAME,
            id=data["name"],
            username=data["name"],
            display_name=data.get("displayName"),
            # The user's slug; kept under this name for compatibility
            avatar_urls=data.get("slug"),
            emails=[Email(value=data.get("emailAddress"))],
            token=credentials.token,
            token_secret=credentials.token_secret,
            raw_body=body,
            raw_json=data,
        )


@register_strategy(STRATEGY_NAME)
class AtlassianOAuthStrategy(AuthStrategy):
    """OAuth 1.0a strategy for Atlassian applications.

    Attributes:
        name: Registry name ('atlassian-oauth')
        config: Populated, immutable strategy configuration
        application_url: Base URL of the Atlassian application
        engine: OAuth engine performing handshake and signing
        profile_resolver: Atlassian profile lookup
    """

    name = STRATEGY_NAME

    def __init__(
        self,
        config: StrategyConfig | Mapping[str, Any] | None = None,
        verify: VerifyCallback | None = None,
        engine: OAuthEngine | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the strategy.

        Args:
            config: Strategy options (StrategyConfig or dict, for registry compatibility)
            verify: Callback receiving (token, token_secret, profile, done)
            engine: OAuth engine; built from the config when omitted
            **kwargs: Options overriding ``config``

        Raises:
            ConfigurationError: If a required option is missing
        """
        self.config = configure(config, **kwargs)
        self.application_url: str = self.config.application_url  # type: ignore[assignment]
        self.engine = engine or OAuth1Engine(self.config, strategy=self.name)
        self.profile_resolver = AtlassianProfileResolver(self.application_url, self.engine)
        self._flow = OAuthStrategy(
            self.name,
            self.engine,
            self.profile_resolver,
            verify,
            session_key=self.config.session_key,
            authorization_url=self.config.user_authorization_url,
        )

        logger.debug("Initialized %s strategy for %s", self.name, self.application_url)

    @property
    def request_token_url(self) -> str | None:
        return self.config.request_token_url

    @property
    def access_token_url(self) -> str | None:
        return self.config.access_token_url

    @property
    def user_authorization_url(self) -> str | None:
        return self.config.user_authorization_url

    @property
    def session_key(self) -> str:
        """Session key under which the pending request token is kept."""
        return self._flow.session_key

    def authenticate(
        self,
        params: Mapping[str, str],
        session: MutableMapping[str, Any],
    ) -> AuthResult:
        """Run one step of the three-legged flow. See OAuthStrategy.authenticate."""
        return self._flow.authenticate(params, session)

    def fetch_profile(
        self,
        token: str,
        token_secret: str,
        extra_params: Mapping[str, Any] | None,
        done: ProfileCallback,
    ) -> None:
        """Load the Atlassian user profile and deliver it through ``done``.

        Args:
            token: Access token
            token_secret: Access token secret
            extra_params: Ignored
            done: Called exactly once with (error, profile)
        """
        self._flow.fetch_profile(token, token_secret, extra_params, done)
