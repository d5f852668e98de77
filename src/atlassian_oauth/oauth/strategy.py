"""Generic OAuth 1.0a authentication flow.

OAuthStrategy drives the three-legged handshake for any provider. It is
assembled from an OAuthEngine (tokens and signing) and a ProfileResolver
(provider-specific profile lookup), and reports every outcome as an
AuthResult instead of raising into the host.

Flow:
    1. No oauth_token in the request: obtain a request token, keep it in the
       session and redirect the user to the authorization URL.
    2. Callback with oauth_token/oauth_verifier: exchange for an access
       token, load the profile and hand it to the verify callback.
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import urlparse

from atlassian_oauth.core.exceptions import AtlassianOAuthError, InternalOAuthError
from atlassian_oauth.core.interfaces import (
    AuthStrategy,
    OAuthEngine,
    ProfileCallback,
    ProfileResolver,
    VerifyCallback,
)
from atlassian_oauth.core.models import AuthAction, AuthResult, Credentials, UserProfile

logger = logging.getLogger(__name__)


class OAuthStrategy(AuthStrategy):
    """Three-legged OAuth 1.0a flow composed from an engine and a resolver.

    Attributes:
        name: Strategy name reported to the host
        engine: OAuth engine performing the handshake and signing
        profile_resolver: Provider-specific profile lookup
        session_key: Session key holding the pending request token
    """

    def __init__(
        self,
        name: str,
        engine: OAuthEngine,
        profile_resolver: ProfileResolver,
        verify: VerifyCallback | None = None,
        session_key: str | None = None,
        authorization_url: str | None = None,
    ) -> None:
        """Initialize the strategy.

        Args:
            name: Strategy name
            engine: OAuth engine
            profile_resolver: Profile resolver
            verify: Callback receiving (token, token_secret, profile, done)
            session_key: Session key for the request token
            authorization_url: User authorization URL, used to derive the
                default session key
        """
        self.name = name
        self.engine = engine
        self.profile_resolver = profile_resolver
        self._verify = verify
        if session_key is None:
            host = urlparse(authorization_url).hostname if authorization_url else None
            session_key = f"oauth:{host or name}"
        self.session_key = session_key

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
        if params.get("oauth_token"):
            return self._complete(params, session)

        if params.get("denied"):
            logger.info("User denied authorization for %s", self.name)
            return AuthResult(action=AuthAction.FAIL, info={"message": "User denied authorization"})

        return self._begin(session)

    def fetch_profile(
        self,
        token: str,
        token_secret: str,
        extra_params: Mapping[str, Any] | None,
        done: ProfileCallback,
    ) -> None:
        """Load the user profile and deliver it through ``done``.

        ``done`` is called exactly once, with either (None, profile) or
        (error, None).
        """
        try:
            profile = self.profile_resolver.resolve_profile(
                Credentials(token, token_secret), extra_params
            )
        except AtlassianOAuthError as e:
            logger.warning("Profile lookup failed for %s: %s", self.name, e)
            done(e, None)
            return
        except Exception as e:
            logger.exception("Unexpected error during profile lookup for %s", self.name)
            done(InternalOAuthError("failed to load user profile", cause=e, strategy=self.name), None)
            return

        done(None, profile)

    def _begin(self, session: MutableMapping[str, Any]) -> AuthResult:
        """Obtain a request token and redirect the user to authorize it."""
        try:
            request_token = self.engine.get_request_token()
            url = self.engine.get_authorization_url(request_token)
        except AtlassianOAuthError as e:
            logger.warning("Could not start %s handshake: %s", self.name, e)
            return AuthResult(action=AuthAction.ERROR, error=e)
        except Exception as e:
            logger.exception("Unexpected error starting %s handshake", self.name)
            return AuthResult(
                action=AuthAction.ERROR,
                error=InternalOAuthError("failed to obtain request token", cause=e, strategy=self.name),
            )

        session[self.session_key] = {
            "oauth_token": request_token.token,
            "oauth_token_secret": request_token.token_secret,
        }
        logger.debug("Redirecting to %s for authorization", url)
        return AuthResult(action=AuthAction.REDIRECT, url=url)

    def _complete(self, params: Mapping[str, str], session: MutableMapping[str, Any]) -> AuthResult:
        """Handle the callback leg: access token, profile and verify."""
        pending = session.get(self.session_key)
        if not pending:
            return AuthResult(
                action=AuthAction.FAIL,
                info={"message": "Unable to verify authorization request state."},
            )
        if pending.get("oauth_token") != params.get("oauth_token"):
            return AuthResult(
                action=AuthAction.FAIL,
                info={"message": "Request token mismatch."},
            )

        request_token = Credentials(pending["oauth_token"], pending["oauth_token_secret"])
        try:
            access_token, extra_params = self.engine.get_access_token(
                request_token, params.get("oauth_verifier")
            )
        except AtlassianOAuthError as e:
            logger.warning("Access token exchange failed for %s: %s", self.name, e)
            return AuthResult(action=AuthAction.ERROR, error=e)
        except Exception as e:
            logger.exception("Unexpected error during %s access token exchange", self.name)
            return AuthResult(
                action=AuthAction.ERROR,
                error=InternalOAuthError("failed to obtain access token", cause=e, strategy=self.name),
            )
        finally:
            session.pop(self.session_key, None)

        loaded: list[tuple[Exception | None, UserProfile | None]] = []
        self.fetch_profile(
            access_token.token,
            access_token.token_secret,
            extra_params,
            lambda err, profile: loaded.append((err, profile)),
        )
        error, profile = loaded[0]
        if error is not None:
            return AuthResult(action=AuthAction.ERROR, error=error)

        return self._run_verify(access_token, profile)

    def _run_verify(self, access_token: Credentials, profile: UserProfile | None) -> AuthResult:
        """Pass the profile to the verify callback and translate its answer."""
        if self._verify is None:
            return AuthResult(action=AuthAction.SUCCESS, user=profile)

        outcome: list[AuthResult] = []

        def done(error: Exception | None, user: Any = None, info: Any = None) -> None:
            if outcome:
                logger.warning("verify callback for %s called done more than once", self.name)
                return
            if error is not None:
                outcome.append(AuthResult(action=AuthAction.ERROR, error=error))
            elif not user:
                outcome.append(AuthResult(action=AuthAction.FAIL, info=info))
            else:
                outcome.append(AuthResult(action=AuthAction.SUCCESS, user=user, info=info))

        try:
            self._verify(access_token.token, access_token.token_secret, profile, done)
        except Exception as e:
            logger.exception("verify callback for %s raised", self.name)
            if not outcome:
                return AuthResult(action=AuthAction.ERROR, error=e)

        if not outcome:
            return AuthResult(
                action=AuthAction.ERROR,
                error=AtlassianOAuthError("verify callback did not call done", strategy=self.name),
            )
        if outcome[0].success:
            logger.info("Authenticated %s via %s", profile.username if profile else "user", self.name)
        return outcome[0]
