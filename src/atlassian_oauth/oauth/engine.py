"""OAuth 1.0a client built on requests-oauthlib.

This module provides the OAuthEngine used by strategies to run the
three-legged handshake and to sign API requests:
- Request token, authorization URL and access token exchange
- RSA-SHA1 signing with a PEM private key (HMAC-SHA1 and PLAINTEXT also work)
- Request/response logging

Example:
    from atlassian_oauth.core.models import StrategyConfig
    from atlassian_oauth.oauth.engine import OAuth1Engine

    engine = OAuth1Engine(config)
    request_token = engine.get_request_token()
    print(engine.get_authorization_url(request_token))
"""

import logging
from collections.abc import Mapping
from typing import Any

import requests
from oauthlib.oauth1 import SIGNATURE_RSA
from requests_oauthlib import OAuth1, OAuth1Session

from atlassian_oauth.core.exceptions import ConfigurationError, InternalOAuthError
from atlassian_oauth.core.interfaces import OAuthEngine
from atlassian_oauth.core.models import Credentials, SecureResponse, StrategyConfig

logger = logging.getLogger(__name__)

# Keys of a token response that are not extra parameters
TOKEN_KEYS = ("oauth_token", "oauth_token_secret")


class OAuth1Engine(OAuthEngine):
    """OAuth 1.0a engine backed by requests-oauthlib.

    Every call builds its own signer and issues a standalone request, so no
    cookies or connection state are shared between users.

    Attributes:
        consumer_key: OAuth consumer key
        signature_method: OAuth signature method (e.g., 'RSA-SHA1')
        timeout: Request timeout in seconds
    """

    def __init__(self, config: StrategyConfig, strategy: str | None = None) -> None:
        """Initialize the engine.

        Args:
            config: Strategy configuration with all endpoint URLs populated
            strategy: Strategy name used in error messages

        Raises:
            ConfigurationError: If the consumer key or secret is missing
        """
        if not config.consumer_key:
            raise ConfigurationError(
                "OAuth strategy requires a consumer_key option",
                field="consumer_key",
                strategy=strategy,
            )
        if config.consumer_secret is None:
            raise ConfigurationError(
                "OAuth strategy requires a consumer_secret option",
                field="consumer_secret",
                strategy=strategy,
            )

        self.consumer_key = config.consumer_key
        self._consumer_secret = config.consumer_secret
        self.signature_method = config.signature_method or SIGNATURE_RSA
        self.callback_url = config.callback_url
        self.request_token_url = config.request_token_url
        self.access_token_url = config.access_token_url
        self.user_authorization_url = config.user_authorization_url
        self.timeout = config.timeout
        self.strategy = strategy

        logger.debug(
            "Initialized OAuth engine for consumer %s (%s)",
            self.consumer_key,
            self.signature_method,
        )

    def _signing_kwargs(self) -> dict[str, Any]:
        """Return the secret arguments for the configured signature method."""
        if self.signature_method == SIGNATURE_RSA:
            return {"signature_method": SIGNATURE_RSA, "rsa_key": self._consumer_secret}
        return {"signature_method": self.signature_method, "client_secret": self._consumer_secret}

    def get_request_token(self) -> Credentials:
        """Obtain a temporary request token.

        Returns:
            Request token and secret

        Raises:
            InternalOAuthError: If the request fails or is refused
        """
        oauth = OAuth1Session(
            self.consumer_key,
            callback_uri=self.callback_url,
            **self._signing_kwargs(),
        )
        logger.debug("POST %s (request token)", self.request_token_url)
        try:
            token = oauth.fetch_request_token(self.request_token_url, timeout=self.timeout)
        except Exception as e:  # transport, signing or token response errors
            raise InternalOAuthError(
                "failed to obtain request token",
                cause=e,
                status_code=_status_code(e),
                strategy=self.strategy,
                details={"url": self.request_token_url},
            ) from e
        return Credentials(token["oauth_token"], token["oauth_token_secret"])

    def get_authorization_url(self, request_token: Credentials) -> str:
        """Build the user authorization URL for a request token.

        Args:
            request_token: Token returned by get_request_token

        Returns:
            Authorization URL
        """
        oauth = OAuth1Session(self.consumer_key, **self._signing_kwargs())
        return str(oauth.authorization_url(self.user_authorization_url, request_token=request_token.token))

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
        oauth = OAuth1Session(
            self.consumer_key,
            resource_owner_key=request_token.token,
            resource_owner_secret=request_token.token_secret,
            verifier=verifier,
            **self._signing_kwargs(),
        )
        logger.debug("POST %s (access token)", self.access_token_url)
        try:
            token = oauth.fetch_access_token(self.access_token_url, timeout=self.timeout)
        except Exception as e:  # transport, signing or token response errors
            raise InternalOAuthError(
                "failed to obtain access token",
                cause=e,
                status_code=_status_code(e),
                strategy=self.strategy,
                details={"url": self.access_token_url},
            ) from e

        params = {k: v for k, v in token.items() if k not in TOKEN_KEYS}
        return Credentials(token["oauth_token"], token["oauth_token_secret"]), params

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
        auth = OAuth1(
            self.consumer_key,
            resource_owner_key=token,
            resource_owner_secret=token_secret,
            **self._signing_kwargs(),
        )
        request_headers = dict(headers or {})
        if content_type:
            request_headers["Content-Type"] = content_type

        try:
            logger.debug("%s %s", method, url)
            response = requests.request(
                method=method,
                url=url,
                headers=request_headers,
                data=body or None,
                auth=auth,
                timeout=self.timeout,
            )
        except Exception as e:  # transport or signing errors
            raise InternalOAuthError(
                f"{method} request failed",
                cause=e,
                strategy=self.strategy,
                details={"url": url},
            ) from e

        logger.debug(
            "%s %s -> %d (%d bytes)",
            method,
            url,
            response.status_code,
            len(response.content),
        )

        if not 200 <= response.status_code < 300:
            raise InternalOAuthError(
                f"Request failed: {response.status_code}",
                status_code=response.status_code,
                strategy=self.strategy,
                details={"url": url, "response": response.text},
            )

        return SecureResponse(response.text, response)


def _status_code(error: Exception) -> int | None:
    """Extract the HTTP status code carried by a requests-oauthlib error."""
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None)
