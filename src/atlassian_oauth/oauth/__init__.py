"""Provider-neutral OAuth 1.0a engine and authentication flow."""

from atlassian_oauth.oauth.engine import OAuth1Engine
from atlassian_oauth.oauth.strategy import OAuthStrategy

__all__ = [
    "OAuth1Engine",
    "OAuthStrategy",
]
