"""
atlassian-oauth: OAuth 1.0a login against Atlassian applications.

This package authenticates users of a web application by delegating to an
Atlassian application (JIRA, Confluence, Bitbucket Server) over three-legged
OAuth 1.0a with RSA-SHA1 signing, and normalizes the user's profile.

Example Usage:
    from atlassian_oauth import AuthAction, get_strategy

    def verify(token, token_secret, profile, done):
        done(None, profile)

    strategy = get_strategy("atlassian-oauth", {
        "application_url": "https://jira.example.com",
        "callback_url": "https://app.example.com/auth/callback",
        "consumer_key": "my-app",
        "consumer_secret": private_key_pem,
    }, verify)

    # In the login handler
    result = strategy.authenticate(request.args, session)
    if result.action == AuthAction.REDIRECT:
        return redirect(result.url)
"""

from atlassian_oauth.core.exceptions import (
    AtlassianOAuthError,
    ConfigurationError,
    InternalOAuthError,
    ProfileFetchError,
    ProfileParseError,
)
from atlassian_oauth.core.interfaces import (
    AuthStrategy,
    OAuthEngine,
    ProfileResolver,
)
from atlassian_oauth.core.models import (
    AuthAction,
    AuthResult,
    Credentials,
    Email,
    StrategyConfig,
    UserProfile,
)
from atlassian_oauth.core.registry import (
    get_strategy,
    list_strategies,
    register_strategy,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "AuthAction",
    "AuthResult",
    "Credentials",
    "Email",
    "StrategyConfig",
    "UserProfile",
    # Interfaces
    "AuthStrategy",
    "OAuthEngine",
    "ProfileResolver",
    # Registry
    "get_strategy",
    "list_strategies",
    "register_strategy",
    # Exceptions
    "AtlassianOAuthError",
    "ConfigurationError",
    "InternalOAuthError",
    "ProfileFetchError",
    "ProfileParseError",
]
