"""Core interfaces and models for atlassian-oauth."""

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
    SecureResponse,
    StrategyConfig,
    UserProfile,
)
from atlassian_oauth.core.registry import (
    get_strategy,
    list_strategies,
    register_strategy,
)

__all__ = [
    "AuthAction",
    "AuthResult",
    "Credentials",
    "Email",
    "SecureResponse",
    "StrategyConfig",
    "UserProfile",
    "AuthStrategy",
    "OAuthEngine",
    "ProfileResolver",
    "get_strategy",
    "list_strategies",
    "register_strategy",
    "AtlassianOAuthError",
    "ConfigurationError",
    "InternalOAuthError",
    "ProfileFetchError",
    "ProfileParseError",
]
