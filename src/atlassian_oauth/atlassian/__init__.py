"""Atlassian OAuth 1.0a strategy for JIRA, Confluence and Bitbucket Server.

This module provides:
- AtlassianOAuthStrategy: three-legged OAuth login against an Atlassian app
- AtlassianProfileResolver: whoami + REST user profile lookup
- configure: option validation and endpoint derivation
- load_config: option resolution from env vars, keyring or .env files

Example:
    from atlassian_oauth.atlassian import AtlassianOAuthStrategy, load_config

    strategy = AtlassianOAuthStrategy(load_config(), verify)
"""

from atlassian_oauth.atlassian.config import (
    delete_config,
    load_config,
    read_private_key,
    save_config,
)
from atlassian_oauth.atlassian.strategy import (
    STRATEGY_NAME,
    AtlassianOAuthStrategy,
    AtlassianProfileResolver,
    configure,
)

__all__ = [
    "STRATEGY_NAME",
    "AtlassianOAuthStrategy",
    "AtlassianProfileResolver",
    "configure",
    "load_config",
    "save_config",
    "delete_config",
    "read_private_key",
]
