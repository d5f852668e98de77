"""Tests for the strategy registry."""

import os
from typing import Any
from unittest.mock import patch

import pytest

from atlassian_oauth.atlassian import AtlassianOAuthStrategy
from atlassian_oauth.core.exceptions import AtlassianOAuthError, ConfigurationError
from atlassian_oauth.core.registry import (
    ENV_DEFAULT_STRATEGY,
    get_strategy,
    list_strategies,
    register_strategy,
)


class TestRegistry:
    """Tests for strategy registration and lookup."""

    def test_atlassian_strategy_registered(self) -> None:
        """Test the Atlassian strategy is registered under its name."""
        assert "atlassian-oauth" in list_strategies()

    def test_get_strategy_by_name(self, strategy_options: dict[str, Any]) -> None:
        """Test instantiating a strategy by name."""
        strategy = get_strategy("atlassian-oauth", strategy_options)
        assert isinstance(strategy, AtlassianOAuthStrategy)
        assert strategy.name == "atlassian-oauth"

    def test_get_strategy_passes_verify(self, strategy_options: dict[str, Any]) -> None:
        """Test the verify callback reaches the strategy."""

        def verify(token: str, token_secret: str, profile: Any, done: Any) -> None:
            done(None, profile)

        strategy = get_strategy("atlassian-oauth", strategy_options, verify)
        assert strategy._flow._verify is verify  # type: ignore[attr-defined]

    def test_get_strategy_default_from_env(self, strategy_options: dict[str, Any]) -> None:
        """Test the default strategy can come from the environment."""
        with patch.dict(os.environ, {ENV_DEFAULT_STRATEGY: "atlassian-oauth"}):
            strategy = get_strategy(config=strategy_options)
        assert isinstance(strategy, AtlassianOAuthStrategy)

    def test_unknown_strategy(self) -> None:
        """Test unknown names raise with the available strategies listed."""
        with pytest.raises(AtlassianOAuthError) as exc_info:
            get_strategy("github")
        assert "not found" in str(exc_info.value)
        assert "atlassian-oauth" in str(exc_info.value)

    def test_get_strategy_invalid_config(self) -> None:
        """Test configuration errors propagate from construction."""
        with pytest.raises(ConfigurationError):
            get_strategy("atlassian-oauth", {"callback_url": "https://cb"})

    def test_register_rejects_non_strategy(self) -> None:
        """Test only AuthStrategy implementations can be registered."""
        with pytest.raises(ValueError):

            @register_strategy("bogus")
            class NotAStrategy:  # noqa: F841
                pass
