"""Strategy registry for dynamic strategy discovery and instantiation."""

from typing import Any, Type, TypeVar

from atlassian_oauth.core.exceptions import AtlassianOAuthError
from atlassian_oauth.core.interfaces import AuthStrategy, VerifyCallback

T = TypeVar("T", bound=AuthStrategy)

# Environment variable naming the default strategy
ENV_DEFAULT_STRATEGY = "ATLASSIAN_OAUTH_STRATEGY"

_strategy_registry: dict[str, Type[AuthStrategy]] = {}


def register_strategy(name: str) -> Any:
    """Decorator to register a strategy implementation.

    Args:
        name: Strategy name (e.g., 'atlassian-oauth')

    Returns:
        Decorator function

    Example:
        @register_strategy('atlassian-oauth')
        class AtlassianOAuthStrategy(AuthStrategy):
            ...
    """

    def decorator(cls: Type[T]) -> Type[T]:
        if not issubclass(cls, AuthStrategy):
            raise ValueError(f"{cls.__name__} does not implement AuthStrategy")
        _strategy_registry[name] = cls
        return cls

    return decorator


def get_strategy(
    name: str | None = None,
    config: Any = None,
    verify: VerifyCallback | None = None,
) -> AuthStrategy:
    """Get a configured strategy instance.

    Args:
        name: Strategy name. If None, uses default.
        config: Strategy configuration (StrategyConfig or dict)
        verify: Verify callback invoked with the resolved profile

    Returns:
        AuthStrategy implementation instance

    Raises:
        AtlassianOAuthError: If strategy not found
        ConfigurationError: If configuration is invalid
    """
    # Import strategies to trigger registration
    _import_strategies()

    if name is None:
        name = _get_default_strategy()

    if name not in _strategy_registry:
        available = list(_strategy_registry.keys())
        raise AtlassianOAuthError(
            f"Strategy '{name}' not found. Available: {available}",
            strategy=name,
        )

    strategy_class = _strategy_registry[name]
    return strategy_class(config or {}, verify)  # type: ignore[call-arg]


def list_strategies() -> list[str]:
    """List all registered strategy names."""
    _import_strategies()
    return list(_strategy_registry.keys())


def _import_strategies() -> None:
    """Import strategy modules to trigger registration."""
    import atlassian_oauth.atlassian  # noqa: F401


def _get_default_strategy() -> str:
    """Get the default strategy name.

    Returns:
        Strategy name from the environment, or the first registered one

    Raises:
        AtlassianOAuthError: If no strategy is configured or registered
    """
    import os

    env_value = os.environ.get(ENV_DEFAULT_STRATEGY)
    if env_value:
        return env_value

    if _strategy_registry:
        return next(iter(_strategy_registry.keys()))

    raise AtlassianOAuthError(
        f"No default strategy configured. "
        f"Set {ENV_DEFAULT_STRATEGY} environment variable or specify a strategy explicitly."
    )
