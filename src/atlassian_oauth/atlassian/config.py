"""Cross-platform configuration for the Atlassian OAuth strategy.

Options are resolved in the following order:
1. Explicit parameters
2. Environment variables (ATLASSIAN_APPLICATION_URL, ATLASSIAN_CALLBACK_URL,
   ATLASSIAN_CONSUMER_KEY, ATLASSIAN_CONSUMER_SECRET, ATLASSIAN_PRIVATE_KEY_FILE)
3. System keyring (via keyring library)
4. .env file in current directory or parent directories

Example:
    from atlassian_oauth.atlassian.config import load_config
    from atlassian_oauth.atlassian import AtlassianOAuthStrategy

    strategy = AtlassianOAuthStrategy(load_config(), verify)
"""

import logging
import os
from pathlib import Path

import keyring
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from atlassian_oauth.core.exceptions import ConfigurationError
from atlassian_oauth.core.models import StrategyConfig

logger = logging.getLogger(__name__)

# Default keyring service name
DEFAULT_SERVICE = "atlassian-oauth"

# Environment variable names
ENV_APPLICATION_URL = "ATLASSIAN_APPLICATION_URL"
ENV_CALLBACK_URL = "ATLASSIAN_CALLBACK_URL"
ENV_CONSUMER_KEY = "ATLASSIAN_CONSUMER_KEY"
ENV_CONSUMER_SECRET = "ATLASSIAN_CONSUMER_SECRET"  # noqa: S105
ENV_PRIVATE_KEY_FILE = "ATLASSIAN_PRIVATE_KEY_FILE"

# Keyring account names
KEYRING_APPLICATION_URL = "application_url"
KEYRING_CALLBACK_URL = "callback_url"
KEYRING_CONSUMER_KEY = "consumer_key"
KEYRING_CONSUMER_SECRET = "consumer_secret"  # noqa: S105

# Option name -> (environment variable, keyring account)
_SOURCES = {
    "application_url": (ENV_APPLICATION_URL, KEYRING_APPLICATION_URL),
    "callback_url": (ENV_CALLBACK_URL, KEYRING_CALLBACK_URL),
    "consumer_key": (ENV_CONSUMER_KEY, KEYRING_CONSUMER_KEY),
    "consumer_secret": (ENV_CONSUMER_SECRET, KEYRING_CONSUMER_SECRET),
}

# Variables honoured in a .env file
_DOTENV_NAMES = frozenset([env_var for env_var, _ in _SOURCES.values()] + [ENV_PRIVATE_KEY_FILE])


def load_config(
    application_url: str | None = None,
    callback_url: str | None = None,
    consumer_key: str | None = None,
    consumer_secret: str | None = None,
    private_key_file: str | Path | None = None,
    service: str = DEFAULT_SERVICE,
) -> StrategyConfig:
    """Load strategy options from various sources.

    Resolution order:
    1. Explicit parameters
    2. Environment variables
    3. System keyring
    4. .env file

    Missing options are left unset; the strategy reports them when it is
    constructed.

    Args:
        application_url: Explicit application URL
        callback_url: Explicit callback URL
        consumer_key: Explicit consumer key
        consumer_secret: Explicit PEM private key
        private_key_file: Path to a PEM private key, used when no
            consumer_secret is found
        service: Keyring service name

    Returns:
        StrategyConfig with the resolved options

    Raises:
        ConfigurationError: If a private key file is given but unreadable
    """
    # 1. Explicit parameters
    resolved: dict[str, str | None] = {
        "application_url": application_url,
        "callback_url": callback_url,
        "consumer_key": consumer_key,
        "consumer_secret": consumer_secret,
    }

    # 2. Environment variables
    for option, (env_var, _) in _SOURCES.items():
        if not resolved[option]:
            resolved[option] = os.environ.get(env_var)
    if not private_key_file:
        private_key_file = os.environ.get(ENV_PRIVATE_KEY_FILE)

    # 3. Keyring
    for option in _SOURCES:
        if not resolved[option]:
            resolved[option] = _from_keyring(service, option)

    # 4. .env file
    if not all(resolved.values()):
        env_vars = _load_dotenv()
        for option, (env_var, _) in _SOURCES.items():
            if not resolved[option]:
                resolved[option] = env_vars.get(env_var)
        if not private_key_file:
            private_key_file = env_vars.get(ENV_PRIVATE_KEY_FILE)

    if not resolved["consumer_secret"] and private_key_file:
        resolved["consumer_secret"] = read_private_key(private_key_file)

    return StrategyConfig(**resolved)


def read_private_key(path: str | Path) -> str:
    """Read and validate a PEM-encoded RSA private key.

    Args:
        path: Path to the PEM file

    Returns:
        The key as PEM text

    Raises:
        ConfigurationError: If the file is missing or not an RSA private key
    """
    key_path = Path(path).expanduser()
    if not key_path.exists():
        raise ConfigurationError(
            f"Private key file not found: {key_path}",
            field="consumer_secret",
        )

    data = key_path.read_bytes()
    try:
        key = load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigurationError(
            f"Invalid private key in {key_path}: {e}",
            field="consumer_secret",
        ) from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError(
            f"Invalid private key in {key_path}: RSA-SHA1 signing needs an RSA key",
            field="consumer_secret",
        )

    logger.debug("Loaded private key from %s", key_path)
    return data.decode("utf-8")


def save_config(
    application_url: str,
    consumer_key: str,
    consumer_secret: str,
    callback_url: str | None = None,
    service: str = DEFAULT_SERVICE,
) -> None:
    """Save strategy options to the system keyring.

    Args:
        application_url: Atlassian application URL
        consumer_key: OAuth consumer key
        consumer_secret: PEM private key
        callback_url: Callback URL
        service: Keyring service name
    """
    keyring.set_password(service, KEYRING_APPLICATION_URL, application_url)
    keyring.set_password(service, KEYRING_CONSUMER_KEY, consumer_key)
    keyring.set_password(service, KEYRING_CONSUMER_SECRET, consumer_secret)
    if callback_url:
        keyring.set_password(service, KEYRING_CALLBACK_URL, callback_url)
    logger.info("Configuration saved to keyring (service: %s)", service)


def delete_config(service: str = DEFAULT_SERVICE) -> None:
    """Remove the stored application URL, callback URL, consumer key and private key.

    Args:
        service: Keyring service name
    """
    removed = 0
    for _, account in _SOURCES.values():
        try:
            keyring.delete_password(service, account)
        except keyring.errors.PasswordDeleteError:
            continue
        removed += 1
    logger.info("Removed %d option(s) from keyring (service: %s)", removed, service)


def _from_keyring(service: str, option: str) -> str | None:
    """Look up one strategy option in the keyring.

    A missing or unusable keyring backend counts as "not stored" so that
    resolution can fall through to the .env file.
    """
    _, account = _SOURCES[option]
    try:
        return keyring.get_password(service, account)
    except keyring.errors.KeyringError as e:
        logger.debug("Keyring lookup of %s failed: %s", option, e)
        return None


def _load_dotenv() -> dict[str, str]:
    """Read the ATLASSIAN_* settings from the nearest .env file.

    Only the first .env found walking up from the working directory is
    used. Other variables in the file are ignored.

    Returns:
        Mapping of environment variable name to value
    """
    cwd = Path.cwd()
    env_file = next((d / ".env" for d in [cwd, *cwd.parents] if (d / ".env").is_file()), None)
    if env_file is None:
        return {}

    logger.debug("Reading options from %s", env_file)
    try:
        lines = env_file.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.debug("Cannot read %s: %s", env_file, e)
        return {}

    settings: dict[str, str] = {}
    for line in lines:
        name, sep, value = line.strip().partition("=")
        name = name.strip()
        if not sep or name.startswith("#") or name not in _DOTENV_NAMES:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        settings[name] = value
    return settings
