"""Shared pytest fixtures for atlassian-oauth tests."""

import json
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from atlassian_oauth.core.models import Credentials, Email, UserProfile

APPLICATION_URL = "https://example.atlassian.net"
CALLBACK_URL = "https://app.example.com/auth/atlassian/callback"

PROFILE_JSON = {
    "name": "jdoe",
    "displayName": "Jane Doe",
    "slug": "jdoe",
    "emailAddress": "jane@example.com",
}


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    """Generate a throwaway RSA private key in PEM format."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture
def strategy_options(private_key_pem: str) -> dict[str, Any]:
    """Minimal valid strategy options."""
    return {
        "application_url": APPLICATION_URL,
        "callback_url": CALLBACK_URL,
        "consumer_key": "sample-python-app",
        "consumer_secret": private_key_pem,
    }


@pytest.fixture
def access_token() -> Credentials:
    """Access token pair as issued after the handshake."""
    return Credentials("access-token", "access-secret")


@pytest.fixture
def sample_profile() -> UserProfile:
    """Create a sample UserProfile for testing."""
    return UserProfile(
        id="jdoe",
        username="jdoe",
        display_name="Jane Doe",
        avatar_urls="jdoe",
        emails=[Email(value="jane@example.com")],
        token="access-token",
        token_secret="access-secret",
        raw_body=json.dumps(PROFILE_JSON),
        raw_json=PROFILE_JSON,
    )
