"""Tests for the CLI module."""

from __future__ import annotations

import argparse
import json
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from atlassian_oauth.cli import (
    OOB_CALLBACK,
    build_parser,
    cmd_config_setup,
    cmd_config_show,
    cmd_login,
    cmd_whoami,
    main,
)
from atlassian_oauth.core.exceptions import ConfigurationError, ProfileFetchError
from atlassian_oauth.core.models import AuthAction, AuthResult, StrategyConfig, UserProfile

APP = "https://jira.example.com"


@pytest.fixture
def config(private_key_pem: str) -> StrategyConfig:
    """Resolved configuration without a callback URL."""
    return StrategyConfig(
        application_url=APP,
        consumer_key="my-app",
        consumer_secret=private_key_pem,
    )


def login_args(**overrides: Any) -> argparse.Namespace:
    values = {
        "application_url": None,
        "callback_url": None,
        "private_key_file": None,
        "json": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


# =============================================================================
# Auth Command Tests
# =============================================================================


class TestLoginCommand:
    """Tests for the login command."""

    def test_login_success(
        self,
        config: StrategyConfig,
        sample_profile: UserProfile,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test a full out-of-band login."""
        mock_strategy = MagicMock()
        mock_strategy.session_key = "oauth:jira.example.com"

        def authenticate(params: dict[str, str], session: dict[str, Any]) -> AuthResult:
            if not params:
                session["oauth:jira.example.com"] = {
                    "oauth_token": "req-token",
                    "oauth_token_secret": "req-secret",
                }
                return AuthResult(action=AuthAction.REDIRECT, url=f"{APP}/authorize?oauth_token=req-token")
            assert params == {"oauth_token": "req-token", "oauth_verifier": "abc123"}
            return AuthResult(action=AuthAction.SUCCESS, user=sample_profile)

        mock_strategy.authenticate.side_effect = authenticate

        with patch("atlassian_oauth.atlassian.load_config", return_value=config), patch(
            "atlassian_oauth.atlassian.AtlassianOAuthStrategy", return_value=mock_strategy
        ) as mock_cls, patch("builtins.input", return_value=" abc123 "):
            result = cmd_login(login_args())

        assert result == 0
        mock_cls.assert_called_once_with(config, callback_url=OOB_CALLBACK)
        out = capsys.readouterr().out
        assert f"{APP}/authorize?oauth_token=req-token" in out
        assert "Logged in as jdoe" in out
        assert '"display_name": "Jane Doe"' in out

    def test_login_start_failure(self, config: StrategyConfig) -> None:
        """Test a failed request token step returns 1."""
        mock_strategy = MagicMock()
        mock_strategy.authenticate.return_value = AuthResult(
            action=AuthAction.ERROR, error=ProfileFetchError("boom")
        )

        with patch("atlassian_oauth.atlassian.load_config", return_value=config), patch(
            "atlassian_oauth.atlassian.AtlassianOAuthStrategy", return_value=mock_strategy
        ):
            result = cmd_login(login_args())

        assert result == 1

    def test_login_denied(self, config: StrategyConfig) -> None:
        """Test a failed callback step returns 1."""
        mock_strategy = MagicMock()
        mock_strategy.session_key = "k"

        def authenticate(params: dict[str, str], session: dict[str, Any]) -> AuthResult:
            if not params:
                session["k"] = {"oauth_token": "t", "oauth_token_secret": "s"}
                return AuthResult(action=AuthAction.REDIRECT, url="https://x")
            return AuthResult(action=AuthAction.FAIL, info={"message": "denied"})

        mock_strategy.authenticate.side_effect = authenticate

        with patch("atlassian_oauth.atlassian.load_config", return_value=config), patch(
            "atlassian_oauth.atlassian.AtlassianOAuthStrategy", return_value=mock_strategy
        ), patch("builtins.input", return_value="v"):
            result = cmd_login(login_args())

        assert result == 1


class TestWhoamiCommand:
    """Tests for the whoami command."""

    def test_whoami_success(
        self,
        config: StrategyConfig,
        sample_profile: UserProfile,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test printing the profile for an access token."""
        mock_strategy = MagicMock()
        mock_strategy.fetch_profile.side_effect = lambda t, s, p, done: done(None, sample_profile)
        args = argparse.Namespace(
            token="access-token",
            token_secret="access-secret",
            application_url=None,
            private_key_file=None,
            json=True,
        )

        with patch("atlassian_oauth.atlassian.load_config", return_value=config), patch(
            "atlassian_oauth.atlassian.AtlassianOAuthStrategy", return_value=mock_strategy
        ):
            result = cmd_whoami(args)

        assert result == 0
        mock_strategy.fetch_profile.assert_called_once()
        assert mock_strategy.fetch_profile.call_args.args[:2] == ("access-token", "access-secret")
        printed = json.loads(capsys.readouterr().out)
        assert printed["username"] == "jdoe"
        assert printed["raw_json"]["emailAddress"] == "jane@example.com"

    def test_whoami_failure(self, config: StrategyConfig, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a failed lookup returns 1."""
        mock_strategy = MagicMock()
        mock_strategy.fetch_profile.side_effect = lambda t, s, p, done: done(
            ProfileFetchError("failed to fetch username"), None
        )
        args = argparse.Namespace(
            token="t", token_secret="s", application_url=None, private_key_file=None, json=False
        )

        with patch("atlassian_oauth.atlassian.load_config", return_value=config), patch(
            "atlassian_oauth.atlassian.AtlassianOAuthStrategy", return_value=mock_strategy
        ):
            result = cmd_whoami(args)

        assert result == 1
        assert "failed to fetch username" in capsys.readouterr().err


# =============================================================================
# Config Command Tests
# =============================================================================


class TestConfigCommands:
    """Tests for config commands."""

    def test_config_show_not_configured(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test showing configuration when nothing is set."""
        with patch(
            "atlassian_oauth.atlassian.config.load_config",
            return_value=StrategyConfig(),
        ):
            result = cmd_config_show(argparse.Namespace())

        assert result == 0
        assert "Not configured" in capsys.readouterr().out

    def test_config_show_hides_key(
        self, config: StrategyConfig, private_key_pem: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the private key is never printed."""
        with patch("atlassian_oauth.atlassian.config.load_config", return_value=config):
            result = cmd_config_show(argparse.Namespace())

        out = capsys.readouterr().out
        assert result == 0
        assert APP in out
        assert "(set)" in out
        assert private_key_pem not in out

    def test_config_show_invalid(self) -> None:
        """Test an unreadable key file returns 1."""
        with patch(
            "atlassian_oauth.atlassian.config.load_config",
            side_effect=ConfigurationError("Private key file not found: x"),
        ):
            assert cmd_config_show(argparse.Namespace()) == 1

    def test_config_setup(self) -> None:
        """Test interactive setup saves to keyring."""
        answers = iter([APP, "my-app", "/keys/app.pem", ""])

        with patch("builtins.input", side_effect=lambda prompt: next(answers)), patch(
            "atlassian_oauth.atlassian.config.read_private_key", return_value="pem"
        ) as mock_read, patch("atlassian_oauth.atlassian.config.save_config") as mock_save:
            result = cmd_config_setup(argparse.Namespace())

        assert result == 0
        mock_read.assert_called_once_with("/keys/app.pem")
        mock_save.assert_called_once_with(APP, "my-app", "pem", callback_url=OOB_CALLBACK)

    def test_config_setup_requires_url(self) -> None:
        """Test setup stops when the URL is blank."""
        with patch("builtins.input", return_value=""), patch(
            "atlassian_oauth.atlassian.config.save_config"
        ) as mock_save:
            result = cmd_config_setup(argparse.Namespace())

        assert result == 1
        mock_save.assert_not_called()

    def test_config_setup_bad_key(self) -> None:
        """Test setup stops on an invalid key file."""
        answers = iter([APP, "my-app", "/keys/bad.pem"])

        with patch("builtins.input", side_effect=lambda prompt: next(answers)), patch(
            "atlassian_oauth.atlassian.config.read_private_key",
            side_effect=ConfigurationError("Invalid private key"),
        ), patch("atlassian_oauth.atlassian.config.save_config") as mock_save:
            result = cmd_config_setup(argparse.Namespace())

        assert result == 1
        mock_save.assert_not_called()


# =============================================================================
# Main Entry Point Tests
# =============================================================================


class TestMain:
    """Tests for main entry point."""

    def test_main_no_args(self) -> None:
        """Test main with no arguments exits with usage error."""
        with pytest.raises(SystemExit) as exc_info:
            with patch("sys.argv", ["atlassian-oauth"]):
                main()

        assert exc_info.value.code == 2

    def test_main_help(self) -> None:
        """Test main --help."""
        with pytest.raises(SystemExit) as exc_info:
            with patch("sys.argv", ["atlassian-oauth", "--help"]):
                main()

        assert exc_info.value.code == 0

    def test_whoami_requires_token(self) -> None:
        """Test whoami arguments are required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["whoami"])

    def test_parse_login(self) -> None:
        """Test login options are parsed."""
        args = build_parser().parse_args(
            ["login", "--application-url", APP, "--private-key-file", "k.pem", "--json"]
        )
        assert args.command == "login"
        assert args.application_url == APP
        assert args.private_key_file == "k.pem"
        assert args.json is True

    def test_main_dispatches_config(self) -> None:
        """Test main dispatches config show."""
        with patch("sys.argv", ["atlassian-oauth", "config", "show"]), patch(
            "atlassian_oauth.cli.cmd_config_show", return_value=0
        ) as mock_cmd:
            assert main() == 0
        mock_cmd.assert_called_once()

    def test_main_configuration_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test configuration errors are reported with exit code 1."""
        with patch("sys.argv", ["atlassian-oauth", "whoami", "--token", "t", "--token-secret", "s"]), patch(
            "atlassian_oauth.cli.cmd_whoami",
            side_effect=ConfigurationError("requires an application_url option"),
        ):
            assert main() == 1

        assert "Configuration error" in capsys.readouterr().err
