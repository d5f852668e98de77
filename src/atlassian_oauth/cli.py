"""Command-line interface for atlassian-oauth.

This module provides a CLI for setting up and trying out OAuth 1.0a access
to an Atlassian application.

Usage:
    # Configuration
    atlassian-oauth config show
    atlassian-oauth config setup

    # Three-legged login (out-of-band verifier)
    atlassian-oauth login

    # Profile for existing access credentials
    atlassian-oauth whoami --token TOKEN --token-secret SECRET
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from atlassian_oauth.core.models import AuthAction, UserProfile

# Callback used when the user copies the verifier by hand
OOB_CALLBACK = "oob"


def print_profile(profile: UserProfile, raw: bool = False) -> None:
    """Print a profile as JSON."""
    data = profile.model_dump(exclude={"raw_body", "raw_json"})
    if raw:
        data["raw_json"] = profile.raw_json
    print(json.dumps(data, indent=2, default=str))


# =============================================================================
# Auth Commands
# =============================================================================


def cmd_login(args: argparse.Namespace) -> int:
    """Run the three-legged flow and print the resulting profile."""
    from atlassian_oauth.atlassian import AtlassianOAuthStrategy, load_config

    config = load_config(
        application_url=args.application_url,
        callback_url=args.callback_url,
        private_key_file=args.private_key_file,
    )
    strategy = AtlassianOAuthStrategy(
        config,
        callback_url=config.callback_url or OOB_CALLBACK,
    )

    session: dict[str, Any] = {}
    result = strategy.authenticate({}, session)
    if result.action != AuthAction.REDIRECT:
        print(f"Failed to start login: {result.error}", file=sys.stderr)
        return 1

    print("Open this URL in a browser and authorize access:\n")
    print(f"  {result.url}\n")
    verifier = input("Verification code: ").strip()

    pending = session[strategy.session_key]
    result = strategy.authenticate(
        {"oauth_token": pending["oauth_token"], "oauth_verifier": verifier},
        session,
    )
    if not result.success:
        message = result.error or (result.info or {}).get("message", "access denied")
        print(f"Login failed: {message}", file=sys.stderr)
        return 1

    profile: UserProfile = result.user
    print(f"\nLogged in as {profile.username}\n")
    print_profile(profile, raw=args.json)
    return 0


def cmd_whoami(args: argparse.Namespace) -> int:
    """Fetch the profile for existing access credentials."""
    from atlassian_oauth.atlassian import AtlassianOAuthStrategy, load_config

    config = load_config(
        application_url=args.application_url,
        private_key_file=args.private_key_file,
    )
    strategy = AtlassianOAuthStrategy(
        config,
        callback_url=config.callback_url or OOB_CALLBACK,
    )

    outcome: list[tuple[Exception | None, UserProfile | None]] = []
    strategy.fetch_profile(
        args.token,
        args.token_secret,
        None,
        lambda err, profile: outcome.append((err, profile)),
    )
    error, profile = outcome[0]
    if error is not None or profile is None:
        print(f"Failed: {error}", file=sys.stderr)
        return 1

    print_profile(profile, raw=args.json)
    return 0


# =============================================================================
# Config Commands
# =============================================================================


def cmd_config_show(args: argparse.Namespace) -> int:
    """Show current configuration."""
    from atlassian_oauth.atlassian.config import load_config
    from atlassian_oauth.core.exceptions import ConfigurationError

    print("Atlassian OAuth Configuration")
    print("=" * 40)

    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"\nInvalid configuration: {e}")
        return 1

    if not config.application_url:
        print("\nAtlassian: Not configured")
        print("  Set environment variables or use: atlassian-oauth config setup")
        return 0

    print(f"\nApplication URL: {config.application_url}")
    print(f"Callback URL:    {config.callback_url or '(not set)'}")
    print(f"Consumer key:    {config.consumer_key or '(not set)'}")
    print(f"Private key:     {'(set)' if config.consumer_secret else '(not set)'}")
    return 0


def cmd_config_setup(args: argparse.Namespace) -> int:
    """Interactive configuration setup."""
    from atlassian_oauth.atlassian.config import read_private_key, save_config
    from atlassian_oauth.core.exceptions import ConfigurationError

    print("Atlassian OAuth - Configuration")
    print("=" * 40)
    print("\nCreate an incoming application link in your Atlassian application")
    print("with a consumer key and the public half of your RSA key pair.\n")

    application_url = input("Application URL (e.g., https://jira.example.com): ").strip()
    if not application_url:
        print("Application URL is required", file=sys.stderr)
        return 1

    consumer_key = input("Consumer key: ").strip()
    if not consumer_key:
        print("Consumer key is required", file=sys.stderr)
        return 1

    key_file = input("Path to PEM private key: ").strip()
    if not key_file:
        print("Private key is required", file=sys.stderr)
        return 1
    try:
        private_key = read_private_key(key_file)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return 1

    callback_url = input(f"Callback URL [{OOB_CALLBACK}]: ").strip() or OOB_CALLBACK

    save_config(application_url, consumer_key, private_key, callback_url=callback_url)
    print("\nConfiguration saved to system keyring.")

    return 0


# =============================================================================
# Main Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="atlassian-oauth",
        description="OAuth 1.0a login against Atlassian applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  atlassian-oauth config setup
  atlassian-oauth login --application-url https://jira.example.com
  atlassian-oauth whoami --token abc --token-secret def --json
        """,
    )
    parser.add_argument("--version", action="version", version="atlassian-oauth 0.1.0")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # login
    login = subparsers.add_parser("login", help="Run the three-legged OAuth flow")
    login.add_argument("--application-url", help="Atlassian application URL")
    login.add_argument("--callback-url", help="Callback URL (default: oob)")
    login.add_argument("--private-key-file", help="PEM private key file")
    login.add_argument("--json", action="store_true", help="Include raw JSON")

    # whoami
    whoami = subparsers.add_parser("whoami", help="Show the profile for an access token")
    whoami.add_argument("--token", required=True, help="OAuth access token")
    whoami.add_argument("--token-secret", required=True, help="OAuth access token secret")
    whoami.add_argument("--application-url", help="Atlassian application URL")
    whoami.add_argument("--private-key-file", help="PEM private key file")
    whoami.add_argument("--json", action="store_true", help="Include raw JSON")

    # config
    config_parser = subparsers.add_parser("config", help="Configuration commands")
    config_sub = config_parser.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show", help="Show current configuration")
    config_sub.add_parser("setup", help="Interactive configuration setup")

    return parser


def main() -> int:
    """Main CLI entry point."""
    from atlassian_oauth.core.exceptions import AtlassianOAuthError, ConfigurationError

    args = build_parser().parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        if args.command == "login":
            return cmd_login(args)

        if args.command == "whoami":
            return cmd_whoami(args)

        if args.command == "config":
            commands = {
                "show": cmd_config_show,
                "setup": cmd_config_setup,
            }
            return commands[args.config_command](args)

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except AtlassianOAuthError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
