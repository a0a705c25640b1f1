"""CLI for gdoc-merge.

Usage:
    gdoc-merge                       # Copy the template and apply the batch edits
    gdoc-merge run                   # Same as above
    gdoc-merge inspect <doc_id>      # Print table offsets and paragraph text
    gdoc-merge login                 # Interactive OAuth login
    gdoc-merge status                # Show OAuth token status
    gdoc-merge logout                # Revoke and delete the cached token

Global options:
    --credentials PATH   OAuth client credentials (default: ./credentials.json)
    --token PATH         Cached token (default: ./token.json)
    -v, --verbose        Debug logging
"""

from __future__ import annotations

import argparse
import logging
import sys

from gdoc_merge.config import MergeSettings, get_credential_status, load_settings
from gdoc_merge.docs import DocsClient, EditOrderError, describe_document
from gdoc_merge.drive import DriveClient
from gdoc_merge.google import GoogleAPIError, GoogleAuthError, GoogleOAuth
from gdoc_merge.google.oauth import CodeProvider
from gdoc_merge.merge import run_merge

logger = logging.getLogger("gdoc_merge")


def _make_auth(settings: MergeSettings, code_provider: CodeProvider | None = None) -> GoogleOAuth:
    return GoogleOAuth.from_credentials_file(
        settings.credentials_path,
        scopes=["drive"],
        token_path=settings.token_path,
        code_provider=code_provider,
    )


def cmd_run(settings: MergeSettings, code_provider: CodeProvider | None = None) -> int:
    """Copy the source document and apply the batch edits."""
    auth = _make_auth(settings, code_provider)
    auth.ensure_token()

    result = run_merge(settings, DriveClient(auth), DocsClient(auth))
    print(result.to_json())
    return 0


def cmd_inspect(
    settings: MergeSettings,
    document_id: str,
    include_json: bool = False,
    code_provider: CodeProvider | None = None,
) -> int:
    """Print the structure of a document."""
    auth = _make_auth(settings, code_provider)
    auth.ensure_token()

    doc = DocsClient(auth).get_document(document_id)
    for line in describe_document(doc.raw, include_json=include_json):
        print(line)
    return 0


def cmd_login(settings: MergeSettings, code_provider: CodeProvider | None = None) -> int:
    """Run the authorization flow and cache a fresh token."""
    print("=" * 60)
    print("GDOC-MERGE GOOGLE LOGIN")
    print("=" * 60)

    auth = _make_auth(settings, code_provider)
    token = auth.interactive_authorize()
    auth.persist_token(token)

    print("\nToken saved successfully!")
    return cmd_status(settings)


def cmd_status(settings: MergeSettings) -> int:
    """Show credential files and OAuth token status."""
    status = get_credential_status(settings)
    print(f"credentials.json : {'[x]' if status['credentials'] else '[ ]'} {settings.credentials_path}")
    print(f"token.json       : {'[x]' if status['token'] else '[ ]'} {settings.token_path}")

    if not status["credentials"]:
        return 1

    info = _make_auth(settings).get_token_info()
    if info["status"] == "no_token":
        print("No token found - run 'gdoc-merge login'")
        return 1
    if info["status"] == "unreadable":
        print(f"Cached token is unreadable ({info['error']}) - run 'gdoc-merge login'")
        return 1

    print(f"Status     : {info['status']}")
    print(f"Scopes     : {', '.join(info.get('scopes', []))}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    print(f"Refreshable: {'yes' if info.get('has_refresh_token') else 'no'}")

    if info["missing_scopes"]:
        print(f"Missing    : {', '.join(info['missing_scopes'])}")
        print("Token lacks required scopes - run 'gdoc-merge login'")
        return 1
    return 0


def cmd_logout(settings: MergeSettings) -> int:
    """Revoke the cached token."""
    _make_auth(settings).revoke_token()
    print("Token revoked and local cache cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdoc-merge",
        description="Copy a Google Doc template and fill it in with one batch update",
    )
    parser.add_argument("--credentials", help="Path to OAuth client credentials")
    parser.add_argument("--token", help="Path to the cached OAuth token")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("run", help="Copy the template and apply the batch edits")

    inspect_parser = subparsers.add_parser("inspect", help="Print a document's structure")
    inspect_parser.add_argument("document_id", help="Google Docs document ID")
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Include each paragraph element's JSON",
    )

    subparsers.add_parser("login", help="Interactive OAuth login")
    subparsers.add_parser("status", help="Show token status")
    subparsers.add_parser("logout", help="Revoke and delete the cached token")

    return parser


def main(argv: list[str] | None = None, code_provider: CodeProvider | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(credentials_path=args.credentials, token_path=args.token)

        if args.command in (None, "run"):
            return cmd_run(settings, code_provider)
        if args.command == "inspect":
            return cmd_inspect(settings, args.document_id, args.json, code_provider)
        if args.command == "login":
            return cmd_login(settings, code_provider)
        if args.command == "status":
            return cmd_status(settings)
        if args.command == "logout":
            return cmd_logout(settings)
    except GoogleAuthError as e:
        logger.error(f"Authentication failed: {e}")
        return 1
    except GoogleAPIError as e:
        logger.error(f"Google API request failed: {e}")
        return 1
    except EditOrderError as e:
        logger.error(f"Invalid edit batch: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
