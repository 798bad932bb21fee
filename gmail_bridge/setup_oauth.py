"""One-time OAuth setup for the Gmail bridge.

Obtains the refresh token the bridge needs and prints an MCP client
configuration that passes it in the Authorization header.

Prerequisites:
1. Create a Google Cloud project at https://console.cloud.google.com
2. Enable the Gmail API
3. Create OAuth 2.0 credentials (Desktop application)
4. Download the credentials JSON file

Usage:
    gmail-bridge-setup path/to/credentials.json
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from dotenv import load_dotenv

from gmail_bridge.auth.credentials import AUTH_SCHEME, OAuthCredentials
from gmail_bridge.auth.oauth import DEFAULT_OAUTH_PORT, SetupFlow, load_client_file
from gmail_bridge.utils.errors import GmailBridgeError

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:3000/api/mcp"
OUTPUT_FILENAME = ".gmail-credentials.json"

USAGE_STEPS = """\
Steps:
  1. Go to https://console.cloud.google.com/apis/credentials
  2. Create OAuth 2.0 Client ID (Desktop application)
  3. Download the JSON file
  4. Run this command with the path to that file
"""


def authorization_header(credentials: OAuthCredentials) -> str:
    """Build the ``GMAIL ...`` Authorization header value."""
    query = urlencode(
        {
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret.get_secret_value(),
            "refresh_token": credentials.refresh_token.get_secret_value(),
        }
    )
    return f"{AUTH_SCHEME}{query}"


def client_config(credentials: OAuthCredentials, server_url: str) -> dict[str, Any]:
    """Build the ``mcpServers`` block for an MCP client."""
    return {
        "mcpServers": {
            "gmail": {
                "url": server_url,
                "headers": {"Authorization": authorization_header(credentials)},
            }
        }
    }


def save_credentials(credentials: OAuthCredentials, directory: Path) -> Path:
    """Write the credentials to .gmail-credentials.json in ``directory``."""
    output_path = directory / OUTPUT_FILENAME
    output_path.write_text(
        json.dumps(
            {
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret.get_secret_value(),
                "refresh_token": credentials.refresh_token.get_secret_value(),
            },
            indent=2,
        ),
        encoding="utf-8",
    )
    return output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gmail-bridge-setup",
        description="Obtain a Gmail refresh token for the Gmail bridge.",
        epilog=USAGE_STEPS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "credentials_file",
        help="OAuth client JSON downloaded from the Google Cloud Console",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("OAUTH_PORT", str(DEFAULT_OAUTH_PORT))),
        help="Local callback port (default: OAUTH_PORT or 3000)",
    )
    parser.add_argument(
        "--server-url",
        default=os.getenv("GMAIL_BRIDGE_URL", DEFAULT_SERVER_URL),
        help="Bridge URL for the printed client config (default: GMAIL_BRIDGE_URL)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the consent URL without opening a browser",
    )
    return parser


def _print_auth_url(url: str) -> None:
    print("If the browser does not open, visit this URL:\n")
    print(url)
    print("")


def main(argv: list[str] | None = None) -> int:
    """Run the setup command.

    Returns:
        Process exit code: 0 on success, 1 on any failure.
    """
    load_dotenv()
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    args = build_parser().parse_args(argv)

    print("\n=== Gmail Bridge OAuth Setup ===\n")

    try:
        client_id, client_secret = load_client_file(args.credentials_file)
        flow = SetupFlow(client_id, client_secret, port=args.port)
        credentials = flow.run_local_server(
            on_auth_url=_print_auth_url,
            open_browser=not args.no_browser,
        )
        output_path = save_credentials(credentials, Path.cwd())
    except (GmailBridgeError, OSError) as e:
        print(f"\nError: {e}\n", file=sys.stderr)
        return 1

    print("\n=== Setup Complete ===\n")
    print("Add this to your MCP client configuration:\n")
    print(json.dumps(client_config(credentials, args.server_url), indent=2))
    print("")
    print(f"Credentials also saved to: {output_path}")
    print(f"(Add {OUTPUT_FILENAME} to .gitignore!)\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
