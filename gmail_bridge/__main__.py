"""Entry point for the Gmail bridge server."""

from __future__ import annotations

import logging
import os
import sys

import uvicorn
from dotenv import load_dotenv

from gmail_bridge.auth.credentials import (
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_REFRESH_TOKEN,
)


def configure_logging() -> None:
    """Configure logging to stderr (STDIO-safe).

    Sends all logs to stderr so they don't interfere with MCP's
    STDIO transport which uses stdout for JSON-RPC messages.

    Respects LOG_LEVEL env var (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = logging.getLevelNamesMapping().get(log_level_str, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # Reduce noise from Google libraries
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)


def validate_environment(transport: str) -> bool:
    """Validate required environment variables for the chosen transport.

    Over HTTP each request brings its own credentials, so nothing is
    required. Over STDIO the GMAIL_* variables are the only credentials.

    Returns:
        True if the server can start, False otherwise.
    """
    logger = logging.getLogger(__name__)

    if transport != "stdio":
        return True

    required = [ENV_CLIENT_ID, ENV_CLIENT_SECRET, ENV_REFRESH_TOKEN]
    missing = [var for var in required if not os.getenv(var)]

    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        logger.error('Run "gmail-bridge-setup <credentials.json>" to obtain them.')
        return False

    return True


def main() -> None:
    """Main entry point.

    Loads environment, validates configuration, and starts the MCP server
    with the appropriate transport (stdio, sse or streamable-http).
    """
    # Load .env file if present
    load_dotenv()

    # Configure logging first
    configure_logging()
    logger = logging.getLogger(__name__)

    # Select transport based on environment
    transport = os.getenv("TRANSPORT", "stdio").lower()

    if not validate_environment(transport):
        logger.error("Environment validation failed. Exiting.")
        sys.exit(1)

    # Import server after environment is validated
    from gmail_bridge.server import mcp

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))

    match transport:
        case "sse" | "http":
            logger.info("Starting Gmail bridge with SSE transport on %s:%d", host, port)
            uvicorn.run(mcp.sse_app(), host=host, port=port, log_level="info")
        case "streamable-http":
            logger.info(
                "Starting Gmail bridge with streamable-http transport on %s:%d%s",
                host,
                port,
                mcp.settings.streamable_http_path,
            )
            uvicorn.run(mcp.streamable_http_app(), host=host, port=port, log_level="info")
        case _:
            # STDIO transport for local clients (default)
            logger.info("Starting Gmail bridge with STDIO transport")
            mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
