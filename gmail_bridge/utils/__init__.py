"""Utility functions and helpers for the Gmail bridge.

This module provides the shared exception hierarchy.
"""

from gmail_bridge.utils.errors import (
    AuthenticationError,
    GmailAPIError,
    GmailBridgeError,
    ValidationError,
    api_error,
)

__all__ = [
    "GmailBridgeError",
    "AuthenticationError",
    "GmailAPIError",
    "ValidationError",
    "api_error",
]
