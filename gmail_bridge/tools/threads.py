"""Thread tools for the Gmail bridge."""

from __future__ import annotations

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.parsing import parse_message
from gmail_bridge.gmail.threads import get_thread as gmail_get_thread
from gmail_bridge.middleware.validator import validate_identifier
from gmail_bridge.schemas.tools import GetThreadParams
from gmail_bridge.tools.base import execute_tool, to_json


async def get_thread(params: GetThreadParams, credentials: OAuthCredentials) -> str:
    """Get all messages in a thread, in thread order, with decoded bodies."""

    def operation() -> str:
        thread_id = validate_identifier(params.thread_id, "thread_id")
        thread = gmail_get_thread(build_service(credentials), thread_id, format="full")
        return to_json([parse_message(m) for m in thread.get("messages") or []])

    return await execute_tool("get_thread", params.model_dump(), operation)
