"""Session lifecycle tool implementations."""

import json
from typing import Optional

from ..config.options import BrowserOptions
from ..context import ServerContext
from ..errors import McpSeleniumError

import logging
logger = logging.getLogger(__name__)


async def start_browser(ctx: ServerContext, browser: str, options: Optional[dict] = None) -> str:
    """
    Launch a browser and make it the current session.

    Args:
        browser: "chrome", "firefox" or "edge".
        options: Optional {"headless": bool, "arguments": [str, ...]}.
    """
    browser_options = BrowserOptions.from_dict(options)
    session = await ctx.registry.create(browser, browser_options)
    return f"Browser started with session_id: {session.id}"


async def close_session(ctx: ServerContext, session_id: Optional[str] = None) -> str:
    """
    Quit a session's browser and unregister it (the current session by default).

    A recording on that session is stopped first so its encoder is not
    left running.
    """
    target = session_id if session_id is not None else ctx.registry.current_id
    if target is not None and ctx.recordings.is_recording(target):
        try:
            await ctx.recordings.stop(target)
        except McpSeleniumError as e:
            logger.warning(f"Recording for session {target} did not finish cleanly: {e}")

    session = await ctx.registry.close(session_id)
    return f"Browser session {session.id} closed"


async def list_sessions(ctx: ServerContext) -> str:
    return json.dumps(ctx.registry.list_ids())


async def switch_session(ctx: ServerContext, session_id: str) -> str:
    await ctx.registry.switch(session_id)
    return f"Switched to session {session_id}"


async def rename_session(ctx: ServerContext, old_id: str, new_id: str) -> str:
    await ctx.registry.rename(old_id, new_id)
    await ctx.recordings.rename(old_id, new_id)
    return f"Renamed session {old_id} to {new_id}"


def browser_status(ctx: ServerContext) -> str:
    """Text of the browser-status://current resource."""
    current = ctx.registry.current_id
    if current is None:
        return "No active browser session"
    return f"Active browser session: {current}"


__all__ = [
    'start_browser',
    'close_session',
    'list_sessions',
    'switch_session',
    'rename_session',
    'browser_status',
]
