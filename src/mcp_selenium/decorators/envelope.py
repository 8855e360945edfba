# mcp_selenium/decorators/envelope.py

import json
import asyncio
import functools
from typing import Any, Callable

from ..errors import McpSeleniumError

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "tool_envelope",
]


def _normalize(value: Any):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        # Several text blocks, e.g. a caption followed by image data.
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return json.dumps(value, ensure_ascii=False, default=str)


def tool_envelope(prefix: str) -> Callable:
    """
    Decorator for async MCP tool functions:
      - On success: strings (and lists of strings) pass through, anything else is JSON-encoded.
      - On error: returns "<prefix>: <message>" instead of raising.

    Known failures (McpSeleniumError) are rendered as is. Anything else is
    logged with its traceback first. Cancellation always propagates.

        @tool_envelope("Error navigating")
        async def navigate(url: str) -> str: ...
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except McpSeleniumError as e:
                logger.info(f"{func.__name__} failed: {e.kind}: {e}")
                return f"{prefix}: {e}"
            except Exception as e:
                logger.exception(f"Unexpected error in {func.__name__}")
                return f"{prefix}: {e}"
            return _normalize(result)
        return wrapper

    return decorator
