"""Browser log, performance and script tool implementations."""

import json
from typing import Any, List, Optional

from ..browser.engine import engine_call
from ..context import ServerContext


def _network_events(entries: List[dict]) -> List[dict]:
    """
    Extract DevTools Network.* events from "performance" log entries.

    Each entry's "message" is a JSON string wrapping the DevTools event
    under a "message" key. Entries that do not parse are skipped.
    """
    events = []
    for entry in entries:
        try:
            event = json.loads(entry.get("message", ""))["message"]
        except (ValueError, KeyError, TypeError):
            continue
        method = event.get("method") if isinstance(event, dict) else None
        if isinstance(method, str) and method.startswith("Network."):
            events.append(event)
    return events


async def get_console_logs(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    logs = await engine_call(driver.get_log, "browser")
    return json.dumps(logs, indent=2)


async def get_network_logs(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    entries = await engine_call(driver.get_log, "performance")
    return json.dumps(_network_events(entries), indent=2)


async def get_performance_metrics(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    timing = await engine_call(driver.execute_script, "return window.performance.timing")
    return json.dumps(timing, indent=2, default=str)


async def execute_javascript(ctx: ServerContext, script: str, args: Optional[List[Any]] = None) -> str:
    """Run `script` in the page; `arguments[i]` inside the script is args[i]."""
    driver = ctx.registry.current_driver()
    result = await engine_call(driver.execute_script, script, *(args or []))
    if result is None:
        return "Script executed successfully (no return value)"
    return json.dumps(result, indent=2, default=str)


__all__ = [
    'get_console_logs',
    'get_network_logs',
    'get_performance_metrics',
    'execute_javascript',
]
