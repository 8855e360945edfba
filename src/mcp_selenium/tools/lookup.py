"""Element lookup shared by the tool implementations."""

from typing import Optional, Tuple

from selenium.webdriver.remote.webelement import WebElement

from ..actions.elements import resolve_locator, wait_located
from ..browser.engine import engine_call
from ..constants import DEFAULT_TIMEOUT_MS
from ..context import ServerContext


def wait_timeout(ctx: ServerContext, timeout: Optional[int]) -> int:
    if timeout is not None:
        return timeout
    return ctx.config.get("default_timeout_ms", DEFAULT_TIMEOUT_MS)


async def locate_element(
    ctx: ServerContext,
    by: str,
    value: str,
    timeout: Optional[int] = None,
) -> Tuple[object, WebElement]:
    """
    Wait for an element of the current session and return (driver, element).

    The locator is validated before any engine call is made.
    """
    driver = ctx.registry.current_driver()
    locator = resolve_locator(by, value)
    element = await engine_call(wait_located, driver, locator, wait_timeout(ctx, timeout))
    return driver, element


__all__ = [
    'wait_timeout',
    'locate_element',
]
