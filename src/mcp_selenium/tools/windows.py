"""Window, frame and alert tool implementations."""

import json
from typing import Optional

from ..browser.engine import engine_call
from ..context import ServerContext
from .lookup import locate_element


#region Windows and frames
async def list_windows(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    handles = await engine_call(lambda: driver.window_handles)
    return json.dumps(handles)


async def switch_to_window(ctx: ServerContext, handle: str) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.switch_to.window, handle)
    return f"Switched to window {handle}"


async def switch_to_frame(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(driver.switch_to.frame, element)
    return "Switched to frame"


async def switch_to_parent_frame(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.switch_to.parent_frame)
    return "Switched to parent frame"


async def set_window_size(ctx: ServerContext, width: int, height: int) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.set_window_size, width, height)
    return f"Window size set to {width}x{height}"


async def maximize_window(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.maximize_window)
    return "Window maximized"


async def minimize_window(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.minimize_window)
    return "Window minimized"
#endregion


#region Alerts
async def get_alert_text(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    return await engine_call(lambda: driver.switch_to.alert.text)


async def accept_alert(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(lambda: driver.switch_to.alert.accept())
    return "Alert accepted"


async def dismiss_alert(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(lambda: driver.switch_to.alert.dismiss())
    return "Alert dismissed"


async def send_alert_text(ctx: ServerContext, text: str) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(lambda: driver.switch_to.alert.send_keys(text))
    return f"Sent text to alert: {text}"
#endregion


__all__ = [
    'list_windows',
    'switch_to_window',
    'switch_to_frame',
    'switch_to_parent_frame',
    'set_window_size',
    'maximize_window',
    'minimize_window',
    'get_alert_text',
    'accept_alert',
    'dismiss_alert',
    'send_alert_text',
]
