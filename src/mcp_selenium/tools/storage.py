"""Cookie and Web Storage tool implementations."""

import json
from typing import Optional

from ..browser.engine import engine_call
from ..context import ServerContext


#region Cookies
async def get_cookies(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    cookies = await engine_call(driver.get_cookies)
    return json.dumps(cookies)


async def add_cookie(
    ctx: ServerContext,
    name: str,
    value: str,
    path: Optional[str] = None,
    domain: Optional[str] = None,
    secure: Optional[bool] = None,
    http_only: Optional[bool] = None,
    expiry: Optional[int] = None,
) -> str:
    """Add a cookie to the current page's domain. Only given fields are sent."""
    driver = ctx.registry.current_driver()
    cookie = {"name": name, "value": value}
    optional = {
        "path": path,
        "domain": domain,
        "secure": secure,
        "httpOnly": http_only,
        "expiry": expiry,
    }
    cookie.update({k: v for k, v in optional.items() if v is not None})
    await engine_call(driver.add_cookie, cookie)
    return f"Cookie {name} added"


async def delete_cookie(ctx: ServerContext, name: str) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.delete_cookie, name)
    return f"Cookie {name} deleted"
#endregion


#region Web Storage
# area is "localStorage" or "sessionStorage"

async def get_storage_item(ctx: ServerContext, area: str, key: str) -> str:
    driver = ctx.registry.current_driver()
    value = await engine_call(driver.execute_script, f"return window.{area}.getItem(arguments[0]);", key)
    return "" if value is None else value


async def set_storage_item(ctx: ServerContext, area: str, key: str, value: str) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.execute_script, f"window.{area}.setItem(arguments[0], arguments[1]);", key, value)
    return f"Set {area} item {key}"


async def remove_storage_item(ctx: ServerContext, area: str, key: str) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.execute_script, f"window.{area}.removeItem(arguments[0]);", key)
    return f"Removed {area} item {key}"
#endregion


__all__ = [
    'get_cookies',
    'add_cookie',
    'delete_cookie',
    'get_storage_item',
    'set_storage_item',
    'remove_storage_item',
]
