"""Navigation and page metadata tool implementations."""

from ..browser.engine import engine_call
from ..context import ServerContext


async def navigate(ctx: ServerContext, url: str) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.get, url)
    return f"Navigated to {url}"


async def go_back(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.back)
    return "Navigated back"


async def go_forward(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.forward)
    return "Navigated forward"


async def refresh_page(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.refresh)
    return "Page refreshed"


async def get_page_title(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    return await engine_call(lambda: driver.title)


async def get_current_url(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    return await engine_call(lambda: driver.current_url)


async def get_page_source(ctx: ServerContext) -> str:
    driver = ctx.registry.current_driver()
    return await engine_call(lambda: driver.page_source)


__all__ = [
    'navigate',
    'go_back',
    'go_forward',
    'refresh_page',
    'get_page_title',
    'get_current_url',
    'get_page_source',
]
