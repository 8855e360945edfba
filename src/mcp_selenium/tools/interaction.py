"""Element, wait, pointer and keyboard tool implementations."""

import json
from typing import Optional

from selenium.webdriver.common.action_chains import ActionChains

from ..actions.elements import (
    resolve_locator,
    wait_located,
    wait_visible,
    wait_not_visible,
    wait_text,
    wait_attribute,
)
from ..actions.keyboard import resolve_key
from ..browser.engine import engine_call
from ..context import ServerContext
from .lookup import locate_element, wait_timeout


#region Elements
async def find_element(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    await locate_element(ctx, by, value, timeout)
    return "Element found"


async def click_element(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    _, element = await locate_element(ctx, by, value, timeout)
    await engine_call(element.click)
    return "Element clicked"


async def send_keys(ctx: ServerContext, by: str, value: str, text: str, timeout: Optional[int] = None) -> str:
    """Clear the element, then type `text` into it."""
    _, element = await locate_element(ctx, by, value, timeout)

    def _type():
        element.clear()
        element.send_keys(text)

    await engine_call(_type)
    return f'Text "{text}" entered into element'


async def get_element_text(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    _, element = await locate_element(ctx, by, value, timeout)
    return await engine_call(lambda: element.text)


async def get_element_attribute(
    ctx: ServerContext, by: str, value: str, attribute: str, timeout: Optional[int] = None
) -> str:
    """Attribute value, or an empty string when the attribute is absent."""
    _, element = await locate_element(ctx, by, value, timeout)
    attr_value = await engine_call(element.get_attribute, attribute)
    return "" if attr_value is None else str(attr_value)


async def get_css_value(
    ctx: ServerContext, by: str, value: str, property: str, timeout: Optional[int] = None
) -> str:
    _, element = await locate_element(ctx, by, value, timeout)
    return await engine_call(element.value_of_css_property, property)


async def get_element_rect(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    _, element = await locate_element(ctx, by, value, timeout)
    rect = await engine_call(lambda: element.rect)
    return json.dumps(rect)


async def upload_file(
    ctx: ServerContext, by: str, value: str, file_path: str, timeout: Optional[int] = None
) -> str:
    """Hand a local file path to an <input type=file> element."""
    _, element = await locate_element(ctx, by, value, timeout)
    await engine_call(element.send_keys, file_path)
    return "File upload initiated"
#endregion


#region Waits
async def wait_for_element_visible(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(wait_visible, driver, element, wait_timeout(ctx, timeout))
    return "Element is visible"


async def wait_for_element_not_visible(
    ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None
) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(wait_not_visible, driver, element, wait_timeout(ctx, timeout))
    return "Element is not visible"


async def wait_for_text(
    ctx: ServerContext,
    by: str,
    value: str,
    text: str,
    contains: bool = False,
    timeout: Optional[int] = None,
) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(wait_text, driver, element, text, contains, wait_timeout(ctx, timeout))
    return f"Text '{text}' {'found in' if contains else 'matches'} element"


async def wait_for_attribute(
    ctx: ServerContext,
    by: str,
    value: str,
    attribute: str,
    expected: str,
    contains: bool = False,
    timeout: Optional[int] = None,
) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(wait_attribute, driver, element, attribute, expected, contains, wait_timeout(ctx, timeout))
    return f"Attribute '{attribute}' {'contains' if contains else 'equals'} '{expected}'"
#endregion


#region Pointer and keyboard
async def hover(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(lambda: ActionChains(driver).move_to_element(element).perform())
    return "Hovered over element"


async def drag_and_drop(
    ctx: ServerContext,
    by: str,
    value: str,
    target_by: str,
    target_value: str,
    timeout: Optional[int] = None,
) -> str:
    driver = ctx.registry.current_driver()
    source_locator = resolve_locator(by, value)
    target_locator = resolve_locator(target_by, target_value)
    source = await engine_call(wait_located, driver, source_locator, wait_timeout(ctx, timeout))
    target = await engine_call(wait_located, driver, target_locator, wait_timeout(ctx, timeout))
    await engine_call(lambda: ActionChains(driver).drag_and_drop(source, target).perform())
    return "Drag and drop completed"


async def double_click(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(lambda: ActionChains(driver).double_click(element).perform())
    return "Double click performed"


async def right_click(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(lambda: ActionChains(driver).context_click(element).perform())
    return "Right click performed"


async def press_key(ctx: ServerContext, key: str) -> str:
    """Press and release one key on whatever element has focus."""
    driver = ctx.registry.current_driver()
    code = resolve_key(key)
    await engine_call(lambda: ActionChains(driver).key_down(code).key_up(code).perform())
    return f"Key '{key}' pressed"
#endregion


#region Scrolling and focus
async def scroll_element_into_view(
    ctx: ServerContext,
    by: str,
    value: str,
    align_to_top: bool = True,
    timeout: Optional[int] = None,
) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(driver.execute_script, "arguments[0].scrollIntoView(arguments[1]);", element, align_to_top)
    return "Element scrolled into view"


async def scroll_by_offset(ctx: ServerContext, x: int, y: int) -> str:
    driver = ctx.registry.current_driver()
    await engine_call(driver.execute_script, "window.scrollBy(arguments[0], arguments[1]);", x, y)
    return f"Scrolled by {x},{y}"


async def focus_element(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    driver, element = await locate_element(ctx, by, value, timeout)
    await engine_call(driver.execute_script, "arguments[0].focus();", element)
    return "Element focused"
#endregion


__all__ = [
    'find_element',
    'click_element',
    'send_keys',
    'get_element_text',
    'get_element_attribute',
    'get_css_value',
    'get_element_rect',
    'upload_file',
    'wait_for_element_visible',
    'wait_for_element_not_visible',
    'wait_for_text',
    'wait_for_attribute',
    'hover',
    'drag_and_drop',
    'double_click',
    'right_click',
    'press_key',
    'scroll_element_into_view',
    'scroll_by_offset',
    'focus_element',
]
