"""Assertion tool implementations. A failed assertion raises AssertionFailure."""

from typing import Optional

from ..browser.engine import engine_call
from ..context import ServerContext
from ..errors import AssertionFailure
from .lookup import locate_element


async def assert_element_present(ctx: ServerContext, by: str, value: str, timeout: Optional[int] = None) -> str:
    await locate_element(ctx, by, value, timeout)
    return "Element is present"


async def assert_element_text(
    ctx: ServerContext, by: str, value: str, expected: str, timeout: Optional[int] = None
) -> str:
    _, element = await locate_element(ctx, by, value, timeout)
    text = await engine_call(lambda: element.text)
    if text != expected:
        raise AssertionFailure(f'Expected "{expected}", but found "{text}"')
    return "Text assertion passed"


async def assert_element_attribute(
    ctx: ServerContext,
    by: str,
    value: str,
    attribute: str,
    expected: str,
    timeout: Optional[int] = None,
) -> str:
    _, element = await locate_element(ctx, by, value, timeout)
    attr_value = await engine_call(element.get_attribute, attribute)
    if attr_value != expected:
        raise AssertionFailure(f'Expected "{attribute}" to be "{expected}", but found "{attr_value}"')
    return "Attribute assertion passed"


__all__ = [
    'assert_element_present',
    'assert_element_text',
    'assert_element_attribute',
]
