"""Synchronous Selenium helpers, run by the tools inside worker threads."""

from .elements import (
    LOCATOR_STRATEGIES,
    resolve_locator,
    wait_located,
    wait_visible,
    wait_not_visible,
    wait_text,
    wait_attribute,
)
from .keyboard import resolve_key

__all__ = [
    'LOCATOR_STRATEGIES',
    'resolve_locator',
    'wait_located',
    'wait_visible',
    'wait_not_visible',
    'wait_text',
    'wait_attribute',
    'resolve_key',
]
