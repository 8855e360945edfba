"""Locator resolution and element waits."""

from typing import Tuple

from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC

from ..errors import UnsupportedStrategy


_STRATEGIES = {
    'id': By.ID,
    'css': By.CSS_SELECTOR,
    'xpath': By.XPATH,
    'name': By.NAME,
    # No dedicated tag primitive: a bare tag name is a valid CSS selector.
    'tag': By.CSS_SELECTOR,
    'class': By.CLASS_NAME,
}

LOCATOR_STRATEGIES = tuple(_STRATEGIES)


def resolve_locator(by: str, value: str) -> Tuple[str, str]:
    """
    Translate a (strategy, value) pair into a Selenium locator tuple.

    >>> resolve_locator("css", "#main")
    ('css selector', '#main')
    """
    mechanism = _STRATEGIES.get(by.lower()) if isinstance(by, str) else None
    if mechanism is None:
        raise UnsupportedStrategy(by)
    return mechanism, value


def _seconds(timeout_ms) -> float:
    return max(float(timeout_ms), 0.0) / 1000.0


def wait_located(driver: WebDriver, locator: Tuple[str, str], timeout_ms) -> WebElement:
    """Poll until an element matching `locator` is present in the DOM."""
    return WebDriverWait(driver, _seconds(timeout_ms)).until(
        EC.presence_of_element_located(locator),
        message=f"Waiting for element {locator[0]}={locator[1]!r} timed out after {timeout_ms}ms",
    )


def wait_visible(driver: WebDriver, element: WebElement, timeout_ms) -> WebElement:
    return WebDriverWait(driver, _seconds(timeout_ms)).until(
        EC.visibility_of(element),
        message=f"Element did not become visible within {timeout_ms}ms",
    )


def wait_not_visible(driver: WebDriver, element: WebElement, timeout_ms) -> bool:
    return WebDriverWait(driver, _seconds(timeout_ms)).until(
        EC.invisibility_of_element(element),
        message=f"Element stayed visible for {timeout_ms}ms",
    )


def wait_text(driver: WebDriver, element: WebElement, text: str, contains: bool, timeout_ms) -> bool:
    """Wait until the element's text equals (or contains) `text`."""
    def _matches(_driver):
        current = element.text
        return text in current if contains else current == text

    verb = "contain" if contains else "equal"
    return WebDriverWait(driver, _seconds(timeout_ms)).until(
        _matches,
        message=f"Element text did not {verb} {text!r} within {timeout_ms}ms",
    )


def wait_attribute(
    driver: WebDriver,
    element: WebElement,
    attribute: str,
    expected: str,
    contains: bool,
    timeout_ms,
) -> bool:
    """Wait until the element's attribute equals (or contains) `expected`."""
    def _matches(_driver):
        current = element.get_attribute(attribute)
        if current is None:
            return False
        return expected in current if contains else current == expected

    verb = "contain" if contains else "equal"
    return WebDriverWait(driver, _seconds(timeout_ms)).until(
        _matches,
        message=f"Attribute {attribute!r} did not {verb} {expected!r} within {timeout_ms}ms",
    )


__all__ = [
    'LOCATOR_STRATEGIES',
    'resolve_locator',
    'wait_located',
    'wait_visible',
    'wait_not_visible',
    'wait_text',
    'wait_attribute',
]
