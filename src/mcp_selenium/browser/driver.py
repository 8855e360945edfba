"""WebDriver creation for the supported engine families."""

from typing import Optional

from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver

from ..config.options import BrowserOptions
from ..constants import HEADLESS_FLAGS, SUPPORTED_BROWSERS
from ..errors import UnsupportedBrowser

import logging
logger = logging.getLogger(__name__)


def _options_for(browser: str):
    if browser == "chrome":
        from selenium.webdriver.chrome.options import Options
    elif browser == "firefox":
        from selenium.webdriver.firefox.options import Options
    elif browser == "edge":
        from selenium.webdriver.edge.options import Options
    else:
        raise UnsupportedBrowser(browser)
    return Options()


def build_options(browser: str, options: Optional[BrowserOptions] = None):
    """
    Build engine-specific Selenium options.

    The headless flag goes first, then the caller's arguments in order.
    """
    options = options or BrowserOptions()
    engine_options = _options_for(browser)

    if options.headless:
        engine_options.add_argument(HEADLESS_FLAGS[browser])
    for arg in options.arguments:
        engine_options.add_argument(arg)

    # Console and performance logs back get_console_logs / get_network_logs.
    if browser == "chrome":
        engine_options.set_capability("goog:loggingPrefs", {"browser": "ALL", "performance": "ALL"})
    elif browser == "edge":
        engine_options.set_capability("ms:loggingPrefs", {"browser": "ALL", "performance": "ALL"})

    return engine_options


def create_webdriver(browser: str, options: Optional[BrowserOptions] = None) -> WebDriver:
    """
    Launch a new browser instance. Blocking; callers run it in a worker thread.

    Raises:
        UnsupportedBrowser: `browser` is not chrome, firefox or edge.
        selenium.common.exceptions.WebDriverException: the engine failed to start.
    """
    if browser not in SUPPORTED_BROWSERS:
        raise UnsupportedBrowser(browser)

    engine_options = build_options(browser, options)
    logger.info(f"Launching {browser} with arguments {list(engine_options.arguments)}")

    if browser == "chrome":
        return webdriver.Chrome(options=engine_options)
    if browser == "firefox":
        return webdriver.Firefox(options=engine_options)
    return webdriver.Edge(options=engine_options)


def debugger_address(driver: WebDriver) -> Optional[str]:
    """
    Return the DevTools "host:port" of a Chromium driver, or None.

    Chromedriver and msedgedriver report it in their vendor capabilities.
    """
    caps = getattr(driver, "capabilities", None) or {}
    for key in ("goog:chromeOptions", "ms:edgeOptions"):
        vendor = caps.get(key) or {}
        address = vendor.get("debuggerAddress")
        if address:
            return address
    return None


__all__ = [
    'build_options',
    'create_webdriver',
    'debugger_address',
]
