"""
FastMCP server wiring.

`create_server(ctx)` registers every tool and the browser-status resource
against one ServerContext. Tool bodies live in mcp_selenium.tools; the
functions here only bind the context and choose the error prefix.
"""

import contextlib
from typing import Any, AsyncIterator, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .context import ServerContext
from .decorators import tool_envelope
from .shutdown import shutdown
from .tools import (
    assertions,
    browser_management,
    debugging,
    interaction,
    navigation,
    recording,
    screenshots,
    storage,
    windows,
)

import logging
logger = logging.getLogger(__name__)


def server_lifespan(ctx: ServerContext):
    """Lifespan that hands out `ctx` and shuts it down when the stdio session ends."""

    @contextlib.asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[ServerContext]:
        try:
            yield ctx
        finally:
            report = await shutdown(ctx)
            logger.info(f"Server cleanup complete: closed {len(report.closed)} session(s)")

    return lifespan


def create_server(ctx: Optional[ServerContext] = None) -> FastMCP:
    ctx = ctx or ServerContext.from_env()
    mcp = FastMCP("mcp_selenium", lifespan=server_lifespan(ctx))

    #region Tools -- Browser management
    @mcp.tool()
    @tool_envelope("Error starting browser")
    async def start_browser(browser: str, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Launches a browser and makes it the current session.

        Args:
            browser: "chrome", "firefox" or "edge".
            options: Optional {"headless": bool, "arguments": [str, ...]}.
        """
        return await browser_management.start_browser(ctx, browser, options)

    @mcp.tool()
    @tool_envelope("Error closing session")
    async def close_session(session_id: Optional[str] = None) -> str:
        """Closes a browser session (the current one by default). Stops its recording first."""
        return await browser_management.close_session(ctx, session_id)

    @mcp.tool()
    @tool_envelope("Error listing sessions")
    async def list_sessions() -> str:
        """Lists active browser session IDs as a JSON array."""
        return await browser_management.list_sessions(ctx)

    @mcp.tool()
    @tool_envelope("Error switching session")
    async def switch_session(session_id: str) -> str:
        """Switches to a different active browser session."""
        return await browser_management.switch_session(ctx, session_id)

    @mcp.tool()
    @tool_envelope("Error renaming session")
    async def rename_session(old_id: str, new_id: str) -> str:
        """Renames an existing browser session."""
        return await browser_management.rename_session(ctx, old_id, new_id)
    #endregion

    #region Tools -- Navigation
    @mcp.tool()
    @tool_envelope("Error navigating")
    async def navigate(url: str) -> str:
        """Navigates to a URL."""
        return await navigation.navigate(ctx, url)

    @mcp.tool()
    @tool_envelope("Error navigating back")
    async def go_back() -> str:
        """Navigates back in browser history."""
        return await navigation.go_back(ctx)

    @mcp.tool()
    @tool_envelope("Error navigating forward")
    async def go_forward() -> str:
        """Navigates forward in browser history."""
        return await navigation.go_forward(ctx)

    @mcp.tool()
    @tool_envelope("Error refreshing page")
    async def refresh_page() -> str:
        """Refreshes the current page."""
        return await navigation.refresh_page(ctx)

    @mcp.tool()
    @tool_envelope("Error getting page title")
    async def get_page_title() -> str:
        """Retrieves the current page title."""
        return await navigation.get_page_title(ctx)

    @mcp.tool()
    @tool_envelope("Error getting current URL")
    async def get_current_url() -> str:
        """Retrieves the current page URL."""
        return await navigation.get_current_url(ctx)

    @mcp.tool()
    @tool_envelope("Error getting page source")
    async def get_page_source() -> str:
        """Retrieves the current page source."""
        return await navigation.get_page_source(ctx)
    #endregion

    #region Tools -- Elements
    # by: id | css | xpath | name | tag | class. timeout: milliseconds (default 10000).
    @mcp.tool()
    @tool_envelope("Error finding element")
    async def find_element(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Finds an element."""
        return await interaction.find_element(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error clicking element")
    async def click_element(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Clicks an element."""
        return await interaction.click_element(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error entering text")
    async def send_keys(by: str, value: str, text: str, timeout: Optional[int] = None) -> str:
        """Sends keys to an element, aka typing. The element is cleared first."""
        return await interaction.send_keys(ctx, by, value, text, timeout)

    @mcp.tool()
    @tool_envelope("Error getting element text")
    async def get_element_text(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Gets the visible text of an element."""
        return await interaction.get_element_text(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error getting attribute")
    async def get_element_attribute(by: str, value: str, attribute: str, timeout: Optional[int] = None) -> str:
        """Gets an attribute value of an element (empty if absent)."""
        return await interaction.get_element_attribute(ctx, by, value, attribute, timeout)

    @mcp.tool()
    @tool_envelope("Error getting CSS value")
    async def get_css_value(by: str, value: str, property: str, timeout: Optional[int] = None) -> str:
        """Gets the computed CSS value of an element."""
        return await interaction.get_css_value(ctx, by, value, property, timeout)

    @mcp.tool()
    @tool_envelope("Error getting element rect")
    async def get_element_rect(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Gets the size and location of an element as JSON."""
        return await interaction.get_element_rect(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error uploading file")
    async def upload_file(by: str, value: str, file_path: str, timeout: Optional[int] = None) -> str:
        """Uploads a file using a file input element. file_path must be absolute."""
        return await interaction.upload_file(ctx, by, value, file_path, timeout)
    #endregion

    #region Tools -- Waits
    @mcp.tool()
    @tool_envelope("Error waiting for element visibility")
    async def wait_for_element_visible(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Waits until an element is visible."""
        return await interaction.wait_for_element_visible(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error waiting for element to become invisible")
    async def wait_for_element_not_visible(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Waits until an element is not visible."""
        return await interaction.wait_for_element_not_visible(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error waiting for text")
    async def wait_for_text(
        by: str, value: str, text: str, contains: bool = False, timeout: Optional[int] = None
    ) -> str:
        """Waits until an element's text matches (or contains) a given value."""
        return await interaction.wait_for_text(ctx, by, value, text, contains, timeout)

    @mcp.tool()
    @tool_envelope("Error waiting for attribute")
    async def wait_for_attribute(
        by: str,
        value: str,
        attribute: str,
        expected: str,
        contains: bool = False,
        timeout: Optional[int] = None,
    ) -> str:
        """Waits until an element's attribute equals (or contains) a given value."""
        return await interaction.wait_for_attribute(ctx, by, value, attribute, expected, contains, timeout)
    #endregion

    #region Tools -- Pointer and keyboard
    @mcp.tool()
    @tool_envelope("Error hovering over element")
    async def hover(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Moves the mouse to hover over an element."""
        return await interaction.hover(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error performing drag and drop")
    async def drag_and_drop(
        by: str, value: str, target_by: str, target_value: str, timeout: Optional[int] = None
    ) -> str:
        """Drags an element and drops it onto another element."""
        return await interaction.drag_and_drop(ctx, by, value, target_by, target_value, timeout)

    @mcp.tool()
    @tool_envelope("Error performing double click")
    async def double_click(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Performs a double click on an element."""
        return await interaction.double_click(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error performing right click")
    async def right_click(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Performs a right click (context click) on an element."""
        return await interaction.right_click(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error pressing key")
    async def press_key(key: str) -> str:
        """Simulates pressing a keyboard key (e.g. 'Enter', 'Tab', 'ArrowDown', 'a')."""
        return await interaction.press_key(ctx, key)
    #endregion

    #region Tools -- Windows and frames
    @mcp.tool()
    @tool_envelope("Error listing windows")
    async def list_windows() -> str:
        """Lists all available window handles."""
        return await windows.list_windows(ctx)

    @mcp.tool()
    @tool_envelope("Error switching window")
    async def switch_to_window(handle: str) -> str:
        """Switches to a window by handle."""
        return await windows.switch_to_window(ctx, handle)

    @mcp.tool()
    @tool_envelope("Error switching to frame")
    async def switch_to_frame(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Switches to a frame."""
        return await windows.switch_to_frame(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Error switching to parent frame")
    async def switch_to_parent_frame() -> str:
        """Switches to the parent frame."""
        return await windows.switch_to_parent_frame(ctx)

    @mcp.tool()
    @tool_envelope("Error setting window size")
    async def set_window_size(width: int, height: int) -> str:
        """Sets the browser window size in pixels."""
        return await windows.set_window_size(ctx, width, height)

    @mcp.tool()
    @tool_envelope("Error maximizing window")
    async def maximize_window() -> str:
        """Maximizes the browser window."""
        return await windows.maximize_window(ctx)

    @mcp.tool()
    @tool_envelope("Error minimizing window")
    async def minimize_window() -> str:
        """Minimizes the browser window."""
        return await windows.minimize_window(ctx)
    #endregion

    #region Tools -- Alerts
    @mcp.tool()
    @tool_envelope("Error getting alert text")
    async def get_alert_text() -> str:
        """Retrieves the text of the currently displayed alert."""
        return await windows.get_alert_text(ctx)

    @mcp.tool()
    @tool_envelope("Error accepting alert")
    async def accept_alert() -> str:
        """Accepts the currently displayed alert."""
        return await windows.accept_alert(ctx)

    @mcp.tool()
    @tool_envelope("Error dismissing alert")
    async def dismiss_alert() -> str:
        """Dismisses the currently displayed alert."""
        return await windows.dismiss_alert(ctx)

    @mcp.tool()
    @tool_envelope("Error sending alert text")
    async def send_alert_text(text: str) -> str:
        """Sends text to a prompt alert."""
        return await windows.send_alert_text(ctx, text)
    #endregion

    #region Tools -- Cookies and storage
    @mcp.tool()
    @tool_envelope("Error getting cookies")
    async def get_cookies() -> str:
        """Retrieves all cookies as JSON."""
        return await storage.get_cookies(ctx)

    @mcp.tool()
    @tool_envelope("Error adding cookie")
    async def add_cookie(
        name: str,
        value: str,
        path: Optional[str] = None,
        domain: Optional[str] = None,
        secure: Optional[bool] = None,
        http_only: Optional[bool] = None,
        expiry: Optional[int] = None,
    ) -> str:
        """Adds a cookie. expiry is a Unix timestamp in seconds."""
        return await storage.add_cookie(ctx, name, value, path, domain, secure, http_only, expiry)

    @mcp.tool()
    @tool_envelope("Error deleting cookie")
    async def delete_cookie(name: str) -> str:
        """Deletes a cookie by name."""
        return await storage.delete_cookie(ctx, name)

    @mcp.tool()
    @tool_envelope("Error getting local storage item")
    async def get_local_storage_item(key: str) -> str:
        """Retrieves a value from localStorage (empty if missing)."""
        return await storage.get_storage_item(ctx, "localStorage", key)

    @mcp.tool()
    @tool_envelope("Error setting local storage item")
    async def set_local_storage_item(key: str, value: str) -> str:
        """Sets a value in localStorage."""
        return await storage.set_storage_item(ctx, "localStorage", key, value)

    @mcp.tool()
    @tool_envelope("Error removing local storage item")
    async def remove_local_storage_item(key: str) -> str:
        """Removes an item from localStorage."""
        return await storage.remove_storage_item(ctx, "localStorage", key)

    @mcp.tool()
    @tool_envelope("Error getting session storage item")
    async def get_session_storage_item(key: str) -> str:
        """Retrieves a value from sessionStorage (empty if missing)."""
        return await storage.get_storage_item(ctx, "sessionStorage", key)

    @mcp.tool()
    @tool_envelope("Error setting session storage item")
    async def set_session_storage_item(key: str, value: str) -> str:
        """Sets a value in sessionStorage."""
        return await storage.set_storage_item(ctx, "sessionStorage", key, value)

    @mcp.tool()
    @tool_envelope("Error removing session storage item")
    async def remove_session_storage_item(key: str) -> str:
        """Removes an item from sessionStorage."""
        return await storage.remove_storage_item(ctx, "sessionStorage", key)
    #endregion

    #region Tools -- Scrolling and focus
    @mcp.tool()
    @tool_envelope("Error scrolling element into view")
    async def scroll_element_into_view(
        by: str, value: str, align_to_top: bool = True, timeout: Optional[int] = None
    ) -> str:
        """Scrolls an element into view."""
        return await interaction.scroll_element_into_view(ctx, by, value, align_to_top, timeout)

    @mcp.tool()
    @tool_envelope("Error scrolling by offset")
    async def scroll_by_offset(x: int, y: int) -> str:
        """Scrolls the page by the given offset in pixels."""
        return await interaction.scroll_by_offset(ctx, x, y)

    @mcp.tool()
    @tool_envelope("Error focusing element")
    async def focus_element(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Sets focus on an element."""
        return await interaction.focus_element(ctx, by, value, timeout)
    #endregion

    #region Tools -- Recording
    @mcp.tool()
    @tool_envelope("Error starting recording")
    async def start_recording(output_path: str, frame_rate: int = 30) -> str:
        """
        Starts recording the current browser session to a video file.

        Requires chrome or edge and an ffmpeg binary (MCP_SELENIUM_FFMPEG_PATH or PATH).
        """
        return await recording.start_recording(ctx, output_path, frame_rate)

    @mcp.tool()
    @tool_envelope("Error stopping recording")
    async def stop_recording() -> str:
        """Stops the current session's recording and waits for the file to be written."""
        return await recording.stop_recording(ctx)
    #endregion

    #region Tools -- Logs and diagnostics
    @mcp.tool()
    @tool_envelope("Error retrieving console logs")
    async def get_console_logs() -> str:
        """Retrieves browser console logs."""
        return await debugging.get_console_logs(ctx)

    @mcp.tool()
    @tool_envelope("Error retrieving network logs")
    async def get_network_logs() -> str:
        """Retrieves network events from the performance log."""
        return await debugging.get_network_logs(ctx)

    @mcp.tool()
    @tool_envelope("Error retrieving performance metrics")
    async def get_performance_metrics() -> str:
        """Retrieves performance timing metrics."""
        return await debugging.get_performance_metrics(ctx)

    @mcp.tool()
    @tool_envelope("Error executing JavaScript")
    async def execute_javascript(script: str, args: Optional[List[Any]] = None) -> str:
        """Executes JavaScript code on the current page."""
        return await debugging.execute_javascript(ctx, script, args)
    #endregion

    #region Tools -- Assertions
    @mcp.tool()
    @tool_envelope("Assertion failed")
    async def assert_element_present(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Verifies that an element is present on the page."""
        return await assertions.assert_element_present(ctx, by, value, timeout)

    @mcp.tool()
    @tool_envelope("Assertion failed")
    async def assert_element_text(by: str, value: str, expected: str, timeout: Optional[int] = None) -> str:
        """Verifies that an element has the expected text."""
        return await assertions.assert_element_text(ctx, by, value, expected, timeout)

    @mcp.tool()
    @tool_envelope("Assertion failed")
    async def assert_element_attribute(
        by: str, value: str, attribute: str, expected: str, timeout: Optional[int] = None
    ) -> str:
        """Verifies that an element attribute has the expected value."""
        return await assertions.assert_element_attribute(ctx, by, value, attribute, expected, timeout)
    #endregion

    #region Tools -- Screenshots
    @mcp.tool()
    @tool_envelope("Error taking screenshot")
    async def take_screenshot(output_path: Optional[str] = None, thumbnail_width: Optional[int] = None):
        """
        Captures a screenshot of the current page.

        Saves the PNG to output_path, or returns it as base64 when no path is
        given. thumbnail_width (>= 50) downscales the inline image.
        """
        return await screenshots.take_screenshot(ctx, output_path, thumbnail_width)
    #endregion

    #region Resources
    @mcp.resource("browser-status://current")
    def browser_status() -> str:
        """Current browser session status."""
        return browser_management.browser_status(ctx)
    #endregion

    return mcp


__all__ = ['create_server']
