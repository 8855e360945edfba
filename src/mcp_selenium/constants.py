"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

# ============================================================================
# Engines
# ============================================================================

SUPPORTED_BROWSERS = ("chrome", "firefox", "edge")
"""Engine kinds accepted by start_browser: primary, secondary, tertiary."""

HEADLESS_FLAGS = {
    "chrome": "--headless=new",
    "edge": "--headless=new",
    "firefox": "--headless",
}
"""Headless launch flag per engine family."""


# ============================================================================
# Element Waits
# ============================================================================

DEFAULT_TIMEOUT_MS = 10000
"""Default element wait in milliseconds, unless MCP_SELENIUM_DEFAULT_TIMEOUT_MS overrides it."""


# ============================================================================
# Recording Configuration
# ============================================================================

DEFAULT_FRAME_RATE = 30
"""Frames per second handed to the encoder when the caller gives none."""

FRAME_QUEUE_SIZE = 8
"""Default capacity of the frame channel between the screencast reader and the encoder pump."""

SHUTDOWN_RECORDING_TIMEOUT_SECS = 10.0
"""Default time the cleanup coordinator waits for each encoder to finalize."""

DEVTOOLS_HTTP_TIMEOUT_SECS = 3.0
"""Timeout for DevTools target discovery over HTTP."""

STDERR_TAIL_LINES = 20
"""Number of encoder stderr lines kept for error reports."""


__all__ = [
    "SUPPORTED_BROWSERS",
    "HEADLESS_FLAGS",
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_FRAME_RATE",
    "FRAME_QUEUE_SIZE",
    "SHUTDOWN_RECORDING_TIMEOUT_SECS",
    "DEVTOOLS_HTTP_TIMEOUT_SECS",
    "STDERR_TAIL_LINES",
]
