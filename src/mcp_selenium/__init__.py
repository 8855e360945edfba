"""
MCP server for Selenium browser automation.

One server process manages several browser sessions at once. Every tool
acts on the *current* session; `start_browser` creates a session and makes
it current, `switch_session` moves the pointer, `close_session` ends one.

## Sessions

Session ids default to `<browser>_<epoch millis>` and can be renamed.
Renaming keeps the session's place in `list_sessions` and, when it is the
current session, the pointer follows it.

## Recording

Chrome and Edge sessions can be recorded to video. Frames come from the
DevTools screencast and are piped into ffmpeg; the browser only produces the
next frame after the previous one was written, so nothing is dropped when
ffmpeg falls behind.

## Shutdown

SIGINT and SIGTERM stop every recording, quit every browser and exit.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
