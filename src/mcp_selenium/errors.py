"""
Error taxonomy for the session manager and the tools built on it.

Core code raises these; only the tool envelope turns them into text.
"""


class McpSeleniumError(Exception):
    """Base class. ``kind`` names the failure category."""

    kind = "Error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnsupportedStrategy(McpSeleniumError):
    kind = "UnsupportedStrategy"

    def __init__(self, strategy):
        super().__init__(f"Unsupported locator strategy: {strategy}")
        self.strategy = strategy


class UnsupportedBrowser(McpSeleniumError):
    kind = "UnsupportedBrowser"

    def __init__(self, browser):
        super().__init__(f"Unsupported browser: {browser}")
        self.browser = browser


class InvalidOptions(McpSeleniumError):
    kind = "InvalidOptions"


class NoActiveSession(McpSeleniumError):
    kind = "NoActiveSession"

    def __init__(self, message: str = "No active browser session"):
        super().__init__(message)


class SessionNotFound(McpSeleniumError):
    kind = "SessionNotFound"

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class SessionAlreadyExists(McpSeleniumError):
    kind = "SessionAlreadyExists"

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} already exists")
        self.session_id = session_id


class LaunchFailure(McpSeleniumError):
    kind = "LaunchFailure"


class AlreadyRecording(McpSeleniumError):
    kind = "AlreadyRecording"

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} is already recording")
        self.session_id = session_id


class NotRecording(McpSeleniumError):
    kind = "NotRecording"

    def __init__(self, session_id=None):
        super().__init__("No active recording")
        self.session_id = session_id


class EncodingFailure(McpSeleniumError):
    kind = "EncodingFailure"

    def __init__(self, returncode: int, stderr_tail: str = ""):
        msg = f"ffmpeg exited with code {returncode}"
        if stderr_tail:
            msg += f": {stderr_tail}"
        super().__init__(msg)
        self.returncode = returncode


class ElementTimeout(McpSeleniumError):
    kind = "ElementTimeout"


class EngineError(McpSeleniumError):
    kind = "EngineError"


class AssertionFailure(McpSeleniumError):
    kind = "AssertionFailure"


__all__ = [
    "McpSeleniumError",
    "UnsupportedStrategy",
    "UnsupportedBrowser",
    "InvalidOptions",
    "NoActiveSession",
    "SessionNotFound",
    "SessionAlreadyExists",
    "LaunchFailure",
    "AlreadyRecording",
    "NotRecording",
    "EncodingFailure",
    "ElementTimeout",
    "EngineError",
    "AssertionFailure",
]
