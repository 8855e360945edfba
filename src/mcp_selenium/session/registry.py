"""
Session registry: the mapping from session id to live WebDriver, plus the
"current session" pointer every tool implicitly targets.

Invariants:
    - current_id is either None or a key of the mapping.
    - Session ids are unique; rename never overwrites an existing id.
    - A session's driver is quit exactly once (close or shutdown).

Structural mutations are serialized with an asyncio.Lock. Engine I/O
(launching a browser, quitting it) always runs outside the lock so a slow
launch never blocks switch/rename/close on other sessions.
"""

import time
import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..browser.driver import create_webdriver
from ..config.options import BrowserOptions
from ..constants import SUPPORTED_BROWSERS
from ..errors import (
    EngineError,
    LaunchFailure,
    McpSeleniumError,
    NoActiveSession,
    SessionAlreadyExists,
    SessionNotFound,
    UnsupportedBrowser,
)

import logging
logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    msg = getattr(exc, "msg", None) or str(exc) or exc.__class__.__name__
    return msg.strip()


def _epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class Session:
    """
    One live browser connection.

    Attributes:
        id: Registry key; changes only through SessionRegistry.rename.
        browser: Engine kind the session was launched with.
        driver: The Selenium WebDriver, owned exclusively by the registry.
        created_at: Launch time (epoch seconds).
    """

    id: str
    browser: str
    driver: Any
    created_at: float = field(default_factory=time.time)


class SessionRegistry:
    """Owns every live session and the current-session pointer."""

    def __init__(
        self,
        driver_factory: Callable[[str, Optional[BrowserOptions]], Any] = create_webdriver,
        clock: Callable[[], int] = _epoch_millis,
    ):
        self._driver_factory = driver_factory
        self._clock = clock
        self._sessions: Dict[str, Session] = {}
        self._current_id: Optional[str] = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_id(self) -> Optional[str]:
        return self._current_id

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def list_ids(self) -> List[str]:
        """Snapshot of live session ids in insertion order."""
        return list(self._sessions)

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None

    def current(self) -> Session:
        """Return the current session or raise NoActiveSession."""
        if self._current_id is None:
            raise NoActiveSession()
        session = self._sessions.get(self._current_id)
        if session is None:
            raise NoActiveSession(f"Current session {self._current_id} is no longer registered")
        return session

    def current_driver(self):
        return self.current().driver

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _unique_id(self, browser: str) -> str:
        # Same browser within the same millisecond: re-derive with a counter.
        base = f"{browser}_{self._clock()}"
        candidate, n = base, 1
        while candidate in self._sessions:
            n += 1
            candidate = f"{base}_{n}"
        return candidate

    async def create(self, browser: str, options: Optional[BrowserOptions] = None) -> Session:
        """
        Launch a browser, register it and make it current.

        Raises:
            UnsupportedBrowser: unknown engine kind.
            LaunchFailure: the engine could not start; the registry is unchanged.
        """
        if browser not in SUPPORTED_BROWSERS:
            raise UnsupportedBrowser(browser)

        try:
            driver = await asyncio.to_thread(self._driver_factory, browser, options)
        except McpSeleniumError:
            raise
        except Exception as e:
            logger.error(f"Launching {browser} failed: {_describe(e)}")
            raise LaunchFailure(_describe(e)) from e

        async with self._lock:
            session = Session(id=self._unique_id(browser), browser=browser, driver=driver)
            self._sessions[session.id] = session
            self._current_id = session.id

        logger.info(f"Started session {session.id}")
        return session

    async def switch(self, session_id: str) -> Session:
        """Make `session_id` current. On failure the pointer is untouched."""
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)
            self._current_id = session_id
        logger.info(f"Switched to session {session_id}")
        return session

    async def rename(self, old_id: str, new_id: str) -> Session:
        """
        Move a session to a new id, keeping its position in list_ids().

        Renaming a session to its own id is rejected as SessionAlreadyExists.
        """
        async with self._lock:
            session = self._sessions.get(old_id)
            if session is None:
                raise SessionNotFound(old_id)
            if new_id in self._sessions:
                raise SessionAlreadyExists(new_id)

            self._sessions = {
                (new_id if key == old_id else key): value
                for key, value in self._sessions.items()
            }
            session.id = new_id
            if self._current_id == old_id:
                self._current_id = new_id

        logger.info(f"Renamed session {old_id} to {new_id}")
        return session

    async def close(self, session_id: Optional[str] = None) -> Session:
        """
        Unregister a session and quit its browser.

        `session_id=None` closes the current session. The entry is removed
        even when quit fails; the quit failure is then raised as EngineError.
        """
        async with self._lock:
            if session_id is None:
                session_id = self._current_id
                if session_id is None or session_id not in self._sessions:
                    raise NoActiveSession()
            elif session_id not in self._sessions:
                raise SessionNotFound(session_id)

            session = self._sessions.pop(session_id)
            if self._current_id == session_id:
                self._current_id = None

        try:
            await asyncio.to_thread(session.driver.quit)
        except Exception as e:
            logger.warning(f"Quitting browser for session {session_id} failed: {_describe(e)}")
            raise EngineError(
                f"Session {session_id} was removed, but the browser failed to quit: {_describe(e)}"
            ) from e

        logger.info(f"Closed session {session_id}")
        return session

    def drain(self) -> List[Session]:
        """
        Remove every session and clear the current pointer in one step.

        Contains no await point, so it is atomic with respect to the event
        loop and safe to call from a signal handler. Drivers are not quit.
        """
        sessions = list(self._sessions.values())
        self._sessions = {}
        self._current_id = None
        return sessions


__all__ = [
    "Session",
    "SessionRegistry",
]
