"""
Cleanup coordinator.

Two paths tear the server down:

- `shutdown` / `cleanup`: async, run by the server lifespan when the stdio
  session ends. Each recording gets a bounded chance to finalize before
  its encoder is killed.
- `cleanup_sync`: used from SIGINT/SIGTERM handlers, which run while the
  event loop is suspended and so cannot await anything. Encoders get SIGTERM
  (ffmpeg finalizes its output on it) and drivers are quit directly.

Both attempt every session and log individual failures.
"""

import sys
import signal
import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List

from .constants import SHUTDOWN_RECORDING_TIMEOUT_SECS
from .context import ServerContext

import logging
logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    closed: List[str] = field(default_factory=list)
    recordings_stopped: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


async def cleanup(ctx: ServerContext) -> CleanupReport:
    """Stop all recordings, quit every browser and clear the registry."""
    report = CleanupReport()
    timeout = ctx.config.get("shutdown_recording_timeout", SHUTDOWN_RECORDING_TIMEOUT_SECS)

    active = ctx.recordings.active_sessions()
    if active:
        logger.info(f"Stopping {len(active)} recording(s)")
        failures = await ctx.recordings.stop_all(timeout=timeout)
        for session_id in active:
            if session_id in failures:
                report.errors[f"recording:{session_id}"] = str(failures[session_id]) or "timed out"
            else:
                report.recordings_stopped.append(session_id)

    sessions = ctx.registry.drain()
    for session in sessions:
        try:
            await asyncio.to_thread(session.driver.quit)
            report.closed.append(session.id)
            logger.info(f"Closed session {session.id}")
        except Exception as e:
            logger.error(f"Quitting browser for session {session.id} failed: {e}")
            report.errors[session.id] = str(e)

    return report


async def shutdown(ctx: ServerContext) -> CleanupReport:
    """
    Explicit shutdown: run cleanup without letting any failure escape.

    Called from the server lifespan when the stdio session ends; the
    process then exits with status 0.
    """
    logger.info("Shutting down")
    try:
        return await cleanup(ctx)
    except Exception as e:
        logger.exception(f"Cleanup aborted: {e}")
        report = CleanupReport()
        report.errors["cleanup"] = str(e)
        return report


def cleanup_sync(ctx: ServerContext) -> CleanupReport:
    """Synchronous cleanup for signal handlers (runs in the main thread)."""
    report = CleanupReport()

    report.recordings_stopped = ctx.recordings.terminate_all()

    for session in ctx.registry.drain():
        try:
            session.driver.quit()
            report.closed.append(session.id)
        except Exception as e:
            logger.error(f"Quitting browser for session {session.id} failed: {e}")
            report.errors[session.id] = str(e)

    logger.info(f"Signal cleanup complete: closed {len(report.closed)} session(s)")
    return report


def install_signal_handlers(ctx: ServerContext, exit: Callable[[int], None] = sys.exit) -> None:
    """Bind SIGINT and SIGTERM to a synchronous cleanup followed by exit(0)."""

    def _handler(signum, frame):
        logger.info(f"Received signal {signal.Signals(signum).name}, cleaning up")
        cleanup_sync(ctx)
        exit(0)

    signal.signal(signal.SIGTERM, _handler)
    signal.signal(signal.SIGINT, _handler)


__all__ = [
    "CleanupReport",
    "cleanup",
    "shutdown",
    "cleanup_sync",
    "install_signal_handlers",
]
