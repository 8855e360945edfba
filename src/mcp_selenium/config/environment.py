"""Environment configuration and validation."""

import os
import shutil
from typing import Optional

from dotenv import load_dotenv, find_dotenv

from ..constants import DEFAULT_TIMEOUT_MS, FRAME_QUEUE_SIZE, SHUTDOWN_RECORDING_TIMEOUT_SECS

import logging
logger = logging.getLogger(__name__)


def load_env_file() -> None:
    """Load a .env file from the working directory, if one exists."""
    path = find_dotenv(filename=".env", usecwd=True)
    if path:
        load_dotenv(path, override=False)
        logger.debug(f"Loaded environment from {path}")


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    if not raw.isdigit():
        raise EnvironmentError(f"{name} must be a non-negative integer, got {raw!r}")
    return int(raw)


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise EnvironmentError(f"{name} must be a number, got {raw!r}") from None


def get_env_config() -> dict:
    """
    Read environment variables and validate them.

    Optional:   MCP_SELENIUM_LOG_LEVEL (default 'INFO')
                MCP_SELENIUM_FFMPEG_PATH
                MCP_SELENIUM_FRAME_QUEUE_SIZE (default 8)
                MCP_SELENIUM_DEFAULT_TIMEOUT_MS (element wait, default 10000)
                MCP_SELENIUM_SHUTDOWN_RECORDING_TIMEOUT (seconds, default 10)
    """
    log_level = (os.getenv("MCP_SELENIUM_LOG_LEVEL") or "INFO").strip().upper() or "INFO"
    ffmpeg_path = (os.getenv("MCP_SELENIUM_FFMPEG_PATH") or "").strip() or None

    frame_queue_size = _int_env("MCP_SELENIUM_FRAME_QUEUE_SIZE", FRAME_QUEUE_SIZE)
    if frame_queue_size < 1:
        raise EnvironmentError("MCP_SELENIUM_FRAME_QUEUE_SIZE must be at least 1.")

    return {
        "log_level": log_level,
        "ffmpeg_path": ffmpeg_path,
        "frame_queue_size": frame_queue_size,
        "default_timeout_ms": _int_env("MCP_SELENIUM_DEFAULT_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        "shutdown_recording_timeout": _float_env(
            "MCP_SELENIUM_SHUTDOWN_RECORDING_TIMEOUT", SHUTDOWN_RECORDING_TIMEOUT_SECS
        ),
    }


def resolve_ffmpeg_executable(config: Optional[dict] = None) -> str:
    """
    Resolve the ffmpeg binary.

    Order: configured path, then ffmpeg on PATH. Returns the bare name
    "ffmpeg" as fallback so the spawn error names the missing binary.
    """
    config = config or {}
    configured = config.get("ffmpeg_path")
    if configured:
        return configured

    found = shutil.which("ffmpeg")
    if found:
        return found

    return "ffmpeg"


__all__ = [
    "load_env_file",
    "get_env_config",
    "resolve_ffmpeg_executable",
]
