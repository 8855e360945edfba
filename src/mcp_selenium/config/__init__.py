"""Configuration management for the Selenium MCP server."""

from .environment import (
    load_env_file,
    get_env_config,
    resolve_ffmpeg_executable,
)

from .options import BrowserOptions

__all__ = [
    "load_env_file",
    "get_env_config",
    "resolve_ffmpeg_executable",
    "BrowserOptions",
]
