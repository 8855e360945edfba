"""
Server state container.

One ServerContext is built at startup and handed to every tool, replacing
module-level globals.

Usage:
    ctx = ServerContext.from_env()
    mcp = create_server(ctx)
"""

from dataclasses import dataclass, field
from typing import Optional

from .config.environment import get_env_config
from .recording.manager import RecordingManager
from .session.registry import SessionRegistry


@dataclass
class ServerContext:
    """
    Attributes:
        config: Environment configuration dictionary (see get_env_config).
        registry: Live browser sessions and the current-session pointer.
        recordings: Active screen recordings keyed by session id.
    """

    config: dict = field(default_factory=dict)
    registry: SessionRegistry = field(default_factory=SessionRegistry)
    recordings: Optional[RecordingManager] = None

    def __post_init__(self):
        if self.recordings is None:
            self.recordings = RecordingManager(config=self.config)

    @classmethod
    def from_env(cls) -> "ServerContext":
        return cls(config=get_env_config())


__all__ = ['ServerContext']
