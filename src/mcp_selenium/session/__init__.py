"""Multi-session state management."""

from .registry import Session, SessionRegistry

__all__ = [
    "Session",
    "SessionRegistry",
]
