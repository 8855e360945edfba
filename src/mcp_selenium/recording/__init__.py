"""Screen recording: DevTools screencast frames piped into ffmpeg."""

from .encoder import FfmpegEncoder
from .manager import Recording, RecordingManager
from .screencast import Frame, ScreencastChannel

__all__ = [
    "FfmpegEncoder",
    "Frame",
    "Recording",
    "RecordingManager",
    "ScreencastChannel",
]
