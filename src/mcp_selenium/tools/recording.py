"""Screen recording tool implementations."""

from ..constants import DEFAULT_FRAME_RATE
from ..context import ServerContext
from ..errors import InvalidOptions, NotRecording


async def start_recording(ctx: ServerContext, output_path: str, frame_rate: int = DEFAULT_FRAME_RATE) -> str:
    """Start recording the current session into `output_path` (format from the extension)."""
    session = ctx.registry.current()
    if frame_rate <= 0:
        raise InvalidOptions(f"frame_rate must be positive, got {frame_rate}")
    await ctx.recordings.start(session.id, session.driver, output_path, frame_rate)
    return f"Recording started: {output_path}"


async def stop_recording(ctx: ServerContext) -> str:
    session_id = ctx.registry.current_id
    if session_id is None:
        raise NotRecording()
    recording = await ctx.recordings.stop(session_id)
    return f"Recording saved to {recording.output_path}"


__all__ = [
    'start_recording',
    'stop_recording',
]
