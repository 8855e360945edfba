"""
Recording manager.

At most one recording per session. A recording couples a screencast
channel (frame producer) with an ffmpeg encoder (frame consumer) through a
pump task:

    reader task --(bounded queue)--> pump task --(stdin, drain)--> ffmpeg
                                        |
                                        +--> Page.screencastFrameAck

The lock only guards the map of recordings; no I/O happens under it.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..config.environment import resolve_ffmpeg_executable
from ..constants import DEFAULT_FRAME_RATE, FRAME_QUEUE_SIZE
from ..errors import AlreadyRecording, EncodingFailure, EngineError, NotRecording
from .encoder import FfmpegEncoder
from .screencast import ScreencastChannel

import logging
logger = logging.getLogger(__name__)


STARTING = "starting"
RECORDING = "recording"
STOPPING = "stopping"


@dataclass
class Recording:
    session_id: str
    output_path: str
    frame_rate: int
    state: str = STARTING
    channel: Any = None
    encoder: Any = None
    pump: Optional[asyncio.Task] = None
    frames_written: int = 0
    write_error: Optional[BaseException] = None


class RecordingManager:
    """Owns the active recordings, keyed by session id."""

    def __init__(
        self,
        channel_factory: Callable = ScreencastChannel.open,
        encoder_factory: Callable = FfmpegEncoder.spawn,
        config: Optional[dict] = None,
    ):
        self._channel_factory = channel_factory
        self._encoder_factory = encoder_factory
        self._config = config or {}
        self._recordings: Dict[str, Recording] = {}
        self._lock = asyncio.Lock()

    def is_recording(self, session_id: str) -> bool:
        return session_id in self._recordings

    def active_sessions(self) -> List[str]:
        return list(self._recordings)

    def get(self, session_id: str) -> Recording:
        recording = self._recordings.get(session_id)
        if recording is None:
            raise NotRecording(session_id)
        return recording

    async def rename(self, old_id: str, new_id: str) -> None:
        """
        Follow a session rename; no-op when the session is not recording.

        The entry moves in any state. A start or stop still in flight
        removes it by identity, so it ends up freed under the new id.
        """
        async with self._lock:
            recording = self._recordings.pop(old_id, None)
            if recording is None:
                return
            recording.session_id = new_id
            self._recordings[new_id] = recording

    async def start(
        self,
        session_id: str,
        driver,
        output_path: str,
        frame_rate: int = DEFAULT_FRAME_RATE,
    ) -> Recording:
        """
        Begin recording the current page of `driver` into `output_path`.

        Raises:
            AlreadyRecording: the session has a recording (in any state).
            EngineError: the capture channel or the encoder could not start.
        """
        async with self._lock:
            if session_id in self._recordings:
                raise AlreadyRecording(session_id)
            recording = Recording(session_id=session_id, output_path=output_path, frame_rate=frame_rate)
            self._recordings[session_id] = recording

        try:
            queue_size = self._config.get("frame_queue_size", FRAME_QUEUE_SIZE)
            recording.channel = await self._channel_factory(driver, queue_size=queue_size)
            recording.encoder = await self._encoder_factory(
                output_path,
                frame_rate,
                executable=resolve_ffmpeg_executable(self._config),
            )
            recording.pump = asyncio.create_task(
                self._pump(recording), name=f"recording-pump-{session_id}"
            )
            await recording.channel.start()
        except BaseException:
            await self._abort(recording)
            await self._discard(recording)
            raise

        recording.state = RECORDING
        logger.info(f"Recording session {session_id} to {output_path} at {frame_rate} fps")
        return recording

    async def _discard(self, recording: Recording) -> None:
        # Keyed by whatever id the recording carries now; a rename may have
        # moved it since the caller looked it up.
        async with self._lock:
            for key, entry in list(self._recordings.items()):
                if entry is recording:
                    del self._recordings[key]

    async def _pump(self, recording: Recording) -> None:
        # Ack only after the encoder accepted the frame: that is what keeps
        # the browser from producing faster than ffmpeg consumes.
        async for frame in recording.channel.frames():
            if recording.write_error is None:
                try:
                    await recording.encoder.write(frame.data)
                    recording.frames_written += 1
                except (BrokenPipeError, ConnectionResetError) as e:
                    logger.warning(f"ffmpeg for session {recording.session_id} stopped accepting frames: {e}")
                    recording.write_error = e
            try:
                await recording.channel.ack(frame)
            except EngineError:
                # The connection is going away; the stream ends on its own.
                pass

    async def _abort(self, recording: Recording) -> None:
        if recording.pump is not None:
            recording.pump.cancel()
            try:
                await recording.pump
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Pump for session {recording.session_id} ended with {e!r}")
        if recording.channel is not None:
            try:
                await recording.channel.abort()
            except Exception as e:
                logger.debug(f"Closing capture channel failed: {e!r}")
        if recording.encoder is not None:
            await recording.encoder.abort()

    async def stop(self, session_id: str) -> Recording:
        """
        Stop the session's recording and wait for ffmpeg to finalize the file.

        The slot is freed whether or not the encoder succeeds.

        Raises:
            NotRecording: no recording, or one that is still starting or already stopping.
            EncodingFailure: ffmpeg exited with a non-zero status.
        """
        async with self._lock:
            recording = self._recordings.get(session_id)
            if recording is None or recording.state != RECORDING:
                raise NotRecording(session_id)
            recording.state = STOPPING

        try:
            try:
                await recording.channel.stop()
            except EngineError as e:
                logger.warning(f"Stopping screencast for session {session_id} failed: {e}")
            await recording.channel.close()
            await recording.pump
            returncode = await recording.encoder.finish()
        except BaseException:
            await self._abort(recording)
            raise
        finally:
            await self._discard(recording)

        if returncode != 0:
            tail = recording.encoder.stderr_tail()
            logger.error(f"ffmpeg for session {recording.session_id} exited with code {returncode}")
            raise EncodingFailure(returncode, tail)

        logger.info(
            f"Recording for session {recording.session_id} saved to {recording.output_path} "
            f"({recording.frames_written} frames)"
        )
        return recording

    async def stop_all(self, timeout: Optional[float] = None) -> Dict[str, BaseException]:
        """
        Stop every recording, each bounded by `timeout` seconds.

        A recording that does not finish in time has its encoder terminated.
        Returns the failures keyed by session id.
        """
        failures: Dict[str, BaseException] = {}
        for session_id in self.active_sessions():
            recording = self._recordings.get(session_id)
            if recording is None:
                continue
            try:
                await asyncio.wait_for(self.stop(session_id), timeout)
            except asyncio.TimeoutError as e:
                logger.error(f"Recording for session {session_id} did not finish within {timeout}s")
                failures[session_id] = e
            except NotRecording as e:
                # Still starting or already stopping elsewhere: abort it.
                await self._abort(recording)
                await self._discard(recording)
                failures[session_id] = e
            except Exception as e:
                logger.error(f"Stopping recording for session {session_id} failed: {e}")
                failures[session_id] = e
        return failures

    def terminate_all(self) -> List[str]:
        """
        Synchronously terminate every encoder and forget all recordings.

        Used from signal handlers, where the event loop cannot be awaited.
        """
        recordings = list(self._recordings.values())
        self._recordings = {}
        for recording in recordings:
            if recording.encoder is None:
                continue
            try:
                recording.encoder.terminate()
            except Exception as e:
                logger.error(f"Terminating ffmpeg for session {recording.session_id} failed: {e}")
        return [r.session_id for r in recordings]


__all__ = [
    "Recording",
    "RecordingManager",
]
