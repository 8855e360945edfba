"""ffmpeg encoder process fed with a piped image stream."""

import asyncio
import collections
import contextlib
from typing import Optional

import psutil

from ..constants import STDERR_TAIL_LINES
from ..errors import EngineError

import logging
logger = logging.getLogger(__name__)


def ffmpeg_arguments(output_path: str, frame_rate: int) -> list:
    """Read concatenated images from stdin at `frame_rate` and write `output_path`."""
    return ["-y", "-f", "image2pipe", "-framerate", str(frame_rate), "-i", "-", output_path]


class FfmpegEncoder:
    """
    Wraps one running ffmpeg process.

    `write` applies back-pressure: it only returns once the pipe buffer has
    room again, so a slow encoder slows the caller down instead of frames
    being dropped.
    """

    def __init__(self, process: asyncio.subprocess.Process, output_path: str):
        self._process = process
        self.output_path = output_path
        self._stderr = collections.deque(maxlen=STDERR_TAIL_LINES)
        self._stderr_task: Optional[asyncio.Task] = None
        if process.stderr is not None:
            self._stderr_task = asyncio.create_task(self._collect_stderr(), name="ffmpeg-stderr")

    @classmethod
    async def spawn(cls, output_path: str, frame_rate: int, executable: str = "ffmpeg") -> "FfmpegEncoder":
        args = ffmpeg_arguments(output_path, frame_rate)
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise EngineError(f"Could not start encoder '{executable}': {e}") from e

        logger.info(f"Started ffmpeg pid={process.pid} writing {output_path}")
        return cls(process, output_path)

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    async def _collect_stderr(self) -> None:
        # ffmpeg logs progress continuously; an undrained pipe would stall it.
        while True:
            line = await self._process.stderr.readline()
            if not line:
                return
            self._stderr.append(line.decode("utf-8", "replace").rstrip())

    def stderr_tail(self) -> str:
        return "\n".join(self._stderr)

    async def write(self, data: bytes) -> None:
        """Write one frame; blocks while the encoder's input buffer is full."""
        self._process.stdin.write(data)
        await self._process.stdin.drain()

    async def finish(self) -> int:
        """Close stdin, wait for ffmpeg to exit and return its exit status."""
        stdin = self._process.stdin
        if stdin is not None and not stdin.is_closing():
            stdin.close()
        if stdin is not None:
            # A dead encoder surfaces through its exit status.
            with contextlib.suppress(BrokenPipeError, ConnectionResetError):
                await stdin.wait_closed()

        returncode = await self._process.wait()
        if self._stderr_task is not None:
            await self._stderr_task
        logger.info(f"ffmpeg pid={self.pid} exited with code {returncode}")
        return returncode

    async def abort(self, timeout: float = 5.0) -> Optional[int]:
        """Signal the encoder to stop and reap it from the event loop."""
        if self._process.returncode is None:
            try:
                psutil.Process(self.pid).terminate()
                try:
                    await asyncio.wait_for(self._process.wait(), timeout)
                except asyncio.TimeoutError:
                    logger.warning(f"ffmpeg pid={self.pid} ignored SIGTERM; killing")
                    psutil.Process(self.pid).kill()
            except psutil.NoSuchProcess:
                pass
        returncode = await self._process.wait()
        if self._stderr_task is not None:
            await self._stderr_task
        return returncode

    def terminate(self, timeout: float = 5.0) -> None:
        """
        Synchronously stop the encoder with SIGTERM, escalating to SIGKILL.

        ffmpeg finalizes the container on SIGTERM, so this still leaves a
        playable file in most cases.
        """
        if self._process.returncode is not None:
            return
        try:
            proc = psutil.Process(self.pid)
            proc.terminate()
            try:
                proc.wait(timeout=timeout)
            except psutil.TimeoutExpired:
                logger.warning(f"ffmpeg pid={self.pid} ignored SIGTERM; killing")
                proc.kill()
        except psutil.NoSuchProcess:
            return


__all__ = [
    "ffmpeg_arguments",
    "FfmpegEncoder",
]
