"""
DevTools screencast channel.

Opens a CDP websocket to the page target behind a Chromium WebDriver and
turns `Page.screencastFrame` events into a bounded stream of frames.
Chrome keeps at most a few unacknowledged frames in flight, so the frame is
acknowledged only once the consumer has taken it from the stream: a slow
consumer stops production instead of losing frames.
"""

import json
import base64
import asyncio
import urllib.request
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

import websockets

from ..browser.driver import debugger_address
from ..browser.engine import engine_call
from ..constants import DEVTOOLS_HTTP_TIMEOUT_SECS, FRAME_QUEUE_SIZE
from ..errors import EngineError

import logging
logger = logging.getLogger(__name__)


_END = object()


@dataclass
class Frame:
    """One decoded screencast image and the id Chrome expects back in the ack."""

    data: bytes
    ack_id: int


def _page_websocket_url(address: str, window_handle: Optional[str]) -> str:
    """Find the DevTools websocket URL of the page behind `window_handle`."""
    url = f"http://{address}/json/list"
    try:
        with urllib.request.urlopen(url, timeout=DEVTOOLS_HTTP_TIMEOUT_SECS) as resp:
            targets = json.load(resp)
    except (OSError, ValueError) as e:
        raise EngineError(f"DevTools target discovery failed at {url}: {e}") from e

    pages = [t for t in targets if t.get("type") == "page" and t.get("webSocketDebuggerUrl")]
    if not pages:
        raise EngineError(f"No page target found at {url}")

    if window_handle:
        # Chromedriver window handles carry the CDP target id.
        for target in pages:
            target_id = target.get("id") or ""
            if target_id and window_handle.upper().endswith(target_id.upper()):
                return target["webSocketDebuggerUrl"]

    return pages[0]["webSocketDebuggerUrl"]


class ScreencastChannel:
    """CDP connection to one page, producing screencast frames."""

    def __init__(self, websocket, queue_size: int = FRAME_QUEUE_SIZE):
        self._ws = websocket
        self._frames: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._pending: Dict[int, asyncio.Future] = {}
        self._next_id = 0
        self._closed = False
        self._ended = False
        self._reader = asyncio.create_task(self._read_loop(), name="screencast-reader")

    @classmethod
    async def open(cls, driver, queue_size: int = FRAME_QUEUE_SIZE) -> "ScreencastChannel":
        """Connect to the driver's current page target."""
        address = debugger_address(driver)
        if not address:
            raise EngineError("Recording requires a Chromium-based browser (chrome or edge)")

        handle = await engine_call(lambda: driver.current_window_handle)
        ws_url = await asyncio.to_thread(_page_websocket_url, address, handle)
        try:
            ws = await websockets.connect(ws_url, max_size=None)
        except (OSError, websockets.InvalidHandshake) as e:
            raise EngineError(f"Could not connect to DevTools at {ws_url}: {e}") from e

        logger.debug(f"Connected screencast channel to {ws_url}")
        return cls(ws, queue_size=queue_size)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _message_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def send(self, method: str, params: Optional[dict] = None) -> dict:
        """Send a CDP command and wait for its result."""
        if self._closed:
            raise EngineError("DevTools connection is closed")
        msg_id = self._message_id()
        future = asyncio.get_running_loop().create_future()
        self._pending[msg_id] = future
        try:
            await self._ws.send(json.dumps({"id": msg_id, "method": method, "params": params or {}}))
        except websockets.ConnectionClosed as e:
            self._pending.pop(msg_id, None)
            raise EngineError(f"DevTools connection closed while sending {method}") from e
        return await future

    async def notify(self, method: str, params: Optional[dict] = None) -> None:
        """Send a CDP command without waiting for the reply."""
        if self._closed:
            raise EngineError("DevTools connection is closed")
        try:
            await self._ws.send(json.dumps({"id": self._message_id(), "method": method, "params": params or {}}))
        except websockets.ConnectionClosed as e:
            raise EngineError(f"DevTools connection closed while sending {method}") from e

    async def start(self, image_format: str = "png") -> None:
        await self.send("Page.startScreencast", {"format": image_format})

    async def stop(self) -> None:
        await self.send("Page.stopScreencast")

    async def ack(self, frame: Frame) -> None:
        # The reply is not awaited: the reader may be parked on a full queue.
        await self.notify("Page.screencastFrameAck", {"sessionId": frame.ack_id})

    # ------------------------------------------------------------------
    # Frame stream
    # ------------------------------------------------------------------

    async def frames(self) -> AsyncIterator[Frame]:
        """Yield frames until the channel is closed."""
        while True:
            item = await self._frames.get()
            if item is _END:
                return
            yield item

    async def _read_loop(self) -> None:
        try:
            async for raw in self._ws:
                message = json.loads(raw)
                if "id" in message:
                    future = self._pending.pop(message["id"], None)
                    if future is None or future.done():
                        continue
                    if "error" in message:
                        error = message["error"].get("message", "unknown error")
                        future.set_exception(EngineError(f"DevTools error: {error}"))
                    else:
                        future.set_result(message.get("result", {}))
                elif message.get("method") == "Page.screencastFrame":
                    params = message.get("params") or {}
                    frame = Frame(data=base64.b64decode(params["data"]), ack_id=params["sessionId"])
                    await self._frames.put(frame)
        except websockets.ConnectionClosed as e:
            logger.debug(f"Screencast connection closed: {e}")
        finally:
            self._closed = True
            for future in self._pending.values():
                if not future.done():
                    future.set_exception(EngineError("DevTools connection closed"))
            self._pending.clear()

    async def close(self) -> None:
        """
        Close the connection and end the frame stream.

        Frames already queued are still delivered before the stream ends.
        """
        if self._ended:
            return
        self._ended = True
        self._closed = True
        await self._ws.close()
        try:
            await self._reader
        except Exception as e:
            logger.warning(f"Screencast reader failed: {e!r}")
        await self._frames.put(_END)

    async def abort(self) -> None:
        """Drop the connection without delivering queued frames."""
        self._closed = True
        self._reader.cancel()
        try:
            await self._reader
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Screencast reader failed: {e!r}")
        await self._ws.close()


__all__ = [
    "Frame",
    "ScreencastChannel",
]
