"""DevTools screencast channel and ffmpeg encoder plumbing."""

import io
import sys
import json
import base64
import asyncio
import pytest

from mcp_selenium.errors import EngineError
from mcp_selenium.recording import FfmpegEncoder, ScreencastChannel
from mcp_selenium.recording import screencast
from mcp_selenium.recording.encoder import ffmpeg_arguments

from _utils import FakeDriver

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


class FakeWebSocket:
    """Replies to every command and lets the test inject events."""

    def __init__(self, errors=None):
        self.incoming = asyncio.Queue()
        self.sent = []
        self.errors = errors or {}
        self.closed = False

    async def send(self, raw):
        message = json.loads(raw)
        self.sent.append(message)
        if message["method"] in self.errors:
            reply = {"id": message["id"], "error": {"message": self.errors[message["method"]]}}
        else:
            reply = {"id": message["id"], "result": {}}
        self.incoming.put_nowait(json.dumps(reply))

    def push_frame(self, data: bytes, session_id: int):
        self.incoming.put_nowait(json.dumps({
            "method": "Page.screencastFrame",
            "params": {"data": base64.b64encode(data).decode(), "sessionId": session_id, "metadata": {}},
        }))

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self.incoming.get()
        if item is None:
            raise StopAsyncIteration
        return item

    async def close(self):
        self.closed = True
        self.incoming.put_nowait(None)


class TestScreencastChannel:

    def test_frames_are_decoded_and_acked(self, event_loop):
        async def scenario():
            ws = FakeWebSocket()
            channel = ScreencastChannel(ws, queue_size=4)
            await channel.start()
            ws.push_frame(b"one", 1)
            ws.push_frame(b"two", 2)

            received = []
            async for frame in channel.frames():
                received.append(frame.data)
                await channel.ack(frame)
                if len(received) == 2:
                    await channel.stop()
                    await channel.close()
            return ws, received

        ws, received = event_loop.run_until_complete(scenario())

        assert received == [b"one", b"two"]
        methods = [m["method"] for m in ws.sent]
        assert methods == [
            "Page.startScreencast",
            "Page.screencastFrameAck",
            "Page.screencastFrameAck",
            "Page.stopScreencast",
        ]
        assert ws.sent[0]["params"] == {"format": "png"}
        assert [m["params"] for m in ws.sent[1:3]] == [{"sessionId": 1}, {"sessionId": 2}]
        assert ws.closed

    def test_queued_frames_survive_close(self, event_loop):
        async def scenario():
            ws = FakeWebSocket()
            channel = ScreencastChannel(ws, queue_size=4)
            ws.push_frame(b"late", 7)
            await asyncio.sleep(0)
            await channel.close()
            return [frame.ack_id async for frame in channel.frames()]

        assert event_loop.run_until_complete(scenario()) == [7]

    def test_command_error(self, event_loop):
        async def scenario():
            ws = FakeWebSocket(errors={"Page.startScreencast": "Not allowed"})
            channel = ScreencastChannel(ws)
            try:
                await channel.start()
            finally:
                await channel.close()

        with pytest.raises(EngineError, match="Not allowed"):
            event_loop.run_until_complete(scenario())

    def test_dead_reader_fails_commands_fast(self, event_loop):
        async def scenario():
            ws = FakeWebSocket()
            channel = ScreencastChannel(ws, queue_size=4)
            ws.incoming.put_nowait(json.dumps({
                "method": "Page.screencastFrame",
                "params": {"sessionId": 3, "metadata": {}},
            }))
            for _ in range(3):
                await asyncio.sleep(0)

            with pytest.raises(EngineError, match="closed"):
                await asyncio.wait_for(channel.stop(), timeout=1)
            with pytest.raises(EngineError, match="closed"):
                await channel.ack(screencast.Frame(data=b"", ack_id=3))

            await channel.close()
            return [frame async for frame in channel.frames()]

        assert event_loop.run_until_complete(scenario()) == []

    def test_open_requires_chromium(self, event_loop):
        with pytest.raises(EngineError, match="Chromium"):
            event_loop.run_until_complete(ScreencastChannel.open(FakeDriver()))


class TestTargetDiscovery:

    TARGETS = [
        {"id": "AAA", "type": "page", "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/AAA"},
        {"id": "BBB", "type": "page", "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/BBB"},
        {"id": "SW", "type": "service_worker", "webSocketDebuggerUrl": "ws://localhost:9222/devtools/sw"},
    ]

    def _serve(self, monkeypatch, targets):
        def fake_urlopen(url, timeout=None):
            assert url == "http://localhost:9222/json/list"
            return io.BytesIO(json.dumps(targets).encode())

        monkeypatch.setattr(screencast.urllib.request, "urlopen", fake_urlopen)

    def test_matches_window_handle(self, monkeypatch):
        self._serve(monkeypatch, self.TARGETS)
        url = screencast._page_websocket_url("localhost:9222", "CDwindow-bbb")
        assert url.endswith("/page/BBB")

    def test_falls_back_to_first_page(self, monkeypatch):
        self._serve(monkeypatch, self.TARGETS)
        assert screencast._page_websocket_url("localhost:9222", "unknown").endswith("/page/AAA")

    def test_no_pages(self, monkeypatch):
        self._serve(monkeypatch, self.TARGETS[2:])
        with pytest.raises(EngineError):
            screencast._page_websocket_url("localhost:9222", None)

    def test_unreachable(self, monkeypatch):
        def refuse(url, timeout=None):
            raise OSError("connection refused")

        monkeypatch.setattr(screencast.urllib.request, "urlopen", refuse)
        with pytest.raises(EngineError, match="connection refused"):
            screencast._page_websocket_url("localhost:9222", None)


class TestEncoder:

    def test_arguments(self):
        assert ffmpeg_arguments("/tmp/out.mp4", 24) == [
            "-y", "-f", "image2pipe", "-framerate", "24", "-i", "-", "/tmp/out.mp4",
        ]

    def test_missing_binary(self, event_loop, tmp_path):
        with pytest.raises(EngineError, match="Could not start encoder"):
            event_loop.run_until_complete(
                FfmpegEncoder.spawn(str(tmp_path / "out.mp4"), 30, executable=str(tmp_path / "no-ffmpeg"))
            )

    def test_nonzero_exit_keeps_stderr(self, event_loop, tmp_path):
        # The Python interpreter rejects ffmpeg's flags and exits non-zero.
        async def scenario():
            encoder = await FfmpegEncoder.spawn(str(tmp_path / "out.mp4"), 30, executable=sys.executable)
            returncode = await encoder.finish()
            return encoder, returncode

        encoder, returncode = event_loop.run_until_complete(scenario())

        assert returncode != 0
        assert encoder.stderr_tail()
