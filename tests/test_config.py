"""Environment config, browser options and driver option building."""

import os
import pytest

from mcp_selenium.browser import build_options, debugger_address
from mcp_selenium.config import BrowserOptions, get_env_config, resolve_ffmpeg_executable
from mcp_selenium.config import environment, load_env_file
from mcp_selenium.context import ServerContext
from mcp_selenium.errors import InvalidOptions, UnsupportedBrowser
from mcp_selenium.tools.lookup import wait_timeout

from _utils import FakeDriver


ENV_VARS = (
    "MCP_SELENIUM_LOG_LEVEL",
    "MCP_SELENIUM_FFMPEG_PATH",
    "MCP_SELENIUM_FRAME_QUEUE_SIZE",
    "MCP_SELENIUM_DEFAULT_TIMEOUT_MS",
    "MCP_SELENIUM_SHUTDOWN_RECORDING_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEnvConfig:

    def test_defaults(self, clean_env):
        config = get_env_config()
        assert config == {
            "log_level": "INFO",
            "ffmpeg_path": None,
            "frame_queue_size": 8,
            "default_timeout_ms": 10000,
            "shutdown_recording_timeout": 10.0,
        }

    def test_overrides(self, clean_env):
        clean_env.setenv("MCP_SELENIUM_LOG_LEVEL", "debug")
        clean_env.setenv("MCP_SELENIUM_FFMPEG_PATH", "/usr/local/bin/ffmpeg")
        clean_env.setenv("MCP_SELENIUM_FRAME_QUEUE_SIZE", "2")
        clean_env.setenv("MCP_SELENIUM_DEFAULT_TIMEOUT_MS", "2500")
        clean_env.setenv("MCP_SELENIUM_SHUTDOWN_RECORDING_TIMEOUT", "2.5")

        config = get_env_config()
        assert config["log_level"] == "DEBUG"
        assert config["ffmpeg_path"] == "/usr/local/bin/ffmpeg"
        assert config["frame_queue_size"] == 2
        assert config["default_timeout_ms"] == 2500
        assert config["shutdown_recording_timeout"] == 2.5

    @pytest.mark.parametrize("raw", ["0", "-1", "many"])
    def test_invalid_queue_size(self, clean_env, raw):
        clean_env.setenv("MCP_SELENIUM_FRAME_QUEUE_SIZE", raw)
        with pytest.raises(EnvironmentError):
            get_env_config()

    def test_invalid_default_wait(self, clean_env):
        clean_env.setenv("MCP_SELENIUM_DEFAULT_TIMEOUT_MS", "2.5s")
        with pytest.raises(EnvironmentError):
            get_env_config()

    def test_default_wait_from_dotenv(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("MCP_SELENIUM_DEFAULT_TIMEOUT_MS=2500\n")
        clean_env.chdir(tmp_path)
        try:
            load_env_file()
            ctx = ServerContext(config=get_env_config())
        finally:
            os.environ.pop("MCP_SELENIUM_DEFAULT_TIMEOUT_MS", None)

        assert wait_timeout(ctx, None) == 2500
        assert wait_timeout(ctx, 300) == 300

    def test_invalid_timeout(self, clean_env):
        clean_env.setenv("MCP_SELENIUM_SHUTDOWN_RECORDING_TIMEOUT", "soon")
        with pytest.raises(EnvironmentError):
            get_env_config()


class TestFfmpegLookup:

    def test_configured_path_wins(self, monkeypatch):
        monkeypatch.setattr(environment.shutil, "which", lambda name: "/usr/bin/ffmpeg")
        assert resolve_ffmpeg_executable({"ffmpeg_path": "/opt/ffmpeg"}) == "/opt/ffmpeg"

    def test_path_lookup(self, monkeypatch):
        monkeypatch.setattr(environment.shutil, "which", lambda name: "/usr/bin/ffmpeg")
        assert resolve_ffmpeg_executable({"ffmpeg_path": None}) == "/usr/bin/ffmpeg"

    def test_bare_name_fallback(self, monkeypatch):
        monkeypatch.setattr(environment.shutil, "which", lambda name: None)
        assert resolve_ffmpeg_executable() == "ffmpeg"


class TestBrowserOptions:

    def test_none_gives_defaults(self):
        assert BrowserOptions.from_dict(None) == BrowserOptions(headless=False, arguments=[])

    def test_valid(self):
        opts = BrowserOptions.from_dict({"headless": True, "arguments": ["--window-size=800,600"]})
        assert opts.headless is True
        assert opts.arguments == ["--window-size=800,600"]

    @pytest.mark.parametrize(
        "raw",
        [
            "headless",
            {"headless": "yes"},
            {"arguments": "--foo"},
            {"arguments": ["--ok", 3]},
            {"incognito": True},
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(InvalidOptions):
            BrowserOptions.from_dict(raw)


class TestBuildOptions:

    def test_chrome_headless_first(self):
        opts = build_options("chrome", BrowserOptions(headless=True, arguments=["--no-sandbox", "--disable-gpu"]))
        assert opts.arguments == ["--headless=new", "--no-sandbox", "--disable-gpu"]
        assert opts.to_capabilities()["goog:loggingPrefs"] == {"browser": "ALL", "performance": "ALL"}

    def test_firefox_headless_flag(self):
        opts = build_options("firefox", BrowserOptions(headless=True))
        assert opts.arguments == ["--headless"]

    def test_edge_headless_flag(self):
        opts = build_options("edge", BrowserOptions(headless=True))
        assert opts.arguments == ["--headless=new"]
        assert "ms:loggingPrefs" in opts.to_capabilities()

    def test_no_headless_by_default(self):
        assert build_options("chrome").arguments == []

    def test_unknown_browser(self):
        with pytest.raises(UnsupportedBrowser):
            build_options("safari")


def test_debugger_address():
    chrome = FakeDriver(capabilities={"goog:chromeOptions": {"debuggerAddress": "localhost:9222"}})
    edge = FakeDriver(capabilities={"ms:edgeOptions": {"debuggerAddress": "localhost:9333"}})
    firefox = FakeDriver(capabilities={"moz:firefoxOptions": {}})

    assert debugger_address(chrome) == "localhost:9222"
    assert debugger_address(edge) == "localhost:9333"
    assert debugger_address(firefox) is None
