# tests/tests_decorators/test_envelope.py
import json
import asyncio
import logging
import pytest

from mcp_selenium.decorators import tool_envelope
from mcp_selenium.errors import ElementTimeout, NoActiveSession, SessionNotFound

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


def test_success_text_passes_through(event_loop):
    @tool_envelope("Error navigating")
    async def navigate(url: str) -> str:
        return f"Navigated to {url}"

    assert event_loop.run_until_complete(navigate("https://example.com")) == "Navigated to https://example.com"


def test_known_error_rendered_with_prefix(event_loop):
    @tool_envelope("Error navigating")
    async def navigate(url: str) -> str:
        raise NoActiveSession()

    assert event_loop.run_until_complete(navigate("x")) == "Error navigating: No active browser session"


def test_error_message_kept_verbatim(event_loop):
    @tool_envelope("Error switching session")
    async def switch_session(session_id: str) -> str:
        raise SessionNotFound(session_id)

    assert event_loop.run_until_complete(switch_session("s9")) == "Error switching session: Session s9 not found"


def test_unexpected_error_logged_and_rendered(event_loop, caplog):
    @tool_envelope("Error taking screenshot")
    async def take_screenshot() -> str:
        raise OSError("disk full")

    with caplog.at_level(logging.ERROR, logger="mcp_selenium.decorators.envelope"):
        result = event_loop.run_until_complete(take_screenshot())

    assert result == "Error taking screenshot: disk full"
    assert any("take_screenshot" in r.getMessage() for r in caplog.records)
    assert caplog.records[-1].exc_info is not None


def test_cancellation_propagates(event_loop):
    @tool_envelope("Error finding element")
    async def find_element() -> str:
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        event_loop.run_until_complete(find_element())


def test_non_string_results_are_json(event_loop):
    @tool_envelope("Error listing sessions")
    async def list_sessions():
        return ["a", 1]

    @tool_envelope("Error getting element rect")
    async def get_element_rect():
        return {"x": 1, "y": 2}

    assert json.loads(event_loop.run_until_complete(list_sessions())) == ["a", 1]
    assert json.loads(event_loop.run_until_complete(get_element_rect())) == {"x": 1, "y": 2}


def test_list_of_strings_kept_as_blocks(event_loop):
    @tool_envelope("Error taking screenshot")
    async def take_screenshot():
        return ["Screenshot captured as base64:", "iVBORw0KGgo="]

    assert event_loop.run_until_complete(take_screenshot()) == ["Screenshot captured as base64:", "iVBORw0KGgo="]


def test_none_becomes_empty_string(event_loop):
    @tool_envelope("Error")
    async def nothing():
        return None

    assert event_loop.run_until_complete(nothing()) == ""


def test_wrapper_keeps_signature_metadata():
    @tool_envelope("Error finding element")
    async def find_element(by: str, value: str, timeout: int = 10000) -> str:
        """Finds an element."""
        return "Element found"

    assert find_element.__name__ == "find_element"
    assert find_element.__doc__ == "Finds an element."
    assert find_element.__wrapped__.__annotations__["by"] is str


def test_timeout_message(event_loop):
    @tool_envelope("Error waiting for element visibility")
    async def wait_for_element_visible() -> str:
        raise ElementTimeout("Element did not become visible within 0ms")

    assert (
        event_loop.run_until_complete(wait_for_element_visible())
        == "Error waiting for element visibility: Element did not become visible within 0ms"
    )
