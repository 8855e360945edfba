"""SessionRegistry lifecycle and invariants."""

import asyncio
import pytest

from selenium.common.exceptions import WebDriverException

from mcp_selenium.config import BrowserOptions
from mcp_selenium.errors import (
    EngineError,
    LaunchFailure,
    NoActiveSession,
    SessionAlreadyExists,
    SessionNotFound,
    UnsupportedBrowser,
)
from mcp_selenium.session import SessionRegistry

from _utils import DriverFactory, FakeDriver

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


class Clock:
    def __init__(self, start=1700000000000):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def factory():
    return DriverFactory()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def registry(factory, clock):
    return SessionRegistry(driver_factory=factory, clock=clock)


def assert_pointer_valid(registry):
    assert registry.current_id is None or registry.current_id in registry


class TestCreate:

    def test_create_registers_and_sets_current(self, event_loop, registry, factory):
        session = event_loop.run_until_complete(registry.create("chrome", BrowserOptions(headless=True)))

        assert session.id == "chrome_1700000000000"
        assert registry.current_id == session.id
        assert registry.list_ids() == [session.id]
        assert registry.current_driver() is factory.launched[0][2]
        assert factory.launched[0][1] == BrowserOptions(headless=True)

    def test_same_millisecond_ids_are_suffixed(self, event_loop, registry, clock):
        a = event_loop.run_until_complete(registry.create("chrome"))
        b = event_loop.run_until_complete(registry.create("chrome"))
        c = event_loop.run_until_complete(registry.create("chrome"))
        d = event_loop.run_until_complete(registry.create("firefox"))

        assert a.id == "chrome_1700000000000"
        assert b.id == "chrome_1700000000000_2"
        assert c.id == "chrome_1700000000000_3"
        assert d.id == "firefox_1700000000000"
        assert registry.current_id == d.id

    def test_unsupported_browser(self, event_loop, registry, factory):
        with pytest.raises(UnsupportedBrowser):
            event_loop.run_until_complete(registry.create("safari"))
        assert factory.launched == []
        assert len(registry) == 0

    def test_launch_failure_leaves_registry_unchanged(self, event_loop, clock):
        good = SessionRegistry(driver_factory=DriverFactory(), clock=clock)
        first = event_loop.run_until_complete(good.create("chrome"))

        good._driver_factory = DriverFactory(error=WebDriverException("chromedriver not found"))
        with pytest.raises(LaunchFailure) as exc:
            event_loop.run_until_complete(good.create("chrome"))

        assert "chromedriver not found" in str(exc.value)
        assert good.list_ids() == [first.id]
        assert good.current_id == first.id


class TestCurrent:

    def test_no_session(self, registry):
        with pytest.raises(NoActiveSession) as exc:
            registry.current()
        assert str(exc.value) == "No active browser session"

    def test_switch(self, event_loop, registry, clock):
        a = event_loop.run_until_complete(registry.create("chrome"))
        clock.now += 1
        b = event_loop.run_until_complete(registry.create("firefox"))
        assert registry.current_id == b.id

        event_loop.run_until_complete(registry.switch(a.id))
        assert registry.current_id == a.id

    def test_switch_unknown_keeps_pointer(self, event_loop, registry):
        a = event_loop.run_until_complete(registry.create("chrome"))
        with pytest.raises(SessionNotFound) as exc:
            event_loop.run_until_complete(registry.switch("nope"))
        assert str(exc.value) == "Session nope not found"
        assert registry.current_id == a.id


class TestRename:

    def test_rename_current_moves_pointer(self, event_loop, registry):
        a = event_loop.run_until_complete(registry.create("chrome"))
        event_loop.run_until_complete(registry.rename(a.id, "main"))

        assert registry.current_id == "main"
        assert registry.list_ids() == ["main"]
        assert registry.get("main").id == "main"
        with pytest.raises(SessionNotFound):
            registry.get(a.id)

    def test_rename_keeps_position(self, event_loop, registry, clock):
        ids = []
        for browser in ("chrome", "firefox", "edge"):
            ids.append(event_loop.run_until_complete(registry.create(browser)).id)
            clock.now += 1

        event_loop.run_until_complete(registry.rename(ids[1], "middle"))
        assert registry.list_ids() == [ids[0], "middle", ids[2]]
        assert registry.current_id == ids[2]

    def test_rename_to_existing_fails(self, event_loop, registry, clock):
        a = event_loop.run_until_complete(registry.create("chrome"))
        clock.now += 1
        b = event_loop.run_until_complete(registry.create("chrome"))

        with pytest.raises(SessionAlreadyExists):
            event_loop.run_until_complete(registry.rename(a.id, b.id))
        assert registry.list_ids() == [a.id, b.id]

    def test_rename_to_itself_is_rejected(self, event_loop, registry):
        a = event_loop.run_until_complete(registry.create("chrome"))
        with pytest.raises(SessionAlreadyExists):
            event_loop.run_until_complete(registry.rename(a.id, a.id))
        assert registry.list_ids() == [a.id]

    def test_rename_unknown(self, event_loop, registry):
        with pytest.raises(SessionNotFound):
            event_loop.run_until_complete(registry.rename("ghost", "x"))


class TestClose:

    def test_close_current_clears_pointer(self, event_loop, registry):
        a = event_loop.run_until_complete(registry.create("chrome"))
        closed = event_loop.run_until_complete(registry.close())

        assert closed.id == a.id
        assert closed.driver.quit_calls == 1
        assert registry.current_id is None
        assert len(registry) == 0

    def test_close_other_keeps_pointer(self, event_loop, registry, clock):
        a = event_loop.run_until_complete(registry.create("chrome"))
        clock.now += 1
        b = event_loop.run_until_complete(registry.create("chrome"))

        event_loop.run_until_complete(registry.close(a.id))
        assert registry.current_id == b.id
        assert registry.list_ids() == [b.id]

    def test_close_without_current(self, event_loop, registry):
        with pytest.raises(NoActiveSession):
            event_loop.run_until_complete(registry.close())

    def test_close_unknown(self, event_loop, registry):
        with pytest.raises(SessionNotFound):
            event_loop.run_until_complete(registry.close("ghost"))

    def test_quit_error_after_removal(self, event_loop, clock):
        driver = FakeDriver(quit_error=WebDriverException("browser crashed"))
        registry = SessionRegistry(driver_factory=lambda browser, options: driver, clock=clock)
        a = event_loop.run_until_complete(registry.create("chrome"))

        with pytest.raises(EngineError) as exc:
            event_loop.run_until_complete(registry.close())

        assert "browser crashed" in str(exc.value)
        assert a.id not in registry
        assert registry.current_id is None
        assert driver.quit_calls == 1

    def test_drain_empties_without_quitting(self, event_loop, registry, clock):
        a = event_loop.run_until_complete(registry.create("chrome"))
        clock.now += 1
        b = event_loop.run_until_complete(registry.create("firefox"))

        drained = registry.drain()

        assert [s.id for s in drained] == [a.id, b.id]
        assert all(s.driver.quit_calls == 0 for s in drained)
        assert len(registry) == 0
        assert registry.current_id is None


def test_end_to_end_scenario(event_loop, registry, clock):
    """start, start, switch, rename, close and close again."""
    run = event_loop.run_until_complete

    a = run(registry.create("chrome"))
    clock.now += 5
    b = run(registry.create("firefox"))
    assert registry.list_ids() == [a.id, b.id]
    assert registry.current_id == b.id

    run(registry.switch(a.id))
    run(registry.rename(a.id, "primary"))
    assert registry.current_id == "primary"
    assert registry.list_ids() == ["primary", b.id]

    run(registry.close())
    assert registry.current_id is None
    assert registry.list_ids() == [b.id]
    assert_pointer_valid(registry)

    with pytest.raises(NoActiveSession):
        run(registry.close())

    run(registry.switch(b.id))
    run(registry.close(b.id))
    assert len(registry) == 0
    assert_pointer_valid(registry)


def test_concurrent_creates_get_distinct_ids(event_loop, registry):
    async def scenario():
        return await asyncio.gather(*(registry.create("chrome") for _ in range(5)))

    sessions = event_loop.run_until_complete(scenario())
    ids = [s.id for s in sessions]
    assert len(set(ids)) == 5
    assert registry.current_id in ids
    assert_pointer_valid(registry)
