"""Run blocking Selenium calls off the event loop and translate their errors."""

import asyncio
from typing import Any, Callable

from selenium.common.exceptions import TimeoutException, WebDriverException

from ..errors import ElementTimeout, EngineError


def _message(exc: WebDriverException) -> str:
    msg = getattr(exc, "msg", None) or str(exc) or exc.__class__.__name__
    return msg.strip()


async def engine_call(fn: Callable[..., Any], *args, **kwargs) -> Any:
    """
    Await `fn(*args, **kwargs)` in a worker thread.

    TimeoutException becomes ElementTimeout and any other
    WebDriverException becomes EngineError. Everything else propagates as is.
    """
    try:
        return await asyncio.to_thread(fn, *args, **kwargs)
    except TimeoutException as e:
        raise ElementTimeout(_message(e)) from e
    except WebDriverException as e:
        raise EngineError(_message(e)) from e


__all__ = ['engine_call']
