"""Browser engine launch and call plumbing."""

from .driver import build_options, create_webdriver, debugger_address
from .engine import engine_call

__all__ = [
    'build_options',
    'create_webdriver',
    'debugger_address',
    'engine_call',
]
