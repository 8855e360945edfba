# mcp_selenium/tools/__init__.py
"""
MCP tool implementations.

Every tool is an async function taking the ServerContext first. Tools
return text (or JSON text) and raise McpSeleniumError subclasses on
failure; the server's tool envelope turns those into error text.
"""

from . import (
    assertions,
    browser_management,
    debugging,
    interaction,
    navigation,
    recording,
    screenshots,
    storage,
    windows,
)

__all__ = [
    'assertions',
    'browser_management',
    'debugging',
    'interaction',
    'navigation',
    'recording',
    'screenshots',
    'storage',
    'windows',
]
