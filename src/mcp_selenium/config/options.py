"""Browser launch options, validated once at the tool boundary."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import InvalidOptions


@dataclass(frozen=True)
class BrowserOptions:
    """
    Launch configuration for one browser session.

    Attributes:
        headless: Add the engine's headless flag (default False).
        arguments: Extra raw command-line flags, applied in the given order.
    """

    headless: bool = False
    arguments: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "BrowserOptions":
        """Build options from the tool's ``options`` argument."""
        if raw is None:
            return cls()
        if isinstance(raw, BrowserOptions):
            return raw
        if not isinstance(raw, dict):
            raise InvalidOptions(f"options must be an object, got {type(raw).__name__}")

        unknown = sorted(set(raw) - {"headless", "arguments"})
        if unknown:
            raise InvalidOptions(f"Unknown browser option(s): {', '.join(unknown)}")

        headless = raw.get("headless")
        if headless is None:
            headless = False
        if not isinstance(headless, bool):
            raise InvalidOptions("options.headless must be a boolean")

        arguments = raw.get("arguments")
        if arguments is None:
            arguments = []
        if not isinstance(arguments, (list, tuple)) or not all(isinstance(a, str) for a in arguments):
            raise InvalidOptions("options.arguments must be a list of strings")

        return cls(headless=headless, arguments=list(arguments))


__all__ = ["BrowserOptions"]
