"""Keyboard key name resolution."""

from selenium.webdriver.common.keys import Keys


# Names are normalized: upper-cased with "-", " " and "_" removed,
# so "Enter", "ARROW_DOWN" and "ArrowDown" all resolve.
_KEY_MAPPING = {
    "ENTER": Keys.ENTER,
    "RETURN": Keys.RETURN,
    "TAB": Keys.TAB,
    "ESCAPE": Keys.ESCAPE,
    "ESC": Keys.ESCAPE,
    "SPACE": Keys.SPACE,
    "BACKSPACE": Keys.BACKSPACE,
    "DELETE": Keys.DELETE,
    "INSERT": Keys.INSERT,
    "ARROWUP": Keys.ARROW_UP,
    "ARROWDOWN": Keys.ARROW_DOWN,
    "ARROWLEFT": Keys.ARROW_LEFT,
    "ARROWRIGHT": Keys.ARROW_RIGHT,
    "PAGEUP": Keys.PAGE_UP,
    "PAGEDOWN": Keys.PAGE_DOWN,
    "HOME": Keys.HOME,
    "END": Keys.END,
    "SHIFT": Keys.SHIFT,
    "CONTROL": Keys.CONTROL,
    "CTRL": Keys.CONTROL,
    "ALT": Keys.ALT,
    "META": Keys.META,
    "COMMAND": Keys.COMMAND,
}
_KEY_MAPPING.update({f"F{i}": getattr(Keys, f"F{i}") for i in range(1, 13)})


def resolve_key(key: str) -> str:
    """
    Map a key name ("Enter", "Tab", "ArrowDown", ...) to its Selenium code point.

    Single characters and unknown names are returned unchanged.
    """
    if len(key) == 1:
        return key
    normalized = key.upper().replace("_", "").replace("-", "").replace(" ", "")
    return _KEY_MAPPING.get(normalized, key)


__all__ = [
    'resolve_key',
]
