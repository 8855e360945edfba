"""Screenshot capture tool implementation."""

import io
import base64
import asyncio
from typing import List, Optional, Union

from PIL import Image

from ..browser.engine import engine_call
from ..context import ServerContext
from ..errors import InvalidOptions

MIN_THUMBNAIL_WIDTH = 50


def make_thumbnail(png_bytes: bytes, thumbnail_width: int) -> bytes:
    """Downscale a PNG to `thumbnail_width` pixels wide, keeping the aspect ratio."""
    img = Image.open(io.BytesIO(png_bytes))
    aspect_ratio = img.height / img.width
    thumb_height = max(int(thumbnail_width * aspect_ratio), 1)
    img.thumbnail((thumbnail_width, thumb_height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


def _write_file(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


async def take_screenshot(
    ctx: ServerContext,
    output_path: Optional[str] = None,
    thumbnail_width: Optional[int] = None,
) -> Union[str, List[str]]:
    """
    Capture the current page as PNG.

    Args:
        output_path: Save the full-size image here. Without it the image is
            returned inline as base64.
        thumbnail_width: Downscale the inline image to this width (>= 50 px).

    Returns:
        "Screenshot saved to <path>", or a caption followed by the base64 data.
    """
    if thumbnail_width is not None and thumbnail_width < MIN_THUMBNAIL_WIDTH:
        raise InvalidOptions(f"thumbnail_width must be at least {MIN_THUMBNAIL_WIDTH} pixels")

    driver = ctx.registry.current_driver()
    png_bytes = await engine_call(driver.get_screenshot_as_png)

    if output_path:
        await asyncio.to_thread(_write_file, output_path, png_bytes)
        return f"Screenshot saved to {output_path}"

    if thumbnail_width is not None:
        png_bytes = await asyncio.to_thread(make_thumbnail, png_bytes, thumbnail_width)

    return ["Screenshot captured as base64:", base64.b64encode(png_bytes).decode("utf-8")]


__all__ = ['take_screenshot', 'make_thumbnail']
