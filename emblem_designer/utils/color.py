"""Hex <-> RGB conversions for 24-bit sRGB colors."""

import re

from emblem_designer.errors import InvalidArgument
from emblem_designer.types import Color

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_rgb(value: str) -> Color:
    """Parse ``#rrggbb`` (leading ``#`` optional, any case) into a Color."""
    if not isinstance(value, str):
        raise InvalidArgument(f"Hex color must be a string, got {value!r}")
    match = _HEX_RE.match(value.strip())
    if match is None:
        raise InvalidArgument(f"Malformed hex color: {value!r}")
    digits = match.group(1)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(color: Color) -> str:
    """Format a Color as lowercase, zero-padded ``#rrggbb``."""
    if len(color) != 3 or not all(
        isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255
        for c in color
    ):
        raise InvalidArgument(f"Not an 8-bit RGB triple: {color!r}")
    r, g, b = color
    return f"#{r:02x}{g:02x}{b:02x}"


def clamp_channel(value: float) -> int:
    """Round half-up and clamp a channel value to [0, 255]."""
    return max(0, min(255, int(value + 0.5)))
