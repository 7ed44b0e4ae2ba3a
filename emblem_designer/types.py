"""Common type aliases and enumerations.

``Color`` is the 8-bit sRGB triple passed everywhere a slot color travels:
through the palette, the resolver, the design codec and the compositor.
"""

from enum import StrEnum, auto
from typing import Any, Callable, Mapping, Optional, Tuple

ShapeID = int
ColorRef = int

Color = Tuple[int, int, int]

# Raw record returned by the external color source (e.g. a dye lookup).
ColorRecord = Mapping[str, Any]
ColorSourceFn = Callable[[ColorRef], Optional[ColorRecord]]


class Slot(StrEnum):
    """Color slots of an emblem; each owns exactly one color."""

    BACKGROUND = auto()
    FOREGROUND1 = auto()
    FOREGROUND2 = auto()


class ShapeKind(StrEnum):
    """Compositing groups. Each has its own stencil set and flip state."""

    BACKGROUND = auto()
    FOREGROUND = auto()


class FlipAxis(StrEnum):
    HORIZONTAL = auto()
    VERTICAL = auto()


class ResolutionMode(StrEnum):
    """Policy for turning an external color into a slot color.

    Members:
        DIRECT: Use the external triple as-is (may fall outside the palette).
        SNAP: Replace it with the nearest palette entry.
    """

    DIRECT = auto()
    SNAP = auto()
