"""Guild emblem dye palette.

The palette is a closed, ordered set: enumeration order matters for
tie-breaking when snapping and for the swatch grid (five per row, read
left-to-right, top-to-bottom). Membership is exact RGB equality.
"""

import random
from typing import Optional, Tuple

from pyrsistent import pvector
from pyrsistent.typing import PVector

from emblem_designer.types import Color
from emblem_designer.utils.color import hex_to_rgb

PALETTE_COLUMNS = 5

PALETTE_HEX: Tuple[str, ...] = (
    # Row 1
    "#221c1f",
    "#7b8385",
    "#b8b1b0",
    "#9a8969",
    "#4c4545",
    # Row 2
    "#3d0905",
    "#724814",
    "#86050e",
    "#963f1a",
    "#85261d",
    # Row 3
    "#885305",
    "#544505",
    "#2b4175",
    "#3b3570",
    "#0a4b69",
    # Row 4
    "#0a6868",
    "#612061",
    "#491340",
    "#49295f",
    "#bc5d66",
    # Row 5
    "#751b42",
    "#092133",
    "#294e04",
    "#1f2804",
    "#083831",
    # Row 6
    "#23562d",
)

PALETTE: PVector[Color] = pvector(hex_to_rgb(h) for h in PALETTE_HEX)


def palette_index(color: Color) -> Optional[int]:
    """Return the position of ``color`` in the palette (exact match) or None."""
    color = tuple(color)
    for idx, entry in enumerate(PALETTE):
        if entry == color:
            return idx
    return None


def is_palette_color(color: Color) -> bool:
    return palette_index(color) is not None


def palette_rows() -> Tuple[Tuple[Color, ...], ...]:
    """Palette split into swatch rows of ``PALETTE_COLUMNS``."""
    return tuple(
        tuple(PALETTE[i : i + PALETTE_COLUMNS])
        for i in range(0, len(PALETTE), PALETTE_COLUMNS)
    )


def random_palette_color(rng: random.Random) -> Color:
    return rng.choice(PALETTE)
