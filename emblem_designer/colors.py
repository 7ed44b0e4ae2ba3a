"""Color resolution: external color ids and arbitrary hex to slot colors.

An external color source (for the game this is the dye catalog) maps an
opaque color reference to a record carrying RGB variants. The resolver pulls
the flat RGB triple out of that record and applies one explicit
:class:`~emblem_designer.types.ResolutionMode`:

* ``DIRECT`` keeps the triple as a free color.
* ``SNAP`` replaces it with the nearest palette entry by squared Euclidean
  RGB distance; ties go to the earliest palette entry.

Resolution failures are never fatal to a design. :meth:`ColorResolver.resolve_or`
substitutes the slot's prior color and logs the miss.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Sequence

import numpy as np
import numpy.typing as npt

from emblem_designer.errors import ResolutionUnavailable
from emblem_designer.palette import PALETTE
from emblem_designer.types import (
    Color,
    ColorRecord,
    ColorRef,
    ColorSourceFn,
    ResolutionMode,
)
from emblem_designer.utils.color import hex_to_rgb, rgb_to_hex

__all__ = [
    "ColorResolver",
    "hex_to_rgb",
    "rgb_from_record",
    "rgb_to_hex",
    "snap_to_palette",
]

logger = logging.getLogger(__name__)

_PALETTE_ARRAY: npt.NDArray[np.int64] = np.array(list(PALETTE), dtype=np.int64)


def snap_to_palette(color: Color, palette: Optional[Sequence[Color]] = None) -> Color:
    """Return the palette color nearest to ``color`` (first wins on ties)."""
    candidates = (
        _PALETTE_ARRAY if palette is None else np.array(list(palette), dtype=np.int64)
    )
    target = np.array(color, dtype=np.int64)
    distances = ((candidates - target) ** 2).sum(axis=1)
    # argmin returns the first minimum, which is the tie-break we want.
    best = int(np.argmin(distances))
    return PALETTE[best] if palette is None else tuple(palette[best])


def _as_triple(value: Any) -> Optional[Color]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return None
    if not all(isinstance(c, int) and not isinstance(c, bool) for c in value):
        return None
    if not all(0 <= c <= 255 for c in value):
        return None
    return (value[0], value[1], value[2])


def rgb_from_record(record: Optional[ColorRecord]) -> Optional[Color]:
    """Extract the flat emblem RGB from an external color record.

    The cloth variant is closest to a flat color, so it wins over
    ``base_rgb``. Returns None when neither is usable.
    """
    if not record:
        return None
    cloth = record.get("cloth")
    if isinstance(cloth, Mapping):
        rgb = _as_triple(cloth.get("rgb"))
        if rgb is not None:
            return rgb
    return _as_triple(record.get("base_rgb"))


class ColorResolver:
    """Resolve external color references under a single explicit policy."""

    source: ColorSourceFn
    mode: ResolutionMode

    def __init__(self, source: ColorSourceFn, mode: ResolutionMode):
        self.source = source
        self.mode = ResolutionMode(mode)

    def apply_mode(self, color: Color) -> Color:
        if self.mode == ResolutionMode.SNAP:
            return snap_to_palette(color)
        return tuple(color)

    def resolve(self, color_ref: ColorRef) -> Color:
        """Resolve ``color_ref`` or raise :class:`ResolutionUnavailable`."""
        rgb = rgb_from_record(self.source(color_ref))
        if rgb is None:
            raise ResolutionUnavailable(f"No usable color data for {color_ref!r}")
        return self.apply_mode(rgb)

    def resolve_hex(self, value: str) -> Color:
        """Resolve an arbitrary hex color under the same policy."""
        return self.apply_mode(hex_to_rgb(value))

    def resolve_or(self, color_ref: Optional[ColorRef], fallback: Color) -> Color:
        """Resolve ``color_ref``; fall back to ``fallback`` when it can't be."""
        if not color_ref:
            return fallback
        try:
            return self.resolve(color_ref)
        except ResolutionUnavailable as e:
            logger.warning("%s; keeping %s", e, rgb_to_hex(fallback))
            return fallback
