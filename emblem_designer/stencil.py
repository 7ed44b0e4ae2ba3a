"""Stencil (intensity + alpha mask) images.

A :class:`StencilImage` wraps a read-only ``uint8`` array of shape
``(H, W, 2)``: channel 0 is intensity, channel 1 is alpha. Shapes are
defined by alpha; the intensity of foreground layer 0 doubles as the lighting
control signal used by brightness modulation.

Stencils are shared between renders, so the backing array is frozen
(``writeable = False``) and every transform returns a new stencil.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import numpy.typing as npt
from PIL import Image

from emblem_designer.errors import InvalidArgument

UInt8Array = npt.NDArray[np.uint8]


def _frozen(arr: UInt8Array) -> UInt8Array:
    out = np.array(arr, dtype=np.uint8, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True, eq=False)
class StencilImage:
    """Immutable grayscale+alpha mask, origin top-left, indexed ``[y, x]``."""

    data: UInt8Array

    def __post_init__(self) -> None:
        if self.data.ndim != 3 or self.data.shape[2] != 2:
            raise InvalidArgument(
                f"Stencil data must have shape (H, W, 2), got {self.data.shape}"
            )
        object.__setattr__(self, "data", _frozen(self.data))

    @classmethod
    def from_image(cls, image: Image.Image) -> "StencilImage":
        """Build a stencil from any PIL image (converted to ``LA``).

        Images without an alpha channel get an opaque alpha, which matches how
        a mask without transparency covers the whole canvas.
        """
        if image.mode != "LA":
            image = image.convert("LA")
        return cls(np.asarray(image, dtype=np.uint8).reshape(image.height, image.width, 2))

    @classmethod
    def from_arrays(cls, intensity: UInt8Array, alpha: UInt8Array) -> "StencilImage":
        if intensity.shape != alpha.shape:
            raise InvalidArgument(
                f"Intensity {intensity.shape} and alpha {alpha.shape} differ"
            )
        return cls(np.stack([intensity, alpha], axis=-1).astype(np.uint8))

    @classmethod
    def load(cls, path: str, size: int) -> "StencilImage":
        """Open ``path`` and resample it to ``size x size``."""
        with Image.open(path) as img:
            la = img.convert("LA")
        if la.size != (size, size):
            la = la.resize((size, size), Image.Resampling.LANCZOS)
        return cls.from_image(la)

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height), PIL order."""
        return (int(self.data.shape[1]), int(self.data.shape[0]))

    @property
    def intensity(self) -> UInt8Array:
        return self.data[..., 0]

    @property
    def alpha(self) -> UInt8Array:
        return self.data[..., 1]

    def flipped(self, horizontal: bool, vertical: bool) -> "StencilImage":
        """Mirror sampling about the image center. Colors are never touched."""
        if not horizontal and not vertical:
            return self
        arr = self.data
        if horizontal:
            arr = arr[:, ::-1]
        if vertical:
            arr = arr[::-1, :]
        return StencilImage(arr)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StencilImage):
            return NotImplemented
        return np.array_equal(self.data, other.data)

    def __hash__(self) -> int:
        return hash((self.data.shape, self.data.tobytes()))
