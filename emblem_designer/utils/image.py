import numpy as np
import numpy.typing as npt
from PIL import Image

from emblem_designer.types import Color
from emblem_designer.utils.color import clamp_channel

# Type aliases for clarity
FloatArray = npt.NDArray[np.float32 | np.float64]
UInt8Array = npt.NDArray[np.uint8]
BoolArray = npt.NDArray[np.bool_]


def boost_color(color: Color, boost: float) -> Color:
    """
    Multiply each channel by ``boost``, round half-up and clamp to [0, 255].
    A boost of exactly 1 is the identity.
    """
    if boost == 1:
        return tuple(color)
    r, g, b = color
    return (clamp_channel(r * boost), clamp_channel(g * boost), clamp_channel(b * boost))


def tint_mask(alpha: UInt8Array, color: Color) -> Image.Image:
    """
    Flat-color copy of a mask: RGB is ``color`` everywhere, alpha comes from
    the mask. This replaces color under the mask rather than blending with it.
    """
    h, w = alpha.shape
    out: UInt8Array = np.empty((h, w, 4), dtype=np.uint8)
    out[..., 0] = color[0]
    out[..., 1] = color[1]
    out[..., 2] = color[2]
    out[..., 3] = alpha
    return Image.fromarray(out)


def transparent_canvas(size: int) -> Image.Image:
    return Image.new("RGBA", (size, size), (0, 0, 0, 0))


def round_half_up(values: FloatArray) -> FloatArray:
    """Round to nearest, halves away from zero for the non-negative inputs used here."""
    return np.floor(values + 0.5)


def modulate_brightness(
    buffer: Image.Image,
    intensity: UInt8Array,
    alpha: UInt8Array,
    strength: float,
    gamma: float,
    lift: float,
) -> Image.Image:
    """
    Scale the RGB of ``buffer`` by a per-pixel factor derived from a
    brightness-source mask.

    Intensities are normalized by the brightest covered pixel of the source
    (255 when nothing is covered), curved by ``gamma`` and mapped to
    ``lift + (1 - lift) * (1 - (1 - curved) * strength)``. Only pixels covered
    by both the source and the buffer change; alpha is never modified.
    """
    arr: UInt8Array = np.array(buffer, dtype=np.uint8)

    covered: BoolArray = alpha > 0
    max_intensity = int(intensity[covered].max()) if covered.any() else 255
    if max_intensity == 0:
        max_intensity = 255

    target: BoolArray = covered & (arr[..., 3] > 0)
    if not target.any():
        return buffer

    raw: FloatArray = np.clip(
        intensity[target].astype(np.float64) / float(max_intensity), 0.0, 1.0
    )
    curved: FloatArray = raw**gamma
    factor: FloatArray = lift + (1.0 - lift) * (1.0 - (1.0 - curved) * strength)

    rgb: FloatArray = arr[..., :3][target].astype(np.float64) * factor[:, None]
    arr[..., :3][target] = np.clip(round_half_up(rgb), 0, 255).astype(np.uint8)
    # alpha unchanged
    return Image.fromarray(arr)
