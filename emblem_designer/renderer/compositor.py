import io
import logging
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from emblem_designer.assets import EmblemAssets, ShapeLayers
from emblem_designer.design import EmblemDesign, FlipState
from emblem_designer.errors import InvalidArgument
from emblem_designer.stencil import StencilImage
from emblem_designer.utils.image import (
    boost_color,
    modulate_brightness,
    tint_mask,
    transparent_canvas,
)

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 256
DEFAULT_STRENGTH = 1.0
DEFAULT_GAMMA = 0.7
DEFAULT_LIFT = 0.0
DEFAULT_COLOR_BOOST = 1.35


@dataclass(frozen=True)
class BrightnessParams:
    """Tuning of the brightness-modulation pass.

    Attributes:
        strength: How far dark control pixels pull color down, in [0, 2].
        gamma: Exponent applied to the normalized control intensity, > 0.
        lift: Floor of the modulation factor, in [0, 1].
        color_boost: Channel multiplier applied to foreground colors before
            tinting, in [0.5, 3]. Compensates for the darkening of the pass.
    """

    strength: float = DEFAULT_STRENGTH
    gamma: float = DEFAULT_GAMMA
    lift: float = DEFAULT_LIFT
    color_boost: float = DEFAULT_COLOR_BOOST

    def __post_init__(self) -> None:
        if not 0.0 <= self.strength <= 2.0:
            raise InvalidArgument(f"strength must be in [0, 2], got {self.strength}")
        if not self.gamma > 0.0:
            raise InvalidArgument(f"gamma must be positive, got {self.gamma}")
        if not 0.0 <= self.lift <= 1.0:
            raise InvalidArgument(f"lift must be in [0, 1], got {self.lift}")
        if not 0.5 <= self.color_boost <= 3.0:
            raise InvalidArgument(
                f"color_boost must be in [0.5, 3], got {self.color_boost}"
            )


@dataclass(frozen=True)
class RenderConfig:
    size: int = DEFAULT_SIZE
    params: BrightnessParams = field(default_factory=BrightnessParams)
    brightness_enabled: bool = True


def _sample(stencil: StencilImage, flip: FlipState, size: int) -> StencilImage:
    if stencil.size != (size, size):
        raise InvalidArgument(
            f"Stencil is {stencil.size[0]}x{stencil.size[1]}, expected {size}x{size}"
        )
    return stencil.flipped(flip.horizontal, flip.vertical)


def render_background(
    canvas: Image.Image, design: EmblemDesign, mask: StencilImage, size: int
) -> None:
    layer = _sample(mask, design.background_flip, size)
    canvas.alpha_composite(tint_mask(layer.alpha, design.background_color))


def render_foreground(
    design: EmblemDesign,
    layers: ShapeLayers,
    size: int,
    params: BrightnessParams,
    brightness_enabled: bool,
) -> Image.Image:
    """Tint foreground layers 1 and 2 into a working buffer and shade it with layer 0."""
    control, mask1, mask2 = layers
    flip = design.foreground_flip
    working = transparent_canvas(size)

    for mask, color in (
        (mask1, design.foreground1_color),
        (mask2, design.foreground2_color),
    ):
        if mask is None:
            continue
        layer = _sample(mask, flip, size)
        working.alpha_composite(tint_mask(layer.alpha, boost_color(color, params.color_boost)))

    if brightness_enabled and control is not None:
        source = _sample(control, flip, size)
        working = modulate_brightness(
            working,
            source.intensity,
            source.alpha,
            strength=params.strength,
            gamma=params.gamma,
            lift=params.lift,
        )
    return working


def render(
    design: EmblemDesign,
    assets: EmblemAssets,
    size: int = DEFAULT_SIZE,
    params: Optional[BrightnessParams] = None,
    brightness_enabled: bool = True,
) -> Image.Image:
    """
    Composite ``design`` into a ``size x size`` RGBA image.

    Background first (single mask tinted with the background color), then the
    foreground working buffer (boosted foreground colors, optionally shaded by
    the layer-0 brightness source) alpha-composited on top. Missing shapes or
    layers are skipped; with nothing to draw the result is fully transparent.
    """
    if size <= 0:
        raise InvalidArgument(f"Render size must be positive, got {size}")
    if params is None:
        params = BrightnessParams()

    canvas = transparent_canvas(size)

    bg_mask = assets.background_layer(design.background_id)
    if bg_mask is not None:
        render_background(canvas, design, bg_mask, size)

    fg_layers = assets.foreground_layers(design.foreground_id)
    if any(layer is not None for layer in fg_layers):
        working = render_foreground(design, fg_layers, size, params, brightness_enabled)
        canvas.alpha_composite(working)

    logger.debug(
        "Rendered emblem bg=%s fg=%s at %dpx (brightness=%s)",
        design.background_id,
        design.foreground_id,
        size,
        brightness_enabled,
    )
    return canvas


def to_png_bytes(image: Image.Image) -> bytes:
    """PNG-encode a rendered emblem for download/export."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class EmblemRenderer:
    config: RenderConfig

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()

    def render(self, design: EmblemDesign, assets: EmblemAssets) -> Image.Image:
        return render(
            design,
            assets,
            size=self.config.size,
            params=self.config.params,
            brightness_enabled=self.config.brightness_enabled,
        )
