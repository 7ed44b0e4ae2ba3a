"""Rendering subpackage.

Turns an immutable ``EmblemDesign`` plus resolved stencil assets into an RGBA
image. The renderer focuses on:

* Mask tinting: flat slot colors cut out by stencil alpha.
* Independent background / foreground passes, each with its own flip state.
* Per-pixel brightness modulation driven by foreground layer 0.

Pillow handles alpha compositing; NumPy handles the per-pixel math. See
:mod:`emblem_designer.renderer.compositor` for the pipeline.
"""

from .compositor import (
    BrightnessParams,
    EmblemRenderer,
    RenderConfig,
    render,
    to_png_bytes,
)

__all__ = [
    "BrightnessParams",
    "EmblemRenderer",
    "RenderConfig",
    "render",
    "to_png_bytes",
]
