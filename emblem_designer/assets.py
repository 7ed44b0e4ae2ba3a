"""Shape assets: stencil layer sets keyed by shape id.

The compositor only ever sees a fully resolved :class:`EmblemAssets`. Getting
there (reading files, resampling, caching) is the job of an asset provider;
:class:`DirectoryAssetProvider` is the file-backed one used by the app.

Layer order is a fixed contract of the asset source:

* background: ``(mask,)``
* foreground: ``(brightness source, foreground 1 mask, foreground 2 mask)``

Absent layers are ``None`` rather than errors.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pyrsistent import pmap
from pyrsistent.typing import PMap

from emblem_designer.design import EmblemDesign
from emblem_designer.stencil import StencilImage
from emblem_designer.types import ShapeID, ShapeKind

logger = logging.getLogger(__name__)

DEFAULT_ASSET_ROOT = "assets"

ShapeLayers = Tuple[Optional[StencilImage], ...]

LAYER_COUNT: Dict[ShapeKind, int] = {
    ShapeKind.BACKGROUND: 1,
    ShapeKind.FOREGROUND: 3,
}

SHAPE_DIRS: Dict[ShapeKind, str] = {
    ShapeKind.BACKGROUND: "backgrounds",
    ShapeKind.FOREGROUND: "foregrounds",
}


def _pad(layers: Sequence[Optional[StencilImage]], count: int) -> ShapeLayers:
    padded = list(layers[:count])
    padded.extend([None] * (count - len(padded)))
    return tuple(padded)


@dataclass(frozen=True)
class EmblemAssets:
    """Resolved stencil sets for backgrounds and foregrounds."""

    backgrounds: PMap[ShapeID, ShapeLayers] = field(default_factory=pmap)
    foregrounds: PMap[ShapeID, ShapeLayers] = field(default_factory=pmap)

    @classmethod
    def from_mappings(
        cls,
        backgrounds: Mapping[ShapeID, Sequence[Optional[StencilImage]]],
        foregrounds: Mapping[ShapeID, Sequence[Optional[StencilImage]]],
    ) -> "EmblemAssets":
        return cls(
            backgrounds=pmap(
                {k: _pad(v, LAYER_COUNT[ShapeKind.BACKGROUND]) for k, v in backgrounds.items()}
            ),
            foregrounds=pmap(
                {k: _pad(v, LAYER_COUNT[ShapeKind.FOREGROUND]) for k, v in foregrounds.items()}
            ),
        )

    def has_shape(self, kind: ShapeKind, shape_id: ShapeID) -> bool:
        store = self.backgrounds if kind == ShapeKind.BACKGROUND else self.foregrounds
        return shape_id in store

    def background_layer(self, shape_id: ShapeID) -> Optional[StencilImage]:
        layers = self.backgrounds.get(shape_id)
        if layers is None:
            return None
        return _pad(layers, 1)[0]

    def foreground_layers(self, shape_id: ShapeID) -> ShapeLayers:
        """Return ``(layer0, layer1, layer2)``; all None if the shape is unknown."""
        return _pad(self.foregrounds.get(shape_id, ()), 3)


class DirectoryAssetProvider:
    """Load stencils from ``<root>/<backgrounds|foregrounds>/<id>/<layer>.png``.

    Loaded stencils are cached per ``(path, size)``. A missing or unreadable
    file is an absent layer.
    """

    asset_root: str
    _cache: Dict[Tuple[str, int], Optional[StencilImage]]

    def __init__(self, asset_root: str = DEFAULT_ASSET_ROOT):
        self.asset_root = asset_root
        self._cache = {}

    def layer_path(self, kind: ShapeKind, shape_id: ShapeID, layer: int) -> str:
        return os.path.join(self.asset_root, SHAPE_DIRS[kind], str(shape_id), f"{layer}.png")

    def shape_ids(self, kind: ShapeKind) -> List[ShapeID]:
        """Sorted ids of every shape directory of ``kind``."""
        kind_dir = os.path.join(self.asset_root, SHAPE_DIRS[kind])
        try:
            entries = os.listdir(kind_dir)
        except (FileNotFoundError, NotADirectoryError, PermissionError):
            return []
        return sorted(
            int(name)
            for name in entries
            if name.isdigit() and os.path.isdir(os.path.join(kind_dir, name))
        )

    def load_layer(
        self, kind: ShapeKind, shape_id: ShapeID, layer: int, size: int
    ) -> Optional[StencilImage]:
        path = self.layer_path(kind, shape_id, layer)
        key = (path, size)
        if key in self._cache:
            return self._cache[key]
        try:
            stencil: Optional[StencilImage] = StencilImage.load(path, size)
        except OSError as e:
            logger.debug("No stencil at %s: %s", path, e)
            stencil = None
        self._cache[key] = stencil
        return stencil

    def load_shape(self, kind: ShapeKind, shape_id: ShapeID, size: int) -> ShapeLayers:
        return tuple(
            self.load_layer(kind, shape_id, layer, size)
            for layer in range(LAYER_COUNT[kind])
        )

    def assets_for(self, design: EmblemDesign, size: int) -> EmblemAssets:
        """Resolve exactly the two shapes ``design`` references."""
        return EmblemAssets(
            backgrounds=pmap(
                {
                    design.background_id: self.load_shape(
                        ShapeKind.BACKGROUND, design.background_id, size
                    )
                }
            ),
            foregrounds=pmap(
                {
                    design.foreground_id: self.load_shape(
                        ShapeKind.FOREGROUND, design.foreground_id, size
                    )
                }
            ),
        )
