"""Immutable emblem design value and pure editing helpers.

An :class:`EmblemDesign` is the whole serializable configuration of one
emblem: which background and foreground shapes are used, the three slot
colors and the flip state of each compositing group. Every editing action
returns a *new* design (``dataclasses.replace``); nothing is mutated in place,
so a failed decode or lookup can never leave a half-applied design behind.
"""

import random
from dataclasses import dataclass, replace
from typing import Sequence

from emblem_designer.palette import PALETTE, random_palette_color
from emblem_designer.types import Color, FlipAxis, ShapeID, ShapeKind, Slot


@dataclass(frozen=True)
class FlipState:
    """Mirror flags of one compositing group (background or foreground)."""

    horizontal: bool = False
    vertical: bool = False

    def toggled(self, axis: FlipAxis) -> "FlipState":
        if axis == FlipAxis.HORIZONTAL:
            return replace(self, horizontal=not self.horizontal)
        return replace(self, vertical=not self.vertical)


@dataclass(frozen=True)
class EmblemDesign:
    """Complete emblem configuration.

    Attributes:
        background_id: Background shape identifier.
        foreground_id: Foreground shape identifier.
        background_color: Tint of the background mask.
        foreground1_color: Tint of foreground layer 1.
        foreground2_color: Tint of foreground layer 2.
        background_flip: Flip state of the background group.
        foreground_flip: Flip state of the foreground group.
    """

    background_id: ShapeID
    foreground_id: ShapeID
    background_color: Color
    foreground1_color: Color
    foreground2_color: Color
    background_flip: FlipState = FlipState()
    foreground_flip: FlipState = FlipState()


DEFAULT_DESIGN = EmblemDesign(
    background_id=1,
    foreground_id=1,
    background_color=PALETTE[5],
    foreground1_color=PALETTE[7],
    foreground2_color=PALETTE[14],
)

_SLOT_FIELDS = {
    Slot.BACKGROUND: "background_color",
    Slot.FOREGROUND1: "foreground1_color",
    Slot.FOREGROUND2: "foreground2_color",
}

_FLIP_FIELDS = {
    ShapeKind.BACKGROUND: "background_flip",
    ShapeKind.FOREGROUND: "foreground_flip",
}


def color_of(design: EmblemDesign, slot: Slot) -> Color:
    return getattr(design, _SLOT_FIELDS[slot])


def with_color(design: EmblemDesign, slot: Slot, color: Color) -> EmblemDesign:
    """Return a copy of ``design`` with ``slot`` painted ``color``."""
    return replace(design, **{_SLOT_FIELDS[slot]: tuple(color)})


def flip_of(design: EmblemDesign, group: ShapeKind) -> FlipState:
    return getattr(design, _FLIP_FIELDS[group])


def toggle_flip(design: EmblemDesign, group: ShapeKind, axis: FlipAxis) -> EmblemDesign:
    field = _FLIP_FIELDS[group]
    return replace(design, **{field: getattr(design, field).toggled(axis)})


def randomize_shapes(
    design: EmblemDesign,
    background_ids: Sequence[ShapeID],
    foreground_ids: Sequence[ShapeID],
    rng: random.Random,
) -> EmblemDesign:
    """Pick a random background and foreground and flip each axis with p=0.5.

    Empty id sequences keep the current shape of that group.
    """
    foreground_id = rng.choice(foreground_ids) if foreground_ids else design.foreground_id
    background_id = rng.choice(background_ids) if background_ids else design.background_id
    return replace(
        design,
        foreground_id=foreground_id,
        background_id=background_id,
        foreground_flip=FlipState(rng.random() < 0.5, rng.random() < 0.5),
        background_flip=FlipState(rng.random() < 0.5, rng.random() < 0.5),
    )


def randomize_colors(design: EmblemDesign, rng: random.Random) -> EmblemDesign:
    return replace(
        design,
        background_color=random_palette_color(rng),
        foreground1_color=random_palette_color(rng),
        foreground2_color=random_palette_color(rng),
    )


def export_filename(design: EmblemDesign) -> str:
    """Download name used when exporting a rendered design."""
    return f"emblem_{design.foreground_id}_{design.background_id}.png"
