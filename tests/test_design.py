import random

import pytest

from emblem_designer.design import (
    DEFAULT_DESIGN,
    FlipState,
    color_of,
    export_filename,
    flip_of,
    randomize_colors,
    randomize_shapes,
    toggle_flip,
    with_color,
)
from emblem_designer.palette import (
    PALETTE,
    PALETTE_COLUMNS,
    is_palette_color,
    palette_index,
    palette_rows,
)
from emblem_designer.types import FlipAxis, ShapeKind, Slot
from tests.test_utils import make_design


def test_default_design_colors() -> None:
    assert DEFAULT_DESIGN.background_color == (0x3D, 0x09, 0x05)
    assert DEFAULT_DESIGN.foreground1_color == (0x86, 0x05, 0x0E)
    assert DEFAULT_DESIGN.foreground2_color == (0x0A, 0x4B, 0x69)
    assert DEFAULT_DESIGN.background_flip == FlipState(False, False)
    assert DEFAULT_DESIGN.foreground_flip == FlipState(False, False)


@pytest.mark.parametrize("slot", list(Slot))
def test_with_color_only_changes_slot(slot: Slot) -> None:
    design = make_design()
    updated = with_color(design, slot, PALETTE[0])
    assert color_of(updated, slot) == PALETTE[0]
    for other in Slot:
        if other != slot:
            assert color_of(updated, other) == color_of(design, other)
    # original untouched
    assert color_of(design, slot) != PALETTE[0]


def test_with_color_normalizes_to_tuple() -> None:
    design = with_color(make_design(), Slot.BACKGROUND, [1, 2, 3])  # type: ignore[arg-type]
    assert design.background_color == (1, 2, 3)


def test_toggle_flip() -> None:
    design = toggle_flip(make_design(), ShapeKind.FOREGROUND, FlipAxis.HORIZONTAL)
    assert flip_of(design, ShapeKind.FOREGROUND) == FlipState(True, False)
    assert flip_of(design, ShapeKind.BACKGROUND) == FlipState(False, False)
    design = toggle_flip(design, ShapeKind.BACKGROUND, FlipAxis.VERTICAL)
    assert flip_of(design, ShapeKind.BACKGROUND) == FlipState(False, True)
    design = toggle_flip(design, ShapeKind.FOREGROUND, FlipAxis.HORIZONTAL)
    assert flip_of(design, ShapeKind.FOREGROUND) == FlipState(False, False)


def test_randomize_shapes_is_seeded() -> None:
    a = randomize_shapes(DEFAULT_DESIGN, [1, 2, 3], [10, 20, 30], random.Random(4))
    b = randomize_shapes(DEFAULT_DESIGN, [1, 2, 3], [10, 20, 30], random.Random(4))
    assert a == b
    assert a.background_id in (1, 2, 3)
    assert a.foreground_id in (10, 20, 30)
    assert a.background_color == DEFAULT_DESIGN.background_color


def test_randomize_shapes_without_ids_keeps_shapes() -> None:
    design = randomize_shapes(DEFAULT_DESIGN, [], [], random.Random(0))
    assert design.background_id == DEFAULT_DESIGN.background_id
    assert design.foreground_id == DEFAULT_DESIGN.foreground_id


def test_randomize_colors_uses_palette() -> None:
    rng = random.Random(11)
    for _ in range(20):
        design = randomize_colors(DEFAULT_DESIGN, rng)
        for slot in Slot:
            assert is_palette_color(color_of(design, slot))


def test_palette_index_exact_match() -> None:
    assert palette_index(PALETTE[7]) == 7
    assert palette_index((0x86, 0x05, 0x0F)) is None


def test_palette_rows() -> None:
    rows = palette_rows()
    assert all(len(row) == PALETTE_COLUMNS for row in rows[:-1])
    assert sum(len(row) for row in rows) == len(PALETTE)
    assert rows[1][0] == PALETTE[PALETTE_COLUMNS]


def test_export_filename() -> None:
    assert export_filename(make_design()) == "emblem_7_2.png"
