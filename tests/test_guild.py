import json
from typing import Any, Dict, Optional

import pytest

from emblem_designer.colors import ColorResolver
from emblem_designer.design import FlipState
from emblem_designer.errors import DecodeError
from emblem_designer.guild import (
    design_from_guild_emblem,
    dye_source,
    parse_dye_records,
    parse_guild_emblem,
)
from emblem_designer.types import ColorRecord, ColorRef, ResolutionMode
from tests.test_utils import make_design

DYES: Dict[ColorRef, ColorRecord] = {
    473: {"cloth": {"rgb": [61, 9, 5]}},
    673: {"cloth": {"rgb": [255, 0, 0]}},
    71: {"base_rgb": [10, 75, 105]},
}


def lookup_dye(color_ref: ColorRef) -> Optional[ColorRecord]:
    return DYES.get(color_ref)


def make_emblem(**overrides: Any) -> Dict[str, Any]:
    emblem: Dict[str, Any] = {
        "background": {"id": 27, "colors": [473]},
        "foreground": {"id": 114, "colors": [673, 71]},
        "flags": ["FlipBackgroundHorizontal", "FlipForegroundVertical"],
    }
    emblem.update(overrides)
    return emblem


def test_guild_emblem_direct() -> None:
    resolver = ColorResolver(lookup_dye, ResolutionMode.DIRECT)
    design = design_from_guild_emblem(make_emblem(), resolver, make_design())
    assert design.background_id == 27
    assert design.foreground_id == 114
    assert design.background_color == (61, 9, 5)
    assert design.foreground1_color == (255, 0, 0)
    assert design.foreground2_color == (10, 75, 105)
    assert design.background_flip == FlipState(horizontal=True, vertical=False)
    assert design.foreground_flip == FlipState(horizontal=False, vertical=True)


def test_guild_emblem_snap() -> None:
    resolver = ColorResolver(lookup_dye, ResolutionMode.SNAP)
    design = design_from_guild_emblem(make_emblem(), resolver, make_design())
    assert design.foreground1_color == (0x86, 0x05, 0x0E)


def test_guild_emblem_unresolvable_colors_keep_current() -> None:
    resolver = ColorResolver(lookup_dye, ResolutionMode.DIRECT)
    current = make_design()
    emblem = make_emblem(
        background={"id": 27, "colors": [999]},
        foreground={"id": 114, "colors": [0]},
    )
    design = design_from_guild_emblem(emblem, resolver, current)
    assert design.background_color == current.background_color
    assert design.foreground1_color == current.foreground1_color
    assert design.foreground2_color == current.foreground2_color


def test_guild_emblem_without_flags() -> None:
    resolver = ColorResolver(lookup_dye, ResolutionMode.DIRECT)
    current = make_design(background_flip=FlipState(True, True))
    design = design_from_guild_emblem(make_emblem(flags=None), resolver, current)
    assert design.background_flip == FlipState()
    assert design.foreground_flip == FlipState()


@pytest.mark.parametrize("key", ["background", "foreground"])
def test_guild_emblem_missing_shape(key: str) -> None:
    resolver = ColorResolver(lookup_dye, ResolutionMode.DIRECT)
    with pytest.raises(DecodeError):
        design_from_guild_emblem(make_emblem(**{key: {"colors": []}}), resolver, make_design())


def test_parse_guild_emblem_unwraps_guild_record() -> None:
    emblem = make_emblem()
    assert parse_guild_emblem(json.dumps({"name": "Guild", "emblem": emblem})) == emblem
    assert parse_guild_emblem(json.dumps(emblem)) == emblem


@pytest.mark.parametrize("text", ["", "{not json", "[1, 2]", '"emblem"'])
def test_parse_guild_emblem_rejects_non_objects(text: str) -> None:
    with pytest.raises(DecodeError):
        parse_guild_emblem(text)


def test_parse_dye_records_list_and_mapping() -> None:
    as_list = [{"id": 473, "cloth": {"rgb": [61, 9, 5]}}, {"id": 71, "base_rgb": [1, 2, 3]}]
    as_mapping = {"473": {"cloth": {"rgb": [61, 9, 5]}}, "71": {"base_rgb": [1, 2, 3]}}
    assert set(parse_dye_records(json.dumps(as_list))) == {473, 71}
    assert parse_dye_records(json.dumps(as_mapping))[71] == {"base_rgb": [1, 2, 3]}
    assert parse_dye_records("  ") == {}


@pytest.mark.parametrize("text", ["oops", "42", '{"abc": {}}', '[{"cloth": {}}]'])
def test_parse_dye_records_rejects_bad_input(text: str) -> None:
    with pytest.raises(DecodeError):
        parse_dye_records(text)


def test_guild_import_from_json() -> None:
    dyes = parse_dye_records(json.dumps([{"id": 673, "cloth": {"rgb": [255, 0, 0]}}]))
    resolver = ColorResolver(dye_source(dyes), ResolutionMode.DIRECT)
    design = design_from_guild_emblem(
        parse_guild_emblem(json.dumps({"emblem": make_emblem()})), resolver, make_design()
    )
    assert design.foreground1_color == (255, 0, 0)
    assert design.background_color == make_design().background_color
