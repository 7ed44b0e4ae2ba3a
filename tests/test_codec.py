import base64
import json
import random
from typing import Any, Dict

import pytest

from emblem_designer.codec import decode, design_to_payload, encode
from emblem_designer.design import (
    DEFAULT_DESIGN,
    EmblemDesign,
    FlipState,
    randomize_colors,
    randomize_shapes,
)
from emblem_designer.errors import DecodeError
from tests.test_utils import make_design


def token(payload: Any) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def full_payload() -> Dict[str, Any]:
    return {
        "f": 114,
        "b": 27,
        "cb": "#3d0905",
        "c1": "#86050e",
        "c2": "#0a4b69",
        "fh": 1,
        "fv": 0,
        "bh": 0,
        "bv": 1,
    }


def test_encode_payload_is_compact_json_in_field_order() -> None:
    design = make_design(
        background_flip=FlipState(horizontal=True),
        foreground_flip=FlipState(vertical=True),
    )
    raw = base64.b64decode(encode(design)).decode("utf-8")
    assert " " not in raw
    assert list(json.loads(raw).keys()) == ["f", "b", "cb", "c1", "c2", "fh", "fv", "bh", "bv"]
    assert json.loads(raw) == {
        "f": 7,
        "b": 2,
        "cb": "#3d0905",
        "c1": "#643214",
        "c2": "#0a4b69",
        "fh": 0,
        "fv": 1,
        "bh": 1,
        "bv": 0,
    }


def test_encode_is_plain_text() -> None:
    code = encode(DEFAULT_DESIGN)
    assert code.isascii()
    assert all(c.isalnum() or c in "+/=" for c in code)


def test_round_trip_default() -> None:
    assert decode(encode(DEFAULT_DESIGN)) == DEFAULT_DESIGN


@pytest.mark.parametrize("seed", range(10))
def test_round_trip_random_designs(seed: int) -> None:
    rng = random.Random(seed)
    design = randomize_shapes(DEFAULT_DESIGN, list(range(1, 40)), list(range(1, 200)), rng)
    design = randomize_colors(design, rng)
    assert decode(encode(design), DEFAULT_DESIGN) == design


def test_round_trip_off_palette_colors() -> None:
    design = make_design(
        background_color=(0, 0, 0),
        foreground1_color=(255, 255, 255),
        foreground2_color=(1, 2, 254),
    )
    assert decode(encode(design)) == design


def test_decode_full_payload() -> None:
    design = decode(token(full_payload()))
    assert design == EmblemDesign(
        background_id=27,
        foreground_id=114,
        background_color=(0x3D, 0x09, 0x05),
        foreground1_color=(0x86, 0x05, 0x0E),
        foreground2_color=(0x0A, 0x4B, 0x69),
        background_flip=FlipState(horizontal=False, vertical=True),
        foreground_flip=FlipState(horizontal=True, vertical=False),
    )


def test_decode_tolerates_whitespace_urlsafe_and_missing_padding() -> None:
    raw = json.dumps(full_payload()).encode("utf-8")
    code = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    assert decode(f"  {code}\n") == decode(token(full_payload()))


def test_decode_missing_colors_keep_current() -> None:
    payload = full_payload()
    del payload["c1"]
    payload["cb"] = ""
    payload["c2"] = None
    current = make_design()
    design = decode(token(payload), current)
    assert design.background_color == current.background_color
    assert design.foreground1_color == current.foreground1_color
    assert design.foreground2_color == current.foreground2_color


def test_decode_missing_flips_are_false() -> None:
    payload = {"f": 1, "b": 2}
    current = make_design(
        background_flip=FlipState(True, True), foreground_flip=FlipState(True, True)
    )
    design = decode(token(payload), current)
    assert design.background_flip == FlipState()
    assert design.foreground_flip == FlipState()


def test_decode_zero_id_is_present() -> None:
    payload = full_payload()
    payload["f"] = 0
    assert decode(token(payload)).foreground_id == 0


@pytest.mark.parametrize("missing", ["f", "b"])
def test_decode_missing_shape_id_fails_and_keeps_design(missing: str) -> None:
    payload = full_payload()
    del payload[missing]
    current = make_design()
    snapshot = design_to_payload(current)
    with pytest.raises(DecodeError):
        decode(token(payload), current)
    assert design_to_payload(current) == snapshot


def test_decode_null_shape_id_fails() -> None:
    payload = full_payload()
    payload["b"] = None
    with pytest.raises(DecodeError):
        decode(token(payload))


@pytest.mark.parametrize(
    "code",
    [
        "",
        "!!!not base64!!!",
        base64.b64encode(b"not json").decode("ascii"),
        base64.b64encode(b"\xff\xfe\xfd").decode("ascii"),
        token([1, 2, 3]),
        token("just a string"),
        token({"f": "abc", "b": 2}),
        token({"f": True, "b": 2}),
        token({"f": "3", "b": 2}),
        token({"f": 3.0, "b": 2}),
        token({"f": 1, "b": 2, "cb": "#zzzzzz"}),
        token({"f": 1, "b": 2, "c1": 12345}),
    ],
)
def test_decode_malformed_codes(code: str) -> None:
    with pytest.raises(DecodeError):
        decode(code)


def test_decode_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        decode("%%%")
