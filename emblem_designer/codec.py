"""Design codec: pasteable share codes for emblem designs.

Wire format (unversioned, must stay decodable forever)::

    base64(json({"f": fg_id, "b": bg_id, "cb": "#rrggbb", "c1": "#rrggbb",
                 "c2": "#rrggbb", "fh": 0|1, "fv": 0|1, "bh": 0|1, "bv": 0|1}))

The JSON is emitted without whitespace and with keys in the order above, so
codes are byte-identical to the ones issued by the browser designer. Decoding
accepts either base64 alphabet and tolerates missing padding.
"""

import base64
import binascii
import json
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from emblem_designer.design import DEFAULT_DESIGN, EmblemDesign, FlipState
from emblem_designer.errors import DecodeError, InvalidArgument
from emblem_designer.types import Color, ShapeID
from emblem_designer.utils.color import hex_to_rgb, rgb_to_hex

logger = logging.getLogger(__name__)


def design_to_payload(design: EmblemDesign) -> Dict[str, Any]:
    """Field-keyed record for ``design`` (the structure inside a code)."""
    return {
        "f": design.foreground_id,
        "b": design.background_id,
        "cb": rgb_to_hex(design.background_color),
        "c1": rgb_to_hex(design.foreground1_color),
        "c2": rgb_to_hex(design.foreground2_color),
        "fh": 1 if design.foreground_flip.horizontal else 0,
        "fv": 1 if design.foreground_flip.vertical else 0,
        "bh": 1 if design.background_flip.horizontal else 0,
        "bv": 1 if design.background_flip.vertical else 0,
    }


def encode(design: EmblemDesign) -> str:
    """Serialize ``design`` to a share code."""
    text = json.dumps(design_to_payload(design), separators=(",", ":"))
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(code: str) -> bytes:
    data = code.strip().replace("-", "+").replace("_", "/")
    data += "=" * (-len(data) % 4)
    return base64.b64decode(data, validate=True)


def _shape_id(payload: Dict[str, Any], key: str) -> ShapeID:
    value = payload.get(key)
    if value is None:
        raise DecodeError(f"Missing shape id {key!r}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Shape id {key!r} must be an integer, got {value!r}")
    return value


def _color(payload: Dict[str, Any], key: str, current: Color) -> Color:
    value = payload.get(key)
    if not value:
        return current
    try:
        return hex_to_rgb(value)
    except InvalidArgument as e:
        raise DecodeError(f"Bad color {key!r}: {e}") from e


def payload_to_design(payload: Any, current: EmblemDesign) -> EmblemDesign:
    """Validate a decoded record and hydrate it on top of ``current``.

    Shape ids are required. Falsy colors keep ``current``'s colors and
    absent flip fields mean "not flipped".
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"Design code must hold an object, got {type(payload).__name__}")
    return replace(
        current,
        foreground_id=_shape_id(payload, "f"),
        background_id=_shape_id(payload, "b"),
        background_color=_color(payload, "cb", current.background_color),
        foreground1_color=_color(payload, "c1", current.foreground1_color),
        foreground2_color=_color(payload, "c2", current.foreground2_color),
        foreground_flip=FlipState(bool(payload.get("fh")), bool(payload.get("fv"))),
        background_flip=FlipState(bool(payload.get("bh")), bool(payload.get("bv"))),
    )


def decode(code: str, current: Optional[EmblemDesign] = None) -> EmblemDesign:
    """Parse a share code into a new design.

    Arguments:
        code: Share code as produced by :func:`encode`.
        current: Design supplying colors the code leaves out. Never modified.

    Shape ids must be JSON integers; string or float ids such as ``"3"`` or
    ``3.0`` are rejected rather than coerced.

    Raises:
        DecodeError: For any malformed or incomplete code.
    """
    base = current if current is not None else DEFAULT_DESIGN
    try:
        payload = json.loads(_b64decode(code).decode("utf-8"))
        return payload_to_design(payload, base)
    except DecodeError as e:
        logger.warning("Rejected design code: %s", e)
        raise
    except (AttributeError, binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.warning("Rejected design code: %s", e)
        raise DecodeError(f"Invalid design code: {e}") from e
