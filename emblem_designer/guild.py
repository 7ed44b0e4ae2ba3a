"""Import a design from a guild emblem record.

The record is the ``emblem`` object of a guild lookup::

    {
        "background": {"id": 27, "colors": [473]},
        "foreground": {"id": 114, "colors": [673, 71]},
        "flags": ["FlipBackgroundHorizontal", "FlipForegroundVertical"],
    }

Color ids go through a :class:`~emblem_designer.colors.ColorResolver`; a color
that cannot be resolved keeps the slot's current color.
"""

import json
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Sequence

from emblem_designer.colors import ColorResolver
from emblem_designer.design import EmblemDesign, FlipState
from emblem_designer.errors import DecodeError
from emblem_designer.types import ColorRecord, ColorRef, ColorSourceFn

FLIP_FOREGROUND_HORIZONTAL = "FlipForegroundHorizontal"
FLIP_FOREGROUND_VERTICAL = "FlipForegroundVertical"
FLIP_BACKGROUND_HORIZONTAL = "FlipBackgroundHorizontal"
FLIP_BACKGROUND_VERTICAL = "FlipBackgroundVertical"


def _color_ref(colors: Sequence[Any], idx: int) -> Optional[ColorRef]:
    return colors[idx] if idx < len(colors) else None


def _group(emblem: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    group = emblem.get(key)
    if not isinstance(group, Mapping) or group.get("id") is None:
        raise DecodeError(f"Guild emblem has no {key} id")
    return group


def design_from_guild_emblem(
    emblem: Mapping[str, Any],
    resolver: ColorResolver,
    current: EmblemDesign,
) -> EmblemDesign:
    """Build a design from a guild emblem record on top of ``current``."""
    background = _group(emblem, "background")
    foreground = _group(emblem, "foreground")
    bg_colors = background.get("colors") or []
    fg_colors = foreground.get("colors") or []
    flags = set(emblem.get("flags") or [])

    return replace(
        current,
        background_id=background["id"],
        foreground_id=foreground["id"],
        background_color=resolver.resolve_or(
            _color_ref(bg_colors, 0), current.background_color
        ),
        foreground1_color=resolver.resolve_or(
            _color_ref(fg_colors, 0), current.foreground1_color
        ),
        foreground2_color=resolver.resolve_or(
            _color_ref(fg_colors, 1), current.foreground2_color
        ),
        foreground_flip=FlipState(
            FLIP_FOREGROUND_HORIZONTAL in flags, FLIP_FOREGROUND_VERTICAL in flags
        ),
        background_flip=FlipState(
            FLIP_BACKGROUND_HORIZONTAL in flags, FLIP_BACKGROUND_VERTICAL in flags
        ),
    )


def parse_guild_emblem(text: str) -> Mapping[str, Any]:
    """Parse a guild emblem from JSON.

    Accepts either the bare emblem object or a whole guild record carrying it
    under ``"emblem"``.
    """
    try:
        record = json.loads(text)
    except ValueError as e:
        raise DecodeError(f"Guild emblem is not valid JSON: {e}") from e
    if isinstance(record, Mapping) and isinstance(record.get("emblem"), Mapping):
        record = record["emblem"]
    if not isinstance(record, Mapping):
        raise DecodeError("Guild emblem must be a JSON object")
    return record


def parse_dye_records(text: str) -> Dict[ColorRef, ColorRecord]:
    """Parse a JSON dye catalog into color records keyed by color id.

    Either a list of records with an ``"id"`` field or an object mapping ids to
    records. Blank input is an empty catalog.
    """
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except ValueError as e:
        raise DecodeError(f"Dye records are not valid JSON: {e}") from e

    if isinstance(data, list):
        items = [(record.get("id"), record) for record in data if isinstance(record, Mapping)]
    elif isinstance(data, Mapping):
        items = list(data.items())
    else:
        raise DecodeError("Dye records must be a JSON list or object")

    records: Dict[ColorRef, ColorRecord] = {}
    for key, record in items:
        try:
            records[int(key)] = record
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid dye id {key!r}") from e
    return records


def dye_source(records: Mapping[ColorRef, ColorRecord]) -> ColorSourceFn:
    """Color source backed by an in-memory dye catalog."""
    return records.get
