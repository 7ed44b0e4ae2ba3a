import random
from dataclasses import replace
from typing import Dict, Optional, Tuple

import streamlit as st

from config import AppConfig, get_config_from_widgets, set_default_config
from emblem_designer.assets import DirectoryAssetProvider
from emblem_designer.codec import decode, encode
from emblem_designer.colors import ColorResolver
from emblem_designer.design import (
    EmblemDesign,
    color_of,
    export_filename,
    randomize_colors,
    randomize_shapes,
    toggle_flip,
    with_color,
)
from emblem_designer.errors import DecodeError, InvalidArgument
from emblem_designer.guild import (
    design_from_guild_emblem,
    dye_source,
    parse_dye_records,
    parse_guild_emblem,
)
from emblem_designer.palette import palette_index, palette_rows
from emblem_designer.renderer import EmblemRenderer, to_png_bytes
from emblem_designer.types import FlipAxis, ResolutionMode, ShapeKind, Slot
from emblem_designer.utils.color import rgb_to_hex

st.set_page_config(layout="wide", page_title="Emblem Designer")

SLOT_LABELS = {
    Slot.BACKGROUND: "Background",
    Slot.FOREGROUND1: "Primary",
    Slot.FOREGROUND2: "Secondary",
}

SHAPE_FIELDS: Dict[ShapeKind, str] = {
    ShapeKind.FOREGROUND: "foreground_id",
    ShapeKind.BACKGROUND: "background_id",
}


def shape_key(kind: ShapeKind) -> str:
    return f"shape_{kind.value}"


def set_notice(section: str, level: str, message: str) -> None:
    st.session_state[f"{section}_notice"] = (level, message)


def show_notice(section: str) -> None:
    notice: Optional[Tuple[str, str]] = st.session_state.pop(f"{section}_notice", None)
    if notice is None:
        return
    level, message = notice
    if level == "success":
        st.success(message)
    else:
        st.error(message)


# --------- Callbacks ---------
# These run before the script body, so a replaced design is already in
# session state when the shape selectboxes are drawn.


def on_shape_change(kind: ShapeKind) -> None:
    design: EmblemDesign = st.session_state["design"]
    chosen = st.session_state[shape_key(kind)]
    st.session_state["design"] = replace(design, **{SHAPE_FIELDS[kind]: chosen})


def on_random_design(provider: DirectoryAssetProvider, seed: int) -> None:
    st.session_state["seed_counter"] += 1
    rng = random.Random(seed + st.session_state["seed_counter"])
    st.session_state["design"] = randomize_shapes(
        st.session_state["design"],
        provider.shape_ids(ShapeKind.BACKGROUND),
        provider.shape_ids(ShapeKind.FOREGROUND),
        rng,
    )


def on_load_code() -> None:
    code: str = st.session_state.get("code_input", "")
    if not code.strip():
        set_notice("code", "error", "Paste an emblem code first")
        return
    try:
        st.session_state["design"] = decode(code, st.session_state["design"])
    except DecodeError:
        set_notice("code", "error", "Invalid emblem code")
        return
    set_notice("code", "success", "Emblem loaded!")


def on_import_guild(mode: ResolutionMode) -> None:
    emblem_text: str = st.session_state.get("guild_emblem", "")
    if not emblem_text.strip():
        set_notice("guild", "error", "Paste a guild emblem first")
        return
    try:
        emblem = parse_guild_emblem(emblem_text)
        dyes = parse_dye_records(st.session_state.get("guild_dyes", ""))
        resolver = ColorResolver(dye_source(dyes), mode)
        st.session_state["design"] = design_from_guild_emblem(
            emblem, resolver, st.session_state["design"]
        )
    except DecodeError as e:
        set_notice("guild", "error", str(e))
        return
    set_notice("guild", "success", "Guild emblem loaded!")


# --------- Sections ---------


def shape_section(design: EmblemDesign, provider: DirectoryAssetProvider) -> EmblemDesign:
    for kind, label in ((ShapeKind.FOREGROUND, "Foreground"), (ShapeKind.BACKGROUND, "Background")):
        ids = provider.shape_ids(kind)
        if not ids:
            st.warning(f"No {label.lower()} shapes under {provider.asset_root}")
            continue
        key = shape_key(kind)
        current = getattr(design, SHAPE_FIELDS[kind])
        if current in ids:
            st.session_state[key] = current
        st.selectbox(label, ids, key=key, on_change=on_shape_change, args=(kind,))

        h_col, v_col = st.columns([1, 1])
        with h_col:
            if st.button(f"↔ Flip {label.lower()}", key=f"flip_h_{kind.value}", use_container_width=True):
                design = toggle_flip(design, kind, FlipAxis.HORIZONTAL)
        with v_col:
            if st.button(f"↕ Flip {label.lower()}", key=f"flip_v_{kind.value}", use_container_width=True):
                design = toggle_flip(design, kind, FlipAxis.VERTICAL)
    return design


def color_section(design: EmblemDesign, resolver: ColorResolver) -> EmblemDesign:
    slot_name: str = st.radio(
        "Color slot",
        [s.value for s in Slot],
        format_func=lambda s: SLOT_LABELS[Slot(s)],
        horizontal=True,
        key="active_slot",
    )
    slot = Slot(slot_name)
    current_idx = palette_index(color_of(design, slot))

    idx = 0
    for row in palette_rows():
        cols = st.columns(len(row))
        for col, color in zip(cols, row):
            with col:
                marker = "●" if idx == current_idx else " "
                if st.button(f"{marker} {rgb_to_hex(color)}", key=f"swatch_{idx}", use_container_width=True):
                    design = with_color(design, slot, color)
            idx += 1

    custom: str = st.text_input("Custom hex", placeholder="#rrggbb", key="custom_hex")
    if st.button("Apply hex", key="apply_hex"):
        try:
            design = with_color(design, slot, resolver.resolve_hex(custom))
        except InvalidArgument as e:
            st.error(str(e))
    return design


def code_section(design: EmblemDesign) -> None:
    st.code(encode(design), language=None)
    st.text_input("Load code", key="code_input")
    st.button("Load", key="load_code", on_click=on_load_code)
    show_notice("code")


def guild_section(mode: ResolutionMode) -> None:
    with st.expander("Import guild emblem"):
        st.text_area("Guild emblem (JSON)", key="guild_emblem")
        st.text_area("Dye records (JSON, optional)", key="guild_dyes")
        st.button("Import", key="import_guild", on_click=on_import_guild, args=(mode,))
        show_notice("guild")


# --------- Main App ---------

set_default_config()
tab_design, tab_config = st.tabs(["Design", "Config"])

with tab_config:
    config: AppConfig = get_config_from_widgets()
    st.session_state["config"] = config

provider = DirectoryAssetProvider(config.asset_root)
# Only custom hex input goes through this resolver; guild imports build their own.
resolver = ColorResolver(dye_source({}), config.resolution_mode)
renderer = EmblemRenderer(config.render)
design: EmblemDesign = st.session_state["design"]

with tab_design:
    left_col, middle_col, right_col = st.columns([0.3, 0.4, 0.3])

    with left_col:
        design = shape_section(design, provider)
        st.button(
            "🎲 Random design",
            key="random_design",
            on_click=on_random_design,
            args=(provider, config.seed),
            use_container_width=True,
        )

    with right_col:
        design = color_section(design, resolver)
        if st.button("🎨 Random colors", key="random_colors", use_container_width=True):
            st.session_state["seed_counter"] += 1
            rng = random.Random(config.seed + st.session_state["seed_counter"])
            design = randomize_colors(design, rng)
        st.divider()
        code_section(design)
        guild_section(config.resolution_mode)

    st.session_state["design"] = design

    with middle_col:
        image = renderer.render(design, provider.assets_for(design, config.render.size))
        st.image(image, use_container_width=True)
        st.download_button(
            "💾 Save image",
            data=to_png_bytes(image),
            file_name=export_filename(design),
            mime="image/png",
            use_container_width=True,
        )
