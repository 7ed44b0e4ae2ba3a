from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import streamlit as st

from emblem_designer.assets import DEFAULT_ASSET_ROOT
from emblem_designer.design import DEFAULT_DESIGN
from emblem_designer.renderer import BrightnessParams, RenderConfig
from emblem_designer.types import ResolutionMode


@dataclass(frozen=True)
class AppConfig:
    asset_root: str = DEFAULT_ASSET_ROOT
    render: RenderConfig = field(default_factory=RenderConfig)
    resolution_mode: ResolutionMode = ResolutionMode.SNAP
    seed: int = 0


def set_default_config() -> None:
    if "config" not in st.session_state:
        st.session_state["config"] = AppConfig()
        st.session_state["design"] = DEFAULT_DESIGN
        st.session_state["seed_counter"] = 0


def brightness_section(current: RenderConfig) -> RenderConfig:
    st.subheader("Brightness")
    enabled: bool = st.checkbox(
        "Brightness modulation", value=current.brightness_enabled, key="brightness"
    )
    params = current.params
    strength: float = st.slider("Strength", 0.0, 2.0, params.strength, 0.05, key="strength")
    gamma: float = st.slider("Gamma", 0.1, 3.0, params.gamma, 0.05, key="gamma")
    lift: float = st.slider("Lift", 0.0, 1.0, params.lift, 0.05, key="lift")
    color_boost: float = st.slider(
        "Color boost", 0.5, 3.0, params.color_boost, 0.05, key="color_boost"
    )
    size: int = st.select_slider(
        "Export size", options=[64, 128, 256, 512], value=current.size, key="size"
    )
    return RenderConfig(
        size=size,
        params=BrightnessParams(
            strength=strength, gamma=gamma, lift=lift, color_boost=color_boost
        ),
        brightness_enabled=enabled,
    )


def get_config_from_widgets() -> AppConfig:
    config: AppConfig = st.session_state["config"]

    st.subheader("Assets")
    asset_root: str = st.text_input("Asset directory", config.asset_root, key="asset_root")

    render = brightness_section(config.render)

    st.subheader("Custom colors")
    modes: List[str] = [m.value for m in ResolutionMode]
    mode_label: str = st.selectbox(
        "Off-palette colors",
        modes,
        index=modes.index(config.resolution_mode.value),
        key="resolution_mode",
    )

    st.subheader("Random seed")
    seed: int = st.number_input("Random seed", min_value=0, value=config.seed, key="seed")

    return AppConfig(
        asset_root=asset_root,
        render=render,
        resolution_mode=ResolutionMode(mode_label),
        seed=seed,
    )
