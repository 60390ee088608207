"""Skin engine exports."""

from nowplaying.skins.loader import (
    load_layout_from_dir,
    load_theme_from_dir,
    resolve_builtin_skin,
    resolve_skin,
)
from nowplaying.skins.manager import SkinManager
from nowplaying.skins.models import (
    LayoutSet,
    LayoutVariant,
    LoadedLayout,
    LoadedTheme,
    ResolvedSkin,
    SkinInfo,
    Theme,
)
from nowplaying.skins.registry import SkinRegistry

__all__ = [
    "LayoutSet",
    "LayoutVariant",
    "LoadedLayout",
    "LoadedTheme",
    "ResolvedSkin",
    "SkinInfo",
    "SkinManager",
    "SkinRegistry",
    "Theme",
    "load_layout_from_dir",
    "load_theme_from_dir",
    "resolve_builtin_skin",
    "resolve_skin",
]
