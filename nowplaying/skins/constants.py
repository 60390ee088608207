"""Skin engine constants."""

from __future__ import annotations

THEME_ENGINE_VERSION = "1"
LAYOUT_ENGINE_VERSION = "1"

THEME_FILE_NAME = "theme.toml"
LAYOUT_FILE_NAME = "layout.toml"
ASSETS_DIR_NAME = "assets"

MAX_TOKEN_PASSES = 5
MAX_TOKEN_VALUE_LENGTH = 4096
MAX_LAYOUT_DEPTH = 32
TOKEN_NAMESPACES: tuple[str, ...] = (
    "colors",
    "vars",
)

DEFAULT_RADIUS = 8.0
DEFAULT_THUMB_RADIUS = 8.0
DEFAULT_THUMB_IMAGE_SIZE = 24.0
DEFAULT_TRACK_THICKNESS = 4.0
DEFAULT_ICON_SCALE = 1.0
DEFAULT_TITLE_SIZE = 20.0
DEFAULT_BODY_SIZE = 16.0

DEFAULT_CONTAINER_SPACING = 8.0
DEFAULT_SPACER_SIZE = 8.0
SIZE_EPSILON = 1e-6

RADIUS_VAR = "radius"
THUMB_RADIUS_VAR = "slider_thumb_radius"
