"""Resolved skin models handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from nowplaying.skins.values import Color

# -- theme --


class GradientDirection(Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True, slots=True)
class SolidBackground:
    color: Color

    @property
    def primary_color(self) -> Color:
        return self.color


@dataclass(frozen=True, slots=True)
class GradientBackground:
    start: Color
    end: Color
    direction: GradientDirection = GradientDirection.VERTICAL

    @property
    def primary_color(self) -> Color:
        return self.start


AreaBackground = Union[SolidBackground, GradientBackground]


@dataclass(frozen=True, slots=True)
class AreaStyle:
    background: AreaBackground
    foreground: Color
    border_color: Color
    border_radius: float
    border_width: float
    show_border: bool

    @property
    def background_color(self) -> Color:
        return self.background.primary_color


@dataclass(frozen=True, slots=True)
class ButtonStyle:
    background: Color
    foreground: Color
    hover_background: Color
    active_background: Color
    border_color: Color
    border_radius: float
    border_width: float


@dataclass(frozen=True, slots=True)
class IconStyle:
    color: Color
    size_scale: float


@dataclass(frozen=True, slots=True)
class CircleThumb:
    color: Color
    radius: float


@dataclass(frozen=True, slots=True)
class ImageThumb:
    color: Color
    path: Path
    size: float


SliderThumb = Union[CircleThumb, ImageThumb]


@dataclass(frozen=True, slots=True)
class SliderStyle:
    track_fill: Color
    track_background: Color
    track_thickness: float
    thumb: SliderThumb


@dataclass(frozen=True, slots=True)
class ThumbnailOverlay:
    path: Path
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True, slots=True)
class ThumbnailStyle:
    corner_radius: float
    stroke_color: Color
    stroke_width: float
    overlays: tuple[ThumbnailOverlay, ...] = ()


@dataclass(frozen=True, slots=True)
class TextStyle:
    color: Color
    size: float


@dataclass(frozen=True, slots=True)
class Components:
    root: AreaStyle
    panel: AreaStyle
    button: ButtonStyle
    button_icon: IconStyle
    slider: SliderStyle
    thumbnail: ThumbnailStyle
    text_title: TextStyle
    text_body: TextStyle


@dataclass(frozen=True, slots=True)
class Theme:
    """A fully resolved theme; every field is concrete."""

    name: str
    display_name: str
    engine_version: str
    asset_root: Path
    colors: dict[str, Color]
    vars: dict[str, float]
    use_gradient: bool
    disable_vinyl_thumbnail: bool
    transparent_background: bool
    components: Components


# -- layout --


class LayoutAlign(Enum):
    START = "start"
    CENTER = "center"
    END = "end"


class LayoutComponent(Enum):
    """Closed set of renderable layout slots."""

    THUMBNAIL = "thumbnail"
    TITLE = "title"
    METADATA_GROUP = "metadata_group"
    METADATA_ARTIST = "metadata_artist"
    METADATA_ALBUM = "metadata_album"
    METADATA_STATE = "metadata_state"
    PLAYBACK_CONTROLS_GROUP = "playback_controls_group"
    PLAYBACK_BUTTON_PREVIOUS = "playback_button_previous"
    PLAYBACK_BUTTON_PLAY_PAUSE = "playback_button_play_pause"
    PLAYBACK_BUTTON_NEXT = "playback_button_next"
    PLAYBACK_BUTTON_STOP = "playback_button_stop"
    TIMELINE = "timeline"
    SKIN_WARNINGS = "skin_warnings"
    SKIN_ERROR = "skin_error"
    NOW_PLAYING_ERROR = "now_playing_error"
    THUMBNAIL_ERROR = "thumbnail_error"

    @property
    def renders_nothing(self) -> bool:
        # The stop button was retired; layouts may still name it.
        return self is LayoutComponent.PLAYBACK_BUTTON_STOP


@dataclass(frozen=True, slots=True)
class ContainerNode:
    spacing: float
    align: LayoutAlign
    fill: bool
    children: tuple[LayoutNode, ...]


@dataclass(frozen=True, slots=True)
class RowNode(ContainerNode):
    pass


@dataclass(frozen=True, slots=True)
class ColumnNode(ContainerNode):
    pass


@dataclass(frozen=True, slots=True)
class ComponentNode:
    component: LayoutComponent
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SpacerNode:
    size: float


LayoutNode = Union[RowNode, ColumnNode, ComponentNode, SpacerNode]


@dataclass(frozen=True, slots=True)
class LayoutVariant:
    id: str
    display_name: str
    root: LayoutNode


@dataclass(frozen=True, slots=True)
class LayoutSet:
    """Selectable layout variants; never empty."""

    default_variant: str
    variants: tuple[LayoutVariant, ...]

    def get(self, variant_id: str) -> LayoutVariant | None:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def index_of(self, variant_id: str | None) -> int | None:
        if variant_id is None:
            return None
        for index, variant in enumerate(self.variants):
            if variant.id == variant_id:
                return index
        return None


# -- loading results --


@dataclass(frozen=True, slots=True)
class LoadedTheme:
    theme: Theme
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LoadedLayout:
    layout: LayoutSet
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolvedSkin:
    theme: Theme
    layout: LayoutSet
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SkinInfo:
    """Display-ready skin metadata."""

    id: str
    display_name: str
    path: Path
