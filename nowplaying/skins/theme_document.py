"""Raw theme document schema.

Every leaf is optional; `None` means "inherit from the built-in document".
Numeric and color leaves stay strings so they may carry tokens.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from functools import lru_cache
from typing import Any, Mapping, get_args, get_type_hints

from nowplaying.errors import DocumentError


class Section:
    """Marker base for nested tables that merge field by field."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class ThemeMeta(Section):
    engine: str | None = None
    name: str | None = None
    display_name: str | None = None
    disable_vinyl_thumbnail: bool | None = None
    transparent_background: bool | None = None


@dataclass(frozen=True, slots=True)
class BackgroundTable:
    """Table form of an area background: solid color or two-stop gradient."""

    kind: str | None = None
    color: str | None = None
    start: str | None = None
    end: str | None = None
    direction: str | None = None


@dataclass(frozen=True, slots=True)
class AreaConfig(Section):
    background: str | BackgroundTable | None = None
    foreground: str | None = None
    border_color: str | None = None
    border_radius: str | None = None
    border_width: str | None = None
    show_border: bool | None = None


@dataclass(frozen=True, slots=True)
class IconConfig(Section):
    color: str | None = None
    size_scale: str | None = None


@dataclass(frozen=True, slots=True)
class ButtonConfig(Section):
    background: str | None = None
    foreground: str | None = None
    hover_background: str | None = None
    active_background: str | None = None
    border_color: str | None = None
    border_radius: str | None = None
    border_width: str | None = None
    icon: IconConfig = field(default_factory=IconConfig)


@dataclass(frozen=True, slots=True)
class SliderConfig(Section):
    track_fill: str | None = None
    track_background: str | None = None
    track_thickness: str | None = None
    thumb_shape: str | None = None
    thumb_color: str | None = None
    thumb_radius: str | None = None
    thumb_size: str | None = None
    thumb_image: str | None = None


@dataclass(frozen=True, slots=True)
class OverlayImage:
    path: str
    offset_x: str | None = None
    offset_y: str | None = None


@dataclass(frozen=True, slots=True)
class ThumbnailConfig(Section):
    corner_radius: str | None = None
    border_image: str | None = None
    stroke_color: str | None = None
    stroke_width: str | None = None
    overlay_images: tuple[OverlayImage, ...] | None = None


@dataclass(frozen=True, slots=True)
class TextConfig(Section):
    color: str | None = None
    size: str | None = None


@dataclass(frozen=True, slots=True)
class TextComponents(Section):
    title: TextConfig = field(default_factory=TextConfig)
    body: TextConfig = field(default_factory=TextConfig)


@dataclass(frozen=True, slots=True)
class ComponentsConfig(Section):
    root: AreaConfig = field(default_factory=AreaConfig)
    panel: AreaConfig = field(default_factory=AreaConfig)
    button: ButtonConfig = field(default_factory=ButtonConfig)
    slider: SliderConfig = field(default_factory=SliderConfig)
    thumbnail: ThumbnailConfig = field(default_factory=ThumbnailConfig)
    text: TextComponents = field(default_factory=TextComponents)


@dataclass(frozen=True, slots=True)
class RawThemeDocument(Section):
    meta: ThemeMeta = field(default_factory=ThemeMeta)
    colors: dict[str, str] = field(default_factory=dict)
    vars: dict[str, str] = field(default_factory=dict)
    use_gradient: bool | None = None
    transparent_background: bool | None = None
    components: ComponentsConfig = field(default_factory=ComponentsConfig)


def parse_theme_document(data: Mapping[str, Any]) -> RawThemeDocument:
    """Build a RawThemeDocument from decoded TOML. Unknown keys are ignored."""
    components = _table(data, "components", "")
    text = _table(components, "text", "components")
    button = _table(components, "button", "components")
    return RawThemeDocument(
        meta=_leaves(ThemeMeta, _table(data, "meta", ""), "meta"),
        colors=_string_map(data, "colors"),
        vars=_string_map(data, "vars"),
        use_gradient=_opt_bool(data, "use_gradient", ""),
        transparent_background=_opt_bool(data, "transparent_background", ""),
        components=ComponentsConfig(
            root=_area(_table(components, "root", "components"), "components.root"),
            panel=_area(_table(components, "panel", "components"), "components.panel"),
            button=_leaves(
                ButtonConfig,
                button,
                "components.button",
                icon=_leaves(IconConfig, _table(button, "icon", "components.button"),
                             "components.button.icon"),
            ),
            slider=_leaves(SliderConfig, _table(components, "slider", "components"),
                           "components.slider"),
            thumbnail=_thumbnail(_table(components, "thumbnail", "components"),
                                 "components.thumbnail"),
            text=TextComponents(
                title=_leaves(TextConfig, _table(text, "title", "components.text"),
                              "components.text.title"),
                body=_leaves(TextConfig, _table(text, "body", "components.text"),
                             "components.text.body"),
            ),
        ),
    )


def _area(data: Mapping[str, Any], context: str) -> AreaConfig:
    raw = data.get("background")
    background: str | BackgroundTable | None
    if raw is None:
        background = None
    elif isinstance(raw, Mapping):
        background = BackgroundTable(
            kind=_opt_str(raw, "type", f"{context}.background"),
            color=_opt_str(raw, "color", f"{context}.background"),
            start=_opt_str(raw, "start", f"{context}.background"),
            end=_opt_str(raw, "end", f"{context}.background"),
            direction=_opt_str(raw, "direction", f"{context}.background"),
        )
    else:
        background = _opt_str(data, "background", context)
    return _leaves(AreaConfig, data, context, background=background)


def _thumbnail(data: Mapping[str, Any], context: str) -> ThumbnailConfig:
    raw = data.get("overlay_images")
    overlays: tuple[OverlayImage, ...] | None = None
    if raw is not None:
        if not isinstance(raw, list):
            raise DocumentError(f"{context}.overlay_images must be a list")
        entries: list[OverlayImage] = []
        for index, entry in enumerate(raw):
            entry_context = f"{context}.overlay_images[{index}]"
            if isinstance(entry, str):
                entries.append(OverlayImage(path=entry))
            elif isinstance(entry, Mapping):
                path = _opt_str(entry, "path", entry_context)
                if path is None:
                    raise DocumentError(f"{entry_context} is missing 'path'")
                entries.append(
                    OverlayImage(
                        path=path,
                        offset_x=_opt_str(entry, "offset_x", entry_context),
                        offset_y=_opt_str(entry, "offset_y", entry_context),
                    )
                )
            else:
                raise DocumentError(f"{entry_context} must be a string or a table")
        overlays = tuple(entries)
    return _leaves(ThumbnailConfig, data, context, overlay_images=overlays)


def _leaves(cls: type, data: Mapping[str, Any], context: str, **given: Any) -> Any:
    """Fill the plain optional string / bool fields of `cls` from `data`."""
    values: dict[str, Any] = dict(given)
    for name, kind in _leaf_kinds(cls):
        if name in values:
            continue
        if kind is bool:
            values[name] = _opt_bool(data, name, context)
        else:
            values[name] = _opt_str(data, name, context)
    return cls(**values)


@lru_cache(maxsize=None)
def _leaf_kinds(cls: type) -> tuple[tuple[str, type], ...]:
    """Return `(name, str | bool)` for each field of `cls` typed as an optional str or bool."""
    hints = get_type_hints(cls)
    kinds: list[tuple[str, type]] = []
    for item in fields(cls):
        args = set(get_args(hints[item.name]))
        for kind in (bool, str):
            if args == {kind, type(None)}:
                kinds.append((item.name, kind))
    return tuple(kinds)


def _table(data: Mapping[str, Any], key: str, context: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DocumentError(f"{_dotted(context, key)} must be a table")
    return value


def _opt_str(data: Mapping[str, Any], key: str, context: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise DocumentError(f"{_dotted(context, key)} must be a string")


def _opt_bool(data: Mapping[str, Any], key: str, context: str) -> bool | None:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise DocumentError(f"{_dotted(context, key)} must be a boolean")


def _string_map(data: Mapping[str, Any], key: str) -> dict[str, str]:
    table = _table(data, key, "")
    result: dict[str, str] = {}
    for name in table:
        value = _opt_str(table, name, key)
        if value is None:
            raise DocumentError(f"{key}.{name} must be a string")
        result[str(name)] = value
    return result


def _dotted(context: str, key: str) -> str:
    return f"{context}.{key}" if context else key
