"""Resolve a merged theme document into a concrete Theme.

Resolution never raises: each field falls back to a structural default and
appends a warning when its value cannot be used.
"""

from __future__ import annotations

from pathlib import Path

from nowplaying.skins.constants import (
    ASSETS_DIR_NAME,
    DEFAULT_BODY_SIZE,
    DEFAULT_ICON_SCALE,
    DEFAULT_RADIUS,
    DEFAULT_THUMB_IMAGE_SIZE,
    DEFAULT_THUMB_RADIUS,
    DEFAULT_TITLE_SIZE,
    DEFAULT_TRACK_THICKNESS,
    RADIUS_VAR,
    SIZE_EPSILON,
    THEME_ENGINE_VERSION,
    THUMB_RADIUS_VAR,
)
from nowplaying.skins.models import (
    AreaBackground,
    AreaStyle,
    ButtonStyle,
    CircleThumb,
    Components,
    GradientBackground,
    GradientDirection,
    IconStyle,
    ImageThumb,
    SliderStyle,
    SliderThumb,
    SolidBackground,
    TextStyle,
    Theme,
    ThumbnailOverlay,
    ThumbnailStyle,
)
from nowplaying.skins.theme_document import (
    AreaConfig,
    BackgroundTable,
    ButtonConfig,
    IconConfig,
    OverlayImage,
    RawThemeDocument,
    SliderConfig,
    TextConfig,
    ThumbnailConfig,
)
from nowplaying.skins.tokens import TokenContext, build_token_context, resolve_tokens
from nowplaying.skins.values import (
    TRANSPARENT,
    WHITE,
    Color,
    ColorParseError,
    NumberParseError,
    parse_color,
    parse_number,
)

AREA_BACKGROUND = Color.rgb(32, 32, 32)
ACCENT = Color.rgb(0, 120, 212)
ACCENT_HOVER = Color.rgb(15, 108, 189)
ACCENT_ACTIVE = Color.rgb(17, 94, 163)
TRACK_BACKGROUND = Color.rgb(64, 64, 64)


def resolve_theme(document: RawThemeDocument, skin_dir: Path, warnings: list[str]) -> Theme:
    """Resolve `document` for the skin at `skin_dir`, appending to `warnings`."""
    context = build_token_context(document.colors, document.vars, warnings)

    colors: dict[str, Color] = {}
    for key, value in context.colors.items():
        try:
            colors[key] = parse_color(value)
        except ColorParseError as exc:
            warnings.append(f"colors.{key}: {exc}; using fallback #FFFFFF")
            colors[key] = WHITE

    numbers: dict[str, float] = {}
    for key, value in context.vars.items():
        try:
            numbers[key] = parse_number(value)
        except NumberParseError:
            warnings.append(f"Variable {key} could not be parsed as number: {value}")

    fields = _FieldResolver(context, colors, warnings)
    radius = numbers.get(RADIUS_VAR, DEFAULT_RADIUS)
    thumb_radius = numbers.get(THUMB_RADIUS_VAR, DEFAULT_THUMB_RADIUS)
    sections = document.components
    assets = skin_dir / ASSETS_DIR_NAME

    components = Components(
        root=_resolve_area(sections.root, fields, radius),
        panel=_resolve_area(sections.panel, fields, radius),
        button=_resolve_button(sections.button, fields, radius),
        button_icon=_resolve_icon(sections.button.icon, fields),
        slider=_resolve_slider(sections.slider, fields, thumb_radius, assets),
        thumbnail=_resolve_thumbnail(sections.thumbnail, fields, radius, assets),
        text_title=_resolve_text(sections.text.title, fields, DEFAULT_TITLE_SIZE),
        text_body=_resolve_text(sections.text.body, fields, DEFAULT_BODY_SIZE),
    )

    meta = document.meta
    name = meta.name or skin_dir.name or skin_dir.resolve().name
    if document.transparent_background is not None:
        transparent_background = document.transparent_background
    else:
        transparent_background = bool(meta.transparent_background)

    return Theme(
        name=name,
        display_name=meta.display_name or name,
        engine_version=meta.engine or THEME_ENGINE_VERSION,
        asset_root=assets,
        colors=colors,
        vars=numbers,
        use_gradient=True if document.use_gradient is None else document.use_gradient,
        disable_vinyl_thumbnail=bool(meta.disable_vinyl_thumbnail),
        transparent_background=transparent_background,
        components=components,
    )


class _FieldResolver:
    """Token-resolves and parses individual component fields."""

    def __init__(self, context: TokenContext, colors: dict[str, Color], warnings: list[str]) -> None:
        self._context = context
        self._colors = colors
        self.warnings = warnings

    def text(self, value: str) -> str:
        return resolve_tokens(value, self._context, self.warnings)

    def color(self, value: str | None, fallback: Color) -> Color:
        if value is None:
            return fallback
        return self.color_string(value)

    def color_string(self, value: str) -> Color:
        resolved = self.text(value)
        known = self._colors.get(resolved)
        if known is not None:
            return known
        try:
            return parse_color(resolved)
        except ColorParseError as exc:
            self.warnings.append(f"{resolved}: {exc}; using transparent")
            return TRANSPARENT

    def number(self, value: str | None, fallback: float, *, minimum: float | None = 0.0) -> float:
        if value is None:
            return fallback
        resolved = self.text(value)
        try:
            number = parse_number(resolved)
        except NumberParseError:
            self.warnings.append(f"Could not parse number value: {resolved}")
            return fallback
        if minimum is not None:
            number = max(minimum, number)
        return number


def _resolve_area(cfg: AreaConfig, fields: _FieldResolver, radius: float) -> AreaStyle:
    background = _resolve_background(cfg.background, fields)
    border_color = fields.color(cfg.border_color, TRANSPARENT)
    border_width = fields.number(cfg.border_width, 0.0)
    if cfg.show_border is None:
        show_border = border_width > SIZE_EPSILON and not border_color.is_transparent
    else:
        show_border = cfg.show_border
    return AreaStyle(
        background=background or SolidBackground(AREA_BACKGROUND),
        foreground=fields.color(cfg.foreground, WHITE),
        border_color=border_color,
        border_radius=fields.number(cfg.border_radius, radius),
        border_width=border_width,
        show_border=show_border,
    )


def _resolve_background(
    value: str | BackgroundTable | None,
    fields: _FieldResolver,
) -> AreaBackground | None:
    if value is None:
        return None
    if isinstance(value, str):
        return SolidBackground(fields.color_string(value))

    kind = value.kind.strip().lower() if value.kind is not None else None
    if kind is None:
        if value.start is not None or value.end is not None:
            kind = "gradient"
        elif value.color is not None:
            kind = "solid"
        else:
            fields.warnings.append("Background table requires either 'color' or 'start'/'end'")
            return None

    if kind == "solid":
        if value.color is None:
            fields.warnings.append("Solid background requires 'color' value")
            return None
        return SolidBackground(fields.color_string(value.color))
    if kind == "gradient":
        return _resolve_gradient(value, fields)
    fields.warnings.append(f"Unknown background type '{kind}'")
    return None


def _resolve_gradient(table: BackgroundTable, fields: _FieldResolver) -> AreaBackground | None:
    if table.start is None:
        fields.warnings.append("Gradient background missing 'start' color")
        return None
    if table.end is None:
        fields.warnings.append("Gradient background missing 'end' color")
        return None

    start = fields.color_string(table.start)
    end = fields.color_string(table.end)
    direction = GradientDirection.VERTICAL
    if table.direction is not None:
        raw_direction = fields.text(table.direction).strip().lower()
        try:
            direction = GradientDirection(raw_direction)
        except ValueError:
            fields.warnings.append(f"Unknown gradient direction '{raw_direction}'; using vertical")

    if start == end:
        return SolidBackground(start)
    return GradientBackground(start=start, end=end, direction=direction)


def _resolve_button(cfg: ButtonConfig, fields: _FieldResolver, radius: float) -> ButtonStyle:
    return ButtonStyle(
        background=fields.color(cfg.background, ACCENT),
        foreground=fields.color(cfg.foreground, WHITE),
        hover_background=fields.color(cfg.hover_background, ACCENT_HOVER),
        active_background=fields.color(cfg.active_background, ACCENT_ACTIVE),
        border_color=fields.color(cfg.border_color, TRANSPARENT),
        border_radius=fields.number(cfg.border_radius, radius),
        border_width=fields.number(cfg.border_width, 0.0),
    )


def _resolve_icon(cfg: IconConfig, fields: _FieldResolver) -> IconStyle:
    return IconStyle(
        color=fields.color(cfg.color, WHITE),
        size_scale=fields.number(cfg.size_scale, DEFAULT_ICON_SCALE),
    )


def _resolve_slider(
    cfg: SliderConfig,
    fields: _FieldResolver,
    thumb_radius: float,
    assets: Path,
) -> SliderStyle:
    track_fill = fields.color(cfg.track_fill, ACCENT)
    thumb_color = fields.color(cfg.thumb_color, track_fill)
    shape = fields.text(cfg.thumb_shape).strip().lower() if cfg.thumb_shape is not None else "circle"

    thumb: SliderThumb
    if shape == "image":
        image_name = fields.text(cfg.thumb_image).strip() if cfg.thumb_image is not None else ""
        path = _asset_path(assets, image_name)
        if not image_name:
            fields.warnings.append("Slider thumb image requested but no image provided")
            thumb = CircleThumb(color=thumb_color, radius=thumb_radius)
        elif path is None:
            fields.warnings.append(
                f"Slider thumb image {image_name} is outside {assets}; reverting to circle thumb"
            )
            thumb = CircleThumb(color=thumb_color, radius=thumb_radius)
        elif not path.exists():
            fields.warnings.append(
                f"Slider thumb image {path} not found; reverting to circle thumb"
            )
            thumb = CircleThumb(color=thumb_color, radius=thumb_radius)
        else:
            thumb = ImageThumb(
                color=thumb_color,
                path=path,
                size=fields.number(cfg.thumb_size, DEFAULT_THUMB_IMAGE_SIZE),
            )
    else:
        thumb = CircleThumb(
            color=thumb_color,
            radius=fields.number(cfg.thumb_radius, thumb_radius),
        )

    return SliderStyle(
        track_fill=track_fill,
        track_background=fields.color(cfg.track_background, TRACK_BACKGROUND),
        track_thickness=fields.number(cfg.track_thickness, DEFAULT_TRACK_THICKNESS),
        thumb=thumb,
    )


def _resolve_thumbnail(
    cfg: ThumbnailConfig,
    fields: _FieldResolver,
    radius: float,
    assets: Path,
) -> ThumbnailStyle:
    overlays: list[ThumbnailOverlay] = []
    for entry in cfg.overlay_images or ():
        overlay = _resolve_overlay(entry, fields, assets)
        if overlay is not None:
            overlays.append(overlay)
    if cfg.border_image is not None:
        border = _resolve_overlay(OverlayImage(path=cfg.border_image), fields, assets)
        if border is not None:
            overlays.append(border)

    return ThumbnailStyle(
        corner_radius=fields.number(cfg.corner_radius, radius),
        stroke_color=fields.color(cfg.stroke_color, TRANSPARENT),
        stroke_width=fields.number(cfg.stroke_width, 0.0),
        overlays=tuple(overlays),
    )


def _resolve_overlay(
    entry: OverlayImage,
    fields: _FieldResolver,
    assets: Path,
) -> ThumbnailOverlay | None:
    name = fields.text(entry.path).strip()
    if not name:
        return None
    path = _asset_path(assets, name)
    if path is None:
        fields.warnings.append(f"Thumbnail overlay image {name} is outside {assets}; skipping")
        return None
    if not path.exists():
        fields.warnings.append(f"Thumbnail overlay image {path} not found; skipping")
        return None
    return ThumbnailOverlay(
        path=path,
        offset_x=_overlay_offset(entry.offset_x, "offset_x", fields),
        offset_y=_overlay_offset(entry.offset_y, "offset_y", fields),
    )


def _asset_path(assets: Path, name: str) -> Path | None:
    """Resolve `name` below `assets`; None when it points outside that directory."""
    try:
        root = assets.resolve()
        path = (assets / name).resolve()
    except (OSError, RuntimeError, ValueError):
        return None
    return path if path.is_relative_to(root) else None


def _overlay_offset(value: str | None, axis: str, fields: _FieldResolver) -> float:
    if value is None:
        return 0.0
    resolved = fields.text(value)
    try:
        return parse_number(resolved)
    except NumberParseError:
        fields.warnings.append(f"Could not parse thumbnail overlay {axis}: {resolved}; using 0")
        return 0.0


def _resolve_text(cfg: TextConfig, fields: _FieldResolver, default_size: float) -> TextStyle:
    return TextStyle(
        color=fields.color(cfg.color, WHITE),
        size=fields.number(cfg.size, default_size),
    )
