"""Resolve a layout document into a LayoutSet of pruned variant trees."""

from __future__ import annotations

import logging

from nowplaying.errors import ErrorCode, SkinEngineError
from nowplaying.skins.builtin import builtin_layout_document
from nowplaying.skins.constants import (
    DEFAULT_CONTAINER_SPACING,
    DEFAULT_SPACER_SIZE,
    SIZE_EPSILON,
)
from nowplaying.skins.layout_document import (
    RawComponent,
    RawContainer,
    RawLayoutDocument,
    RawNode,
    RawSpacer,
)
from nowplaying.skins.models import (
    ColumnNode,
    ComponentNode,
    LayoutAlign,
    LayoutComponent,
    LayoutNode,
    LayoutSet,
    LayoutVariant,
    RowNode,
    SpacerNode,
)

logger = logging.getLogger(__name__)

ALIGN_ALIASES: dict[str, LayoutAlign] = {
    "start": LayoutAlign.START,
    "top": LayoutAlign.START,
    "left": LayoutAlign.START,
    "center": LayoutAlign.CENTER,
    "middle": LayoutAlign.CENTER,
    "end": LayoutAlign.END,
    "bottom": LayoutAlign.END,
    "right": LayoutAlign.END,
}

COMPONENT_ALIASES: dict[str, LayoutComponent] = {
    "thumbnail": LayoutComponent.THUMBNAIL,
    "artwork": LayoutComponent.THUMBNAIL,
    "title": LayoutComponent.TITLE,
    "metadata": LayoutComponent.METADATA_GROUP,
    "metadata_group": LayoutComponent.METADATA_GROUP,
    "details": LayoutComponent.METADATA_GROUP,
    "metadata.artist": LayoutComponent.METADATA_ARTIST,
    "artist": LayoutComponent.METADATA_ARTIST,
    "metadata.album": LayoutComponent.METADATA_ALBUM,
    "album": LayoutComponent.METADATA_ALBUM,
    "metadata.state": LayoutComponent.METADATA_STATE,
    "state": LayoutComponent.METADATA_STATE,
    "playstate": LayoutComponent.METADATA_STATE,
    "playback_controls": LayoutComponent.PLAYBACK_CONTROLS_GROUP,
    "controls": LayoutComponent.PLAYBACK_CONTROLS_GROUP,
    "button.previous": LayoutComponent.PLAYBACK_BUTTON_PREVIOUS,
    "previous": LayoutComponent.PLAYBACK_BUTTON_PREVIOUS,
    "button.play": LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE,
    "playpause": LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE,
    "button.playpause": LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE,
    "button.pause": LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE,
    "button.next": LayoutComponent.PLAYBACK_BUTTON_NEXT,
    "next": LayoutComponent.PLAYBACK_BUTTON_NEXT,
    "button.stop": LayoutComponent.PLAYBACK_BUTTON_STOP,
    "stop": LayoutComponent.PLAYBACK_BUTTON_STOP,
    "timeline": LayoutComponent.TIMELINE,
    "progress": LayoutComponent.TIMELINE,
    "skin_warnings": LayoutComponent.SKIN_WARNINGS,
    "warnings": LayoutComponent.SKIN_WARNINGS,
    "skin_error": LayoutComponent.SKIN_ERROR,
    "error": LayoutComponent.NOW_PLAYING_ERROR,
    "now_playing_error": LayoutComponent.NOW_PLAYING_ERROR,
    "thumbnail_error": LayoutComponent.THUMBNAIL_ERROR,
}


def parse_align(value: str) -> LayoutAlign | None:
    return ALIGN_ALIASES.get(value.strip().lower())


def parse_component(value: str) -> LayoutComponent | None:
    return COMPONENT_ALIASES.get(value.strip().lower())


def resolve_layout(
    document: RawLayoutDocument,
    warnings: list[str],
    *,
    allow_fallback: bool = True,
) -> LayoutSet:
    """Resolve every usable variant of `document`.

    When no variant survives, the built-in layout is resolved instead. A
    built-in layout that also yields nothing raises BUILTIN_BROKEN.
    """
    variants: list[LayoutVariant] = []
    seen: set[str] = set()

    for index, raw in enumerate(document.variants):
        if raw.structure is None:
            warnings.append(f"Layout variant {index} is missing structure; skipping")
            continue

        variant_id = (raw.id or "").strip() or f"variant_{index}"
        display_name = (raw.display_name or "").strip() or variant_id
        if variant_id in seen:
            warnings.append(f"Duplicate layout variant id '{variant_id}'; skipping")
            continue

        root = _resolve_node(raw.structure, warnings, f"variant '{variant_id}'")
        if root is None:
            warnings.append(
                f"Layout variant '{variant_id}' resolved to no visible content; skipping"
            )
            continue
        seen.add(variant_id)
        variants.append(LayoutVariant(id=variant_id, display_name=display_name, root=root))

    if not variants:
        if not allow_fallback:
            raise SkinEngineError(
                ErrorCode.BUILTIN_BROKEN,
                details={"reason": "built-in layout has no usable variants"},
            )
        logger.info("Layout document produced no variants; using built-in layout")
        return resolve_layout(builtin_layout_document(), warnings, allow_fallback=False)

    default_variant = variants[0].id
    if document.default is not None:
        wanted = document.default.strip()
        if wanted in seen:
            default_variant = wanted

    return LayoutSet(default_variant=default_variant, variants=tuple(variants))


def _resolve_node(raw: RawNode, warnings: list[str], context: str) -> LayoutNode | None:
    if isinstance(raw, RawContainer):
        return _resolve_container(raw, warnings, context)
    if isinstance(raw, RawComponent):
        return _resolve_component(raw, warnings, context)
    return _resolve_spacer(raw)


def _resolve_container(
    raw: RawContainer,
    warnings: list[str],
    context: str,
) -> RowNode | ColumnNode | None:
    if raw.visible is False:
        return None

    children: list[LayoutNode] = []
    for index, child in enumerate(raw.children):
        node = _resolve_node(child, warnings, f"{context} > child #{index}")
        if node is not None:
            children.append(node)
    if not children:
        warnings.append(f"{context} has no visible children")
        return None

    node_type = RowNode if raw.kind == "row" else ColumnNode
    spacing = DEFAULT_CONTAINER_SPACING if raw.spacing is None else raw.spacing
    return node_type(
        spacing=max(0.0, spacing),
        align=(parse_align(raw.align) if raw.align is not None else None) or LayoutAlign.START,
        fill=bool(raw.fill),
        children=tuple(children),
    )


def _resolve_component(
    raw: RawComponent,
    warnings: list[str],
    context: str,
) -> ComponentNode | None:
    if raw.visible is False:
        return None
    if raw.id is None:
        warnings.append(f"{context} component missing id")
        return None

    component = parse_component(raw.id)
    if component is None:
        warnings.append(f"Unknown component '{raw.id}' in {context}; skipping")
        return None
    return ComponentNode(component=component, params=dict(raw.params or {}))


def _resolve_spacer(raw: RawSpacer) -> SpacerNode | None:
    size = max(0.0, DEFAULT_SPACER_SIZE if raw.size is None else raw.size)
    if size <= SIZE_EPSILON:
        return None
    return SpacerNode(size=size)
