"""Skin file reading and the theme/layout load pipelines.

Nothing here raises for user content: missing, unreadable, malformed or
version-mismatched documents are replaced by the built-in ones and reported
as warnings.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from nowplaying.errors import DocumentError, classify_exception
from nowplaying.skins.builtin import builtin_layout_document, builtin_theme_document
from nowplaying.skins.constants import (
    LAYOUT_ENGINE_VERSION,
    LAYOUT_FILE_NAME,
    THEME_ENGINE_VERSION,
    THEME_FILE_NAME,
)
from nowplaying.skins.layout_document import RawLayoutDocument, parse_layout_document
from nowplaying.skins.layout_resolver import resolve_layout
from nowplaying.skins.merge import merge_theme_documents
from nowplaying.skins.models import LoadedLayout, LoadedTheme, ResolvedSkin
from nowplaying.skins.theme_document import RawThemeDocument, parse_theme_document
from nowplaying.skins.theme_resolver import resolve_theme

logger = logging.getLogger(__name__)


_READ_ERRORS = (
    OSError,
    UnicodeDecodeError,
    RecursionError,
    tomllib.TOMLDecodeError,
    DocumentError,
)


def read_toml(path: Path) -> Mapping[str, Any]:
    """Read and decode a TOML file.

    OSError and TOMLDecodeError propagate, as does RecursionError for
    documents nested deeper than the decoder can follow.
    """
    return tomllib.loads(path.read_text(encoding="utf-8"))


def read_theme_document(path: Path, warnings: list[str]) -> RawThemeDocument | None:
    """Return the user theme document at `path`, or None when it is unusable."""
    if not path.exists():
        warnings.append(
            f"Skin folder {path.parent} missing {THEME_FILE_NAME}; falling back to defaults"
        )
        return None
    try:
        return parse_theme_document(read_toml(path))
    except _READ_ERRORS as exc:
        warnings.append(f"Failed to parse theme: {classify_exception(exc, path)}")
        return None


def read_layout_document(path: Path, warnings: list[str]) -> RawLayoutDocument | None:
    """Return the user layout document at `path`, or None when it is unusable."""
    if not path.exists():
        warnings.append(
            f"Skin folder {path.parent} missing {LAYOUT_FILE_NAME}; falling back to defaults"
        )
        return None
    try:
        return parse_layout_document(read_toml(path))
    except _READ_ERRORS as exc:
        warnings.append(f"Failed to parse layout: {classify_exception(exc, path)}")
        return None


def load_theme_from_dir(skin_dir: Path) -> LoadedTheme:
    """Merge `<skin_dir>/theme.toml` over the built-in theme and resolve it."""
    warnings: list[str] = []
    baseline = builtin_theme_document()
    # A user skin is identified by its own meta or its directory, never the baseline.
    document = replace(baseline, meta=replace(baseline.meta, name=None, display_name=None))

    overlay = read_theme_document(skin_dir / THEME_FILE_NAME, warnings)
    if overlay is not None:
        engine = overlay.meta.engine
        if engine is None:
            warnings.append(f"meta.engine missing; assuming version {THEME_ENGINE_VERSION}")
            document = merge_theme_documents(document, overlay)
        elif engine != THEME_ENGINE_VERSION:
            warnings.append(
                f"Skin engine version {engine} does not match {THEME_ENGINE_VERSION}; "
                "using defaults"
            )
        else:
            document = merge_theme_documents(document, overlay)

    theme = resolve_theme(document, skin_dir, warnings)
    logger.debug("Resolved theme %s from %s (%d warnings)", theme.name, skin_dir, len(warnings))
    return LoadedTheme(theme=theme, warnings=tuple(warnings))


def load_layout_from_dir(skin_dir: Path) -> LoadedLayout:
    """Resolve `<skin_dir>/layout.toml`, or the built-in layout when unusable."""
    warnings: list[str] = []
    document = read_layout_document(skin_dir / LAYOUT_FILE_NAME, warnings)
    if document is not None:
        engine = document.engine
        if engine is None:
            warnings.append(
                f"layout.meta.engine missing; assuming version {LAYOUT_ENGINE_VERSION}"
            )
        elif engine != LAYOUT_ENGINE_VERSION:
            warnings.append(
                f"Layout engine version {engine} does not match {LAYOUT_ENGINE_VERSION}; "
                "using defaults"
            )
            document = None
    if document is None:
        document = builtin_layout_document()

    layout = resolve_layout(document, warnings)
    logger.debug(
        "Resolved %d layout variants from %s (%d warnings)",
        len(layout.variants),
        skin_dir,
        len(warnings),
    )
    return LoadedLayout(layout=layout, warnings=tuple(warnings))


def resolve_skin(skin_dir: Path) -> ResolvedSkin:
    """Resolve the theme and layout of one skin directory. Never fails for user content."""
    loaded_theme = load_theme_from_dir(skin_dir)
    loaded_layout = load_layout_from_dir(skin_dir)
    return ResolvedSkin(
        theme=loaded_theme.theme,
        layout=loaded_layout.layout,
        warnings=loaded_theme.warnings + loaded_layout.warnings,
    )


def resolve_builtin_skin(asset_dir: Path) -> ResolvedSkin:
    """Resolve the built-in documents alone, e.g. when no skins are installed."""
    warnings: list[str] = []
    theme = resolve_theme(builtin_theme_document(), asset_dir, warnings)
    layout = resolve_layout(builtin_layout_document(), warnings)
    return ResolvedSkin(theme=theme, layout=layout, warnings=tuple(warnings))
