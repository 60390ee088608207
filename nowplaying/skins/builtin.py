"""Built-in theme and layout documents shipped with the package.

These documents are part of the build; failing to read or parse them is a
broken install and raises SkinEngineError(BUILTIN_BROKEN).
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Callable, TypeVar

from nowplaying.errors import DocumentError, ErrorCode, SkinEngineError
from nowplaying.runtime_paths import builtin_skin_root
from nowplaying.skins.constants import LAYOUT_FILE_NAME, THEME_FILE_NAME
from nowplaying.skins.layout_document import RawLayoutDocument, parse_layout_document
from nowplaying.skins.theme_document import RawThemeDocument, parse_theme_document

_D = TypeVar("_D")


def builtin_theme_document() -> RawThemeDocument:
    return _load_builtin(builtin_skin_root() / THEME_FILE_NAME, parse_theme_document)


def builtin_layout_document() -> RawLayoutDocument:
    return _load_builtin(builtin_skin_root() / LAYOUT_FILE_NAME, parse_layout_document)


def _load_builtin(path: Path, parse: Callable[[dict[str, Any]], _D]) -> _D:
    try:
        return parse(tomllib.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, DocumentError) as exc:
        raise SkinEngineError(
            ErrorCode.BUILTIN_BROKEN,
            path=path,
            details={"error": str(exc)},
        ) from exc
