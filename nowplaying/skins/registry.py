"""Skin directory discovery and registry."""

from __future__ import annotations

import logging
from pathlib import Path

from nowplaying.skins.loader import load_theme_from_dir
from nowplaying.skins.models import SkinInfo

logger = logging.getLogger(__name__)

_MAX_SKIN_DIR_CANDIDATES = 512


class SkinRegistry:
    """Lists the skin directories below a skins root."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._skins: list[SkinInfo] = []
        self._load_errors: list[str] = []

    @property
    def root(self) -> Path:
        return self._root

    def reload(self) -> None:
        self._skins = []
        self._load_errors = []
        self._load_from_root(self._root)
        self._skins.sort(key=lambda info: info.display_name)

    def list_skins(self) -> list[SkinInfo]:
        return list(self._skins)

    def find(self, id_or_name: str) -> SkinInfo | None:
        """Match a skin by directory id first, then by display name."""
        for info in self._skins:
            if info.id == id_or_name:
                return info
        for info in self._skins:
            if info.display_name == id_or_name:
                return info
        return None

    def load_errors(self) -> list[str]:
        return list(self._load_errors)

    def _load_from_root(self, root: Path) -> None:
        if not root.exists():
            return
        try:
            all_dirs = sorted(path for path in root.iterdir() if path.is_dir())
        except OSError as exc:
            self._load_errors.append(f"Failed to list skins in {root}: {exc}")
            return

        candidates: list[Path] = []
        for path in all_dirs:
            if path.is_symlink():
                self._load_errors.append(f"Skipping symlink skin directory: {path}")
                continue
            candidates.append(path)
        if len(candidates) > _MAX_SKIN_DIR_CANDIDATES:
            self._load_errors.append(
                f"Skin directory limit exceeded in {root}; "
                f"only first {_MAX_SKIN_DIR_CANDIDATES} folders were scanned."
            )
            candidates = candidates[:_MAX_SKIN_DIR_CANDIDATES]

        for skin_dir in candidates:
            loaded = load_theme_from_dir(skin_dir)
            self._skins.append(
                SkinInfo(
                    id=skin_dir.name,
                    display_name=loaded.theme.display_name,
                    path=skin_dir,
                )
            )
        logger.debug("Discovered %d skins in %s", len(self._skins), root)
