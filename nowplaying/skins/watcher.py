"""Filesystem change notifications for skin hot reload."""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PySide6.QtCore import QFileSystemWatcher, QObject

from nowplaying.errors import ErrorCode, SkinEngineError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    paths: tuple[Path, ...]


@dataclass(frozen=True, slots=True)
class WatchError:
    message: str


WatchItem = Union[ChangeEvent, WatchError]


class SkinWatcher(QObject):
    """Watches a skins root and posts ChangeEvent items to a queue.

    The root, each skin directory and each `.toml` file directly inside a
    skin directory are watched. Editors that save by replacing a file drop
    it from the watch list, so changed files are re-added when they exist.
    """

    def __init__(self, root: Path, changes: queue.SimpleQueue[WatchItem]) -> None:
        super().__init__()
        self._root = root
        self._changes = changes
        self._watcher = QFileSystemWatcher(self)
        if not self._watcher.addPath(str(root)):
            raise SkinEngineError(
                ErrorCode.WATCHER_FAILED,
                path=root,
                details={"reason": "could not watch skins root"},
            )
        self._scan(root)
        self._watcher.fileChanged.connect(self._on_file_changed)
        self._watcher.directoryChanged.connect(self._on_directory_changed)

    @property
    def root(self) -> Path:
        return self._root

    def watched_paths(self) -> list[Path]:
        return [Path(p) for p in self._watcher.directories() + self._watcher.files()]

    def close(self) -> None:
        watched = self._watcher.directories() + self._watcher.files()
        if watched:
            self._watcher.removePaths(watched)

    def _scan(self, directory: Path) -> list[Path]:
        """Watch new skin directories and `.toml` files; return newly watched files."""
        skin_dirs = [directory]
        if directory == self._root:
            try:
                skin_dirs = sorted(p for p in directory.iterdir() if p.is_dir())
            except OSError as exc:
                self._changes.put(WatchError(f"Failed to list {directory}: {exc}"))
                return []

        added: list[Path] = []
        watched_dirs = set(self._watcher.directories())
        watched_files = set(self._watcher.files())
        for skin_dir in skin_dirs:
            if str(skin_dir) not in watched_dirs:
                self._watch(skin_dir)
            try:
                toml_files = sorted(skin_dir.glob("*.toml"))
            except OSError as exc:
                self._changes.put(WatchError(f"Failed to list {skin_dir}: {exc}"))
                continue
            for path in toml_files:
                if str(path) not in watched_files and self._watch(path):
                    added.append(path)
        return added

    def _watch(self, path: Path) -> bool:
        if self._watcher.addPath(str(path)):
            return True
        self._changes.put(WatchError(f"Could not watch {path}"))
        return False

    def _on_file_changed(self, raw_path: str) -> None:
        path = Path(raw_path)
        if raw_path not in self._watcher.files() and path.exists():
            self._watch(path)
        logger.debug("Skin file changed: %s", path)
        self._changes.put(ChangeEvent(paths=(path,)))

    def _on_directory_changed(self, raw_path: str) -> None:
        directory = Path(raw_path)
        added = self._scan(directory) if directory.exists() else []
        logger.debug("Skin directory changed: %s", directory)
        self._changes.put(ChangeEvent(paths=(directory, *added)))

