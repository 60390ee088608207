"""Runtime skin selection, hot reload and asset ownership."""

from __future__ import annotations

import logging
import queue
from pathlib import Path
from typing import Callable, Protocol

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from nowplaying.errors import SkinEngineError
from nowplaying.skins.assets import AssetCache
from nowplaying.skins.constants import THEME_FILE_NAME
from nowplaying.skins.loader import resolve_builtin_skin, resolve_skin
from nowplaying.skins.models import LayoutSet, LayoutVariant, ResolvedSkin, SkinInfo, Theme
from nowplaying.skins.registry import SkinRegistry
from nowplaying.skins.watcher import ChangeEvent, SkinWatcher, WatchError, WatchItem

logger = logging.getLogger(__name__)

_RELOAD_SUFFIX = Path(THEME_FILE_NAME).suffix


class Watcher(Protocol):
    def close(self) -> None: ...


WatcherFactory = Callable[[Path, "queue.SimpleQueue[WatchItem]"], Watcher]


class SkinManager(QObject):
    """Owns the active resolved skin and swaps it on selection or reload."""

    skin_changed = Signal(str)
    layout_changed = Signal(str)

    def __init__(
        self,
        root: Path,
        settings=None,
        *,
        assets: AssetCache | None = None,
        watcher_factory: WatcherFactory = SkinWatcher,
    ) -> None:
        super().__init__()
        self._root = root
        self._settings = settings
        self._registry = SkinRegistry(root)
        self._assets = assets if assets is not None else AssetCache()
        self._watcher_factory = watcher_factory
        self._watcher: Watcher | None = None
        self._changes: queue.SimpleQueue[WatchItem] | None = None
        self._current: SkinInfo | None = None
        self._skin: ResolvedSkin | None = None
        self._warnings: tuple[str, ...] = ()
        self._layout_index = 0

    @classmethod
    def discover(
        cls,
        root: Path,
        default_skin: str | None = None,
        settings=None,
        **kwargs,
    ) -> SkinManager:
        """List the skins under `root` and activate the initial one.

        The initial skin is `default_skin` (or the one stored in `settings`)
        matched by id or display name, else the first listed skin. With no
        skins installed the built-in documents are used.
        """
        manager = cls(root, settings, **kwargs)
        preferred_layout = None
        if settings is not None:
            default_skin = default_skin or settings.skin_id or None
            preferred_layout = settings.layout_id or None
        manager._activate_initial(default_skin, preferred_layout)
        return manager

    # -- accessors --

    @property
    def root(self) -> Path:
        return self._root

    @property
    def skin_list(self) -> list[SkinInfo]:
        return self._registry.list_skins()

    @property
    def current_skin_id(self) -> str | None:
        return self._current.id if self._current is not None else None

    @property
    def current_skin_display_name(self) -> str:
        if self._current is not None:
            return self._current.display_name
        return self.current_theme.display_name

    @property
    def current_theme(self) -> Theme:
        return self._resolved.theme

    @property
    def current_layout(self) -> LayoutSet:
        return self._resolved.layout

    @property
    def layout_options(self) -> tuple[LayoutVariant, ...]:
        return self.current_layout.variants

    @property
    def current_layout_variant(self) -> LayoutVariant:
        variants = self.current_layout.variants
        return variants[min(self._layout_index, len(variants) - 1)]

    @property
    def current_layout_id(self) -> str:
        return self.current_layout_variant.id

    @property
    def current_layout_display_name(self) -> str:
        return self.current_layout_variant.display_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._warnings

    @property
    def load_errors(self) -> list[str]:
        return self._registry.load_errors()

    @property
    def _resolved(self) -> ResolvedSkin:
        if self._skin is None:
            raise RuntimeError("SkinManager has no active skin; use SkinManager.discover()")
        return self._skin

    # -- selection --

    def select_skin(self, id_or_name: str) -> tuple[bool, str]:
        info = self._registry.find(id_or_name)
        if info is None:
            return False, f"Skin '{id_or_name}' not found"
        previous_layout = self.current_layout_id if self._skin is not None else None
        try:
            resolved = resolve_skin(info.path)
        except SkinEngineError as exc:
            logger.error("Failed to load skin %s: %s", info.id, exc)
            return False, f"Could not load skin {info.id}: {exc}"

        self._install(info, resolved, previous_layout)
        if self._settings is not None:
            self._settings.skin_id = info.id
            self._settings.layout_id = self.current_layout_id
        return True, f"Applied skin: {info.display_name}"

    def select_layout(self, variant_id: str) -> bool:
        index = self.current_layout.index_of(variant_id)
        if index is None:
            return False
        if index != self._layout_index:
            self._layout_index = index
            self.layout_changed.emit(variant_id)
        if self._settings is not None:
            self._settings.layout_id = variant_id
        return True

    def reload_skins(self) -> list[str]:
        """Re-list the skins root, keeping the current selection when it still exists."""
        current = self.current_skin_id
        layout_id = self.current_layout_id if self._skin is not None else None
        self._activate_initial(current, layout_id)
        return self._registry.load_errors()

    def asset(self, path: Path) -> QImage | None:
        return self._assets.get(path)

    # -- hot reload --

    @property
    def hot_reload_enabled(self) -> bool:
        return self._watcher is not None

    def enable_hot_reload(self) -> tuple[bool, str]:
        if self._watcher is not None:
            return True, "Hot reload already enabled"
        if not self._root.exists():
            return False, f"Skin directory {self._root} does not exist"

        changes: queue.SimpleQueue[WatchItem] = queue.SimpleQueue()
        try:
            watcher = self._watcher_factory(self._root, changes)
        except SkinEngineError as exc:
            logger.warning("Could not start skin watcher: %s", exc)
            return False, str(exc)
        self._changes = changes
        self._watcher = watcher
        logger.info("Skin hot reload enabled for %s", self._root)
        return True, f"Watching {self._root}"

    def disable_hot_reload(self) -> None:
        if self._watcher is not None:
            self._watcher.close()
        self._watcher = None
        self._changes = None

    def poll_hot_reload(self) -> bool:
        """Drain pending change events; re-resolve the current skin at most once."""
        if self._changes is None:
            return False

        relevant = False
        while True:
            try:
                item = self._changes.get_nowait()
            except queue.Empty:
                break
            if isinstance(item, WatchError):
                logger.warning("Skin watcher error: %s", item.message)
            elif isinstance(item, ChangeEvent) and any(
                path.suffix.lower() == _RELOAD_SUFFIX for path in item.paths
            ):
                relevant = True

        current = self.current_skin_id
        if not relevant or current is None:
            return False
        ok, message = self.select_skin(current)
        if not ok:
            logger.warning("Failed to reload skin %s: %s", current, message)
        return ok

    # -- internals --

    def _activate_initial(self, default_skin: str | None, preferred_layout: str | None) -> None:
        self._registry.reload()
        for error in self._registry.load_errors():
            logger.warning("skin load warning: %s", error)

        skins = self._registry.list_skins()
        if not skins:
            logger.info("No skins found in %s; using built-in skin", self._root)
            self._install(None, resolve_builtin_skin(self._root), preferred_layout)
            return

        info = self._registry.find(default_skin) if default_skin else None
        if info is None:
            info = skins[0]
        self._install(info, resolve_skin(info.path), preferred_layout)

    def _install(
        self,
        info: SkinInfo | None,
        resolved: ResolvedSkin,
        preferred_layout: str | None,
    ) -> None:
        self._current = info
        self._skin = resolved
        self._warnings = resolved.warnings
        self._layout_index = _layout_index(resolved.layout, preferred_layout)
        self._assets.clear()
        logger.info(
            "Activated skin %s (%d warnings)",
            info.id if info is not None else "<built-in>",
            len(resolved.warnings),
        )
        self.skin_changed.emit(info.id if info is not None else "")


def _layout_index(layout: LayoutSet, preferred: str | None) -> int:
    index = layout.index_of(preferred)
    if index is not None:
        return index
    index = layout.index_of(layout.default_variant)
    return index if index is not None else 0
