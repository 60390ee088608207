"""Application settings via QSettings."""

from __future__ import annotations

import os
from pathlib import Path

from PySide6.QtCore import QSettings

from nowplaying.runtime_paths import default_skins_root


class AppSettings:
    """Wraps QSettings for persistent overlay configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("NowPlaying", "NowPlaying")

    # -- skins --

    @property
    def skins_dir(self) -> Path:
        raw = self._qs.value("skins/root", "", type=str)
        value = (raw or "").strip()
        return Path(value) if value else default_skins_root()

    @skins_dir.setter
    def skins_dir(self, value: Path | str) -> None:
        self._qs.setValue("skins/root", str(value))

    @property
    def skin_id(self) -> str:
        raw = self._qs.value("skins/skin_id", "", type=str)
        return (raw or "").strip()

    @skin_id.setter
    def skin_id(self, value: str) -> None:
        self._qs.setValue("skins/skin_id", (value or "").strip())

    @property
    def layout_id(self) -> str:
        raw = self._qs.value("skins/layout_id", "", type=str)
        return (raw or "").strip()

    @layout_id.setter
    def layout_id(self, value: str) -> None:
        self._qs.setValue("skins/layout_id", (value or "").strip())

    @property
    def hot_reload(self) -> bool:
        return self._qs.value("skins/hot_reload", False, type=bool)

    @hot_reload.setter
    def hot_reload(self, value: bool) -> None:
        self._qs.setValue("skins/hot_reload", bool(value))

    # -- helpers --

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "nowplaying"
