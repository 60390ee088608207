"""Tests for AppSettings persistence."""

from __future__ import annotations

from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from nowplaying.config.settings import AppSettings


@pytest.fixture
def settings(tmp_path: Path, qapp) -> AppSettings:
    qs = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return AppSettings(qs)


def test_defaults(settings: AppSettings) -> None:
    assert settings.skins_dir == Path("skins")
    assert settings.skin_id == ""
    assert settings.layout_id == ""
    assert settings.hot_reload is False


def test_values_round_trip(settings: AppSettings, tmp_path: Path) -> None:
    settings.skins_dir = tmp_path / "my-skins"
    settings.skin_id = "  neon "
    settings.layout_id = "art_top"
    settings.hot_reload = True

    assert settings.skins_dir == tmp_path / "my-skins"
    assert settings.skin_id == "neon"
    assert settings.layout_id == "art_top"
    assert settings.hot_reload is True


def test_app_data_dir_uses_appdata(settings: AppSettings, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    path = settings.app_data_dir
    assert path == tmp_path / "appdata" / "nowplaying"
    assert path.is_dir()
