"""Tests for startup logging and the skin summary."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from conftest import write_skin
from nowplaying import app
from nowplaying.skins.manager import SkinManager


class _Settings:
    def __init__(self, app_data_dir: Path) -> None:
        self.app_data_dir = app_data_dir


def test_startup_logger_is_configured_once(tmp_path: Path) -> None:
    logger = logging.getLogger("nowplaying.startup")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    try:
        first = app._configure_startup_logger(_Settings(tmp_path))
        second = app._configure_startup_logger(_Settings(tmp_path))
        assert first is second
        assert len(first.handlers) == 1
        assert first.propagate is False
        assert (tmp_path / "logs" / "startup.log").exists()
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


def test_print_summary_lists_skins_layouts_and_warnings(tmp_path: Path) -> None:
    write_skin(tmp_path, "neon", theme='[meta]\nengine = "1"\ndisplay_name = "Neon"\n')
    manager = SkinManager.discover(tmp_path)
    out = io.StringIO()
    app.print_summary(manager, out)
    text = out.getvalue()
    assert " * Neon (neon)" in text
    assert " * Artwork Left (art_left)" in text
    assert "Artwork Top (art_top)" in text
    assert "missing layout.toml" in text
