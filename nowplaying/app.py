"""QCoreApplication bootstrap and skin summary."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from typing import TextIO

from PySide6.QtCore import QCoreApplication

from nowplaying.config.settings import AppSettings
from nowplaying.errors import SkinEngineError
from nowplaying.runtime_paths import builtin_skin_root
from nowplaying.skins.manager import SkinManager


def _configure_startup_logger(settings: AppSettings) -> logging.Logger:
    logger = logging.getLogger("nowplaying.startup")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    log_dir = settings.app_data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "startup.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def print_summary(manager: SkinManager, out: TextIO) -> None:
    """Write the installed skins, layout variants and warnings of `manager`."""
    current = manager.current_skin_id
    print(f"Skins root: {manager.root}", file=out)
    if not manager.skin_list:
        print("No skins installed; using the built-in skin.", file=out)
    for info in manager.skin_list:
        marker = "*" if info.id == current else " "
        print(f" {marker} {info.display_name} ({info.id})", file=out)

    print(f"Layouts for {manager.current_skin_display_name}:", file=out)
    for variant in manager.layout_options:
        marker = "*" if variant.id == manager.current_layout_id else " "
        print(f" {marker} {variant.display_name} ({variant.id})", file=out)

    if manager.warnings:
        print("Warnings:", file=out)
        for warning in manager.warnings:
            print(f"  - {warning}", file=out)


def run_app() -> int:
    """Resolve the configured skin and print a summary of it."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("NowPlaying")
    app.setOrganizationName("NowPlaying")
    settings = AppSettings()
    logger = _configure_startup_logger(settings)
    builtin_skins = builtin_skin_root()
    logger.info("startup frozen=%s builtin_skins=%s", getattr(sys, "frozen", False), builtin_skins)
    if not builtin_skins.exists():
        logger.warning("builtin skin root missing at %s", builtin_skins)

    try:
        manager = SkinManager.discover(settings.skins_dir, settings=settings)
    except SkinEngineError as exc:
        logger.error("skin engine failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    errors = manager.load_errors
    if errors:
        logger.warning("skin load warnings: %s", " | ".join(errors[:6]))
    if manager.warnings:
        logger.warning("skin warnings: %s", " | ".join(manager.warnings[:6]))
    if settings.hot_reload:
        ok, message = manager.enable_hot_reload()
        if not ok:
            logger.warning("hot reload unavailable: %s", message)
        print(f"Hot reload: {message}", file=sys.stdout)

    print_summary(manager, sys.stdout)
    manager.disable_hot_reload()
    return 0
