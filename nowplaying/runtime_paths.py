"""Runtime path helpers for source and frozen executable modes."""

from __future__ import annotations

from pathlib import Path
import sys


def builtin_skin_root() -> Path:
    """Resolve the directory holding the built-in theme and layout documents.

    Inside a PyInstaller bundle the package data is extracted below `_MEIPASS`.
    """
    meipass = getattr(sys, "_MEIPASS", None)
    if getattr(sys, "frozen", False) and meipass:
        package_dir = Path(meipass) / "nowplaying"
    else:
        package_dir = Path(__file__).resolve().parent
    return package_dir / "skins" / "builtin"


def default_skins_root() -> Path:
    """User skins live in `skins/` next to the working directory."""
    return Path("skins")
