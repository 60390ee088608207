from __future__ import annotations

from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def write_skin(root: Path, skin_id: str, theme: str | None = None, layout: str | None = None) -> Path:
    """Create `root/skin_id` with optional theme.toml / layout.toml text."""
    skin_dir = root / skin_id
    skin_dir.mkdir(parents=True, exist_ok=True)
    if theme is not None:
        (skin_dir / "theme.toml").write_text(theme, encoding="utf-8")
    if layout is not None:
        (skin_dir / "layout.toml").write_text(layout, encoding="utf-8")
    return skin_dir
