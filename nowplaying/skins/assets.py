"""Decoded skin asset cache."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)


def _load_image(path: Path) -> QImage:
    image = QImage()
    image.load(str(path))
    return image


class AssetCache:
    """Decoded images keyed by asset path.

    Paths are only unique within one skin's asset root, so the owner must
    call `clear()` whenever the active skin changes.
    """

    def __init__(self, loader: Callable[[Path], QImage] = _load_image) -> None:
        self._loader = loader
        self._images: dict[Path, QImage] = {}

    def __len__(self) -> int:
        return len(self._images)

    def __contains__(self, path: object) -> bool:
        return path in self._images

    def get(self, path: Path) -> QImage | None:
        """Return the decoded image for `path`, or None if it cannot be decoded."""
        cached = self._images.get(path)
        if cached is not None:
            return cached
        image = self._loader(path)
        if image.isNull():
            logger.warning("Could not decode skin asset %s", path)
            return None
        self._images[path] = image
        return image

    def clear(self) -> None:
        self._images.clear()
