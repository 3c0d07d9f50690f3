"""Discovery of image files under a directory."""

from __future__ import annotations

import os
from pathlib import Path

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "tiff", "bmp", "gif"})


def find_images(directory: str | Path) -> list[str]:
    """Return the sorted relative paths (with ``/`` separators) of every
    image file below *directory*; an empty list if it does not exist."""
    root = Path(directory)
    if not root.exists():
        return []

    images: set[str] = set()
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            path = Path(dirpath, filename)
            suffix = path.suffix
            if suffix and suffix[1:].lower() in IMAGE_EXTENSIONS:
                images.add(path.relative_to(root).as_posix())
    return sorted(images)