"""Grouping of differing pixels into bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned box around a region of differing pixels."""

    x: int
    y: int
    width: int
    height: int


@dataclass
class _Component:
    min_x: int
    min_y: int
    max_x: int
    max_y: int
    area: int = 0

    def add(self, x: int, y: int) -> None:
        self.min_x = min(self.min_x, x)
        self.min_y = min(self.min_y, y)
        self.max_x = max(self.max_x, x)
        self.max_y = max(self.max_y, y)
        self.area += 1


class _DisjointSet:
    """Union-find with path halving and union by rank."""

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self._rank = [0] * size

    def find(self, item: int) -> int:
        parent = self._parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: int, b: int) -> None:
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return
        if self._rank[ra] < self._rank[rb]:
            self._parent[ra] = rb
        elif self._rank[ra] > self._rank[rb]:
            self._parent[rb] = ra
        else:
            self._parent[rb] = ra
            self._rank[ra] += 1


def detect_diff_regions(
    img_width: int,
    img_height: int,
    diff_mask: Sequence[bool],
    min_area: int,
) -> list[BoundingBox]:
    """Find 8-connected groups of set pixels in *diff_mask* and return their
    bounding boxes, sorted by (y, x).

    Groups with fewer than *min_area* pixels are dropped as noise.

    Raises:
        ValueError: the mask length is not ``img_width * img_height``.
    """
    total = img_width * img_height
    if len(diff_mask) != total:
        raise ValueError(
            f"diff mask has {len(diff_mask)} entries, expected {total} "
            f"for a {img_width}x{img_height} image"
        )
    if total == 0:
        return []

    w = img_width
    sets = _DisjointSet(total)

    for idx, flagged in enumerate(diff_mask):
        if not flagged:
            continue
        y, x = divmod(idx, w)
        if x + 1 < w and diff_mask[idx + 1]:
            sets.union(idx, idx + 1)
        if y + 1 < img_height:
            below = idx + w
            if diff_mask[below]:
                sets.union(idx, below)
            if x > 0 and diff_mask[below - 1]:
                sets.union(idx, below - 1)
            if x + 1 < w and diff_mask[below + 1]:
                sets.union(idx, below + 1)

    components: dict[int, _Component] = {}
    for idx, flagged in enumerate(diff_mask):
        if not flagged:
            continue
        y, x = divmod(idx, w)
        root = sets.find(idx)
        component = components.get(root)
        if component is None:
            component = components[root] = _Component(x, y, x, y)
        component.add(x, y)

    boxes = [
        BoundingBox(
            x=c.min_x,
            y=c.min_y,
            width=c.max_x - c.min_x + 1,
            height=c.max_y - c.min_y + 1,
        )
        for c in components.values()
        if c.area >= min_area
    ]
    boxes.sort(key=lambda box: (box.y, box.x))
    return boxes