"""Detection of anti-aliased pixels from their 3x3 neighbourhood."""

from __future__ import annotations

from typing import Sequence

from kaiki.diff.pixel import color_delta


def _window(x: int, y: int, width: int, height: int) -> tuple[int, int, int, int]:
    return max(x - 1, 0), max(y - 1, 0), min(x + 1, width - 1), min(y + 1, height - 1)


def _neighbours(x: int, y: int, width: int, height: int):
    x0, y0, x1, y1 = _window(x, y, width, height)
    for ny in range(y0, y1 + 1):
        for nx in range(x0, x1 + 1):
            if nx != x or ny != y:
                yield nx, ny


def _on_edge(x: int, y: int, width: int, height: int) -> bool:
    x0, y0, x1, y1 = _window(x, y, width, height)
    return x in (x0, x1) or y in (y0, y1)


def is_antialiased(
    img1: Sequence[int],
    img2: Sequence[int],
    x: int,
    y: int,
    width: int,
    height: int,
) -> bool:
    """Whether the pixel at (x, y) of *img1* looks like an anti-aliased edge."""
    zeroes = 1 if _on_edge(x, y, width, height) else 0
    min_delta = 0.0
    max_delta = 0.0
    min_pos = (0, 0)
    max_pos = (0, 0)

    center_k = (y * width + x) * 4

    for nx, ny in _neighbours(x, y, width, height):
        neighbour_k = (ny * width + nx) * 4
        delta = color_delta(img1, img1, center_k, neighbour_k, True)

        if delta == 0.0:
            zeroes += 1
            if zeroes > 2:
                return False
        elif delta < min_delta:
            min_delta = delta
            min_pos = (nx, ny)
        elif delta > max_delta:
            max_delta = delta
            max_pos = (nx, ny)

    if min_delta == 0.0 or max_delta == 0.0:
        return False

    return (
        has_many_siblings(img1, *min_pos, width, height)
        and has_many_siblings(img2, *min_pos, width, height)
    ) or (
        has_many_siblings(img1, *max_pos, width, height)
        and has_many_siblings(img2, *max_pos, width, height)
    )


def has_many_siblings(img: Sequence[int], x: int, y: int, width: int, height: int) -> bool:
    """Whether the pixel at (x, y) has three or more identical neighbours
    (an image edge counts as one)."""
    k = (y * width + x) * 4
    center = list(img[k : k + 4])

    zeroes = 1 if _on_edge(x, y, width, height) else 0
    for nx, ny in _neighbours(x, y, width, height):
        nk = (ny * width + nx) * 4
        if list(img[nk : nk + 4]) == center:
            zeroes += 1
            if zeroes > 2:
                return True
    return False