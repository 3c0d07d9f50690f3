"""Perceptual colour difference between RGBA pixels in YIQ space."""

from __future__ import annotations

import math
from typing import Sequence

MAX_YIQ_DELTA = 35215.0
"""Largest possible value of the full YIQ delta."""

_Y = (0.29889531, 0.58662247, 0.11448223)
_I = (0.59597799, -0.27417610, -0.32180189)
_Q = (0.21147017, -0.52261711, 0.31114694)

_DELTA_Y = 0.5053
_DELTA_I = 0.299
_DELTA_Q = 0.1957

_PHI = 1.618033988749895


def _background(k: int) -> tuple[float, float, float]:
    """Checkerboard-like background used to blend semi-transparent pixels."""
    rb = 48.0 + 159.0 * (k % 2)
    gb = 48.0 + 159.0 * (math.floor(k / _PHI) % 2)
    bb = 48.0 + 159.0 * (math.floor(k / (1.0 + _PHI)) % 2)
    return rb, gb, bb


def color_delta(
    img1: Sequence[int], img2: Sequence[int], k: int, m: int, y_only: bool
) -> float:
    """Return the YIQ delta between the pixel at byte offset *k* of *img1*
    and the pixel at byte offset *m* of *img2*.

    With *y_only* set, only the brightness difference is returned. Otherwise
    the full delta is returned, negative when the first pixel is brighter.
    """
    r1, g1, b1, a1 = (float(c) for c in img1[k : k + 4])
    r2, g2, b2, a2 = (float(c) for c in img2[m : m + 4])

    dr = r1 - r2
    dg = g1 - g2
    db = b1 - b2
    da = a1 - a2

    if dr == 0.0 and dg == 0.0 and db == 0.0 and da == 0.0:
        return 0.0

    if a1 < 255.0 or a2 < 255.0:
        rb, gb, bb = _background(k)
        dr = (r1 * a1 - r2 * a2 - rb * da) / 255.0
        dg = (g1 * a1 - g2 * a2 - gb * da) / 255.0
        db = (b1 * a1 - b2 * a2 - bb * da) / 255.0

    y = dr * _Y[0] + dg * _Y[1] + db * _Y[2]
    if y_only:
        return y

    i = dr * _I[0] + dg * _I[1] + db * _I[2]
    q = dr * _Q[0] + dg * _Q[1] + db * _Q[2]

    delta = _DELTA_Y * y * y + _DELTA_I * i * i + _DELTA_Q * q * q
    return -delta if y > 0.0 else delta