"""RGBA image buffers and the pixel painters used to draw diff images."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

Color = Sequence[int]


@dataclass
class ImageData:
    """An RGBA image stored as flat bytes, four per pixel, row by row."""

    width: int
    height: int
    data: bytes


def expand_image(img: ImageData, width: int, height: int) -> ImageData | None:
    """Pad *img* to *width* x *height* with transparent black.

    Returns None when the image already has that size.
    """
    if img.width == width and img.height == height:
        return None

    data = bytearray(width * height * 4)
    row_bytes = img.width * 4
    for y in range(img.height):
        src = y * row_bytes
        dst = y * width * 4
        data[dst : dst + row_bytes] = img.data[src : src + row_bytes]
    return ImageData(width=width, height=height, data=bytes(data))


def _put(output: bytearray, pos: int, color: Color) -> None:
    output[pos : pos + 4] = bytes((color[0], color[1], color[2], 255))


def draw_pixel_diff(
    output: bytearray,
    pos: int,
    delta: float,
    diff_color: Color,
    diff_color_alt: Color | None,
) -> None:
    """Paint a differing pixel; the alternate colour, when given, marks
    pixels where the first image is brighter (negative delta)."""
    color = diff_color_alt if delta < 0.0 and diff_color_alt is not None else diff_color
    _put(output, pos, color)


def draw_pixel_aa(output: bytearray, pos: int, aa_color: Color) -> None:
    """Paint an anti-aliased pixel."""
    _put(output, pos, aa_color)


def draw_pixel_same(output: bytearray, pos: int, img: Sequence[int], alpha: float) -> None:
    """Paint a matching pixel as its grey luminance faded toward white."""
    r, g, b, a = img[pos : pos + 4]
    opacity = a / 255.0
    luminance = r * 0.29889531 + g * 0.58662247 + b * 0.11448223
    value = 255.0 + (luminance - 255.0) * alpha * opacity
    grey = 0 if value != value else max(0, min(255, int(value)))
    output[pos : pos + 4] = bytes((grey, grey, grey, 255))