"""Pixel-by-pixel image comparison in the manner of pixelmatch."""

from __future__ import annotations

import io
from dataclasses import dataclass, field

from PIL import Image

from kaiki.diff import antialias, render
from kaiki.diff.pixel import MAX_YIQ_DELTA, color_delta
from kaiki.diff.render import ImageData


class DiffError(Exception):
    """Raised when images cannot be compared."""


@dataclass
class CompareOptions:
    """Settings for a comparison."""

    matching_threshold: float = 0.0
    """YIQ threshold: 0.0 means an exact match, 1.0 accepts any difference."""
    enable_antialias: bool = False
    """When False, anti-aliased pixels are detected and drawn separately."""
    diff_color: tuple[int, int, int] = (255, 119, 119)
    diff_color_alt: tuple[int, int, int] | None = None
    """Colour used instead of ``diff_color`` where the first image is brighter."""
    aa_color: tuple[int, int, int] = (255, 255, 0)
    alpha: float = 0.1
    """Blend factor for matching pixels in the diff image."""


@dataclass
class DiffResult:
    """Outcome of a comparison."""

    diff_count: int
    total_pixels: int
    width: int
    height: int
    images_are_same: bool
    diff_image: ImageData | None = None
    diff_mask: list[bool] | None = field(default=None, repr=False)


def decode_image(data: bytes) -> ImageData:
    """Decode encoded image bytes into RGBA pixels."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            rgba = img.convert("RGBA")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DiffError(f"failed to decode image: {exc}") from exc
    return ImageData(width=rgba.width, height=rgba.height, data=rgba.tobytes())


def compare_image_files(
    actual: bytes, expected: bytes, options: CompareOptions
) -> DiffResult:
    """Compare two encoded images; identical bytes skip the pixel pass."""
    if actual == expected:
        img = decode_image(actual)
        return DiffResult(
            diff_count=0,
            total_pixels=img.width * img.height,
            width=img.width,
            height=img.height,
            images_are_same=True,
        )

    return compare_images(decode_image(actual), decode_image(expected), options)


def compare_images(
    actual: ImageData, expected: ImageData, options: CompareOptions
) -> DiffResult:
    """Compare two decoded images, padding the smaller one with transparent black."""
    width = max(actual.width, expected.width)
    height = max(actual.height, expected.height)
    total_pixels = width * height

    actual_data = (render.expand_image(actual, width, height) or actual).data
    expected_data = (render.expand_image(expected, width, height) or expected).data

    threshold = options.matching_threshold * options.matching_threshold * MAX_YIQ_DELTA

    diff_count = 0
    diff_pixels = bytearray(total_pixels * 4)
    diff_mask = [False] * total_pixels

    for index in range(total_pixels):
        pos = index * 4
        if actual_data[pos : pos + 4] == expected_data[pos : pos + 4]:
            render.draw_pixel_same(diff_pixels, pos, actual_data, options.alpha)
            continue

        delta = color_delta(actual_data, expected_data, pos, pos, False)
        if abs(delta) <= threshold:
            render.draw_pixel_same(diff_pixels, pos, actual_data, options.alpha)
            continue

        y, x = divmod(index, width)
        if not options.enable_antialias and (
            antialias.is_antialiased(actual_data, expected_data, x, y, width, height)
            or antialias.is_antialiased(expected_data, actual_data, x, y, width, height)
        ):
            render.draw_pixel_aa(diff_pixels, pos, options.aa_color)
        else:
            diff_count += 1
            diff_mask[index] = True
            render.draw_pixel_diff(
                diff_pixels, pos, delta, options.diff_color, options.diff_color_alt
            )

    return DiffResult(
        diff_count=diff_count,
        total_pixels=total_pixels,
        width=width,
        height=height,
        images_are_same=False,
        diff_image=ImageData(width=width, height=height, data=bytes(diff_pixels)),
        diff_mask=diff_mask,
    )