"""Separable Gaussian blur for 8-bit bitmaps with integer weights."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .base import Bitmap, Filter, FilterParameter, lround

_SCALE = 4096.0


def _gaussian_kernel(radius: int) -> list[int]:
    sigma = max(0.5, radius / 3.0)
    two_sigma2 = 2.0 * sigma * sigma
    weights = [math.exp(-(i * i) / two_sigma2) for i in range(-radius, radius + 1)]
    total = sum(weights)
    return [min(max(lround(w / total * _SCALE), 1), 32767) for w in weights]


def _blur_line(line: Sequence[int], kernel: list[int], radius: int) -> list[int]:
    weight_sum = sum(kernel)
    half = weight_sum // 2
    padded = [line[0]] * radius + list(line) + [line[-1]] * radius
    size = len(kernel)
    return [
        min(255, (sum(k * v for k, v in zip(kernel, padded[x:x + size])) + half) // weight_sum)
        for x in range(len(line))
    ]


class BlurFilter(Filter):
    """Gaussian blur with edge clamping; radius is in pixels."""

    name = "Blur"

    def __init__(self) -> None:
        super().__init__({
            "radius": FilterParameter("radius", 0.0, 10.0, 2.0),
        })

    def apply(self, image: Bitmap) -> Bitmap:
        out = Bitmap(image.width_px, image.height_px, image.pixel_size_mm)
        if image.is_empty:
            return out

        radius = max(0, lround(self.value("radius")))
        if radius == 0:
            out.pixels = bytearray(image.pixels)
            return out

        kernel = _gaussian_kernel(radius)
        rows = [_blur_line(row, kernel, radius) for row in image.rows()]
        columns = [_blur_line(col, kernel, radius) for col in zip(*rows)]
        out.pixels = bytearray(v for row in zip(*columns) for v in row)
        return out