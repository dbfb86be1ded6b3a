"""Separable Gaussian blur for floating-point images."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .base import Filter, FilterParameter, FloatImage, lround


def _gaussian_kernel(radius: int) -> list[float]:
    if radius <= 0:
        return [1.0]
    sigma = max(0.5, radius / 3.0)
    two_sigma2 = 2.0 * sigma * sigma
    weights = [math.exp(-(i * i) / two_sigma2) for i in range(-radius, radius + 1)]
    total = sum(weights)
    if total <= 0.0:
        total = 1.0
    return [w / total for w in weights]


def _blur_line(line: Sequence[float], kernel: list[float], radius: int) -> list[float]:
    padded = [line[0]] * radius + list(line) + [line[-1]] * radius
    size = len(kernel)
    return [
        sum(k * v for k, v in zip(kernel, padded[x:x + size]))
        for x in range(len(line))
    ]


class FloatBlurFilter(Filter):
    """Gaussian blur with edge clamping for float images."""

    name = "Float Blur"

    def __init__(self) -> None:
        super().__init__({
            "radius": FilterParameter("radius", 0.0, 20.0, 2.0),
        })

    def apply(self, image: FloatImage) -> FloatImage:
        out = FloatImage(image.width_px, image.height_px, image.pixel_size_mm)
        if image.is_empty:
            return out

        radius = max(0, lround(self.value("radius")))
        if radius == 0:
            out.pixels = list(image.pixels)
            out.min_value = image.min_value
            out.max_value = image.max_value
            return out

        w = image.width_px
        kernel = _gaussian_kernel(radius)
        rows = [
            _blur_line(image.pixels[y * w:(y + 1) * w], kernel, radius)
            for y in range(image.height_px)
        ]
        columns = [_blur_line(col, kernel, radius) for col in zip(*rows)]
        out.pixels = [v for row in zip(*columns) for v in row]
        out.compute_range()
        return out