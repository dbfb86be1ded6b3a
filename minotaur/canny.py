"""Canny edge detection for 8-bit grayscale bitmaps."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .base import Bitmap, Filter, FilterParameter, lround

_STRONG = 255
_WEAK = 128


def _clamp(v: int, lo: int, hi: int) -> int:
    return lo if v < lo else (hi if v > hi else v)


def _gaussian_kernel(radius: int) -> list[float]:
    if radius <= 0:
        return [1.0]
    sigma = max(0.5, radius / 3.0)
    two_sigma2 = 2.0 * sigma * sigma
    weights = [math.exp(-(i * i) / two_sigma2) for i in range(-radius, radius + 1)]
    total = sum(weights)
    return [w / total for w in weights]


def _blur_line(line: Sequence[int], kernel: list[float], radius: int) -> list[int]:
    padded = [line[0]] * radius + list(line) + [line[-1]] * radius
    size = len(kernel)
    return [
        _clamp(lround(sum(k * v for k, v in zip(kernel, padded[x:x + size]))), 0, 255)
        for x in range(len(line))
    ]


def _direction_bin(gx: int, gy: int) -> int:
    angle = math.degrees(math.atan2(gy, gx))
    if angle < 0.0:
        angle += 180.0
    if angle < 22.5 or angle >= 157.5:
        return 0
    if angle < 67.5:
        return 1
    if angle < 112.5:
        return 2
    return 3


# Neighbour offsets (dx, dy) compared during non-maximum suppression per direction bin.
_NMS_OFFSETS = {
    0: ((-1, 0), (1, 0)),
    1: ((-1, -1), (1, 1)),
    2: ((0, -1), (0, 1)),
    3: ((-1, 1), (1, -1)),
}


class CannyFilter(Filter):
    """Gaussian blur, Sobel gradients, non-maximum suppression and hysteresis."""

    name = "Canny"

    def __init__(self) -> None:
        super().__init__({
            "blur_radius_px": FilterParameter("Blur Radius (px)", 0.0, 5.0, 1.0),
            "low_threshold": FilterParameter("Low Threshold", 0.0, 255.0, 50.0),
            "high_threshold": FilterParameter("High Threshold", 0.0, 255.0, 150.0),
        })

    def _blurred(self, image: Bitmap, radius: int) -> list[int]:
        w, h = image.width_px, image.height_px
        if radius <= 0:
            return list(image.pixels[:w * h])
        kernel = _gaussian_kernel(radius)
        rows = [_blur_line(row, kernel, radius) for row in image.rows()]
        columns = [_blur_line(col, kernel, radius) for col in zip(*rows)]
        return [v for row in zip(*columns) for v in row]

    def apply(self, image: Bitmap) -> Bitmap:
        out = Bitmap(image.width_px, image.height_px, image.pixel_size_mm)
        if image.is_empty:
            return out

        w, h = image.width_px, image.height_px
        n = w * h
        blur_radius = _clamp(lround(self.value("blur_radius_px")), 0, 64)
        low = _clamp(lround(self.value("low_threshold")), 0, 255)
        high = _clamp(lround(self.value("high_threshold")), 0, 255)
        if low > high:
            low, high = high, low

        src = self._blurred(image, blur_radius)

        interior = [(x, y) for y in range(1, h - 1) for x in range(1, w - 1)]

        magnitude = [0] * n
        direction = [0] * n
        for x, y in interior:
            i = y * w + x
            tl, tc, tr = src[i - w - 1], src[i - w], src[i - w + 1]
            ml, mr = src[i - 1], src[i + 1]
            bl, bc, br = src[i + w - 1], src[i + w], src[i + w + 1]
            gx = -tl - 2 * ml - bl + tr + 2 * mr + br
            gy = -tl - 2 * tc - tr + bl + 2 * bc + br
            magnitude[i] = min(abs(gx) + abs(gy), 255)
            direction[i] = _direction_bin(gx, gy)

        edges = [0] * n
        for x, y in interior:
            i = y * w + x
            m = magnitude[i]
            (ax, ay), (bx, by) = _NMS_OFFSETS[direction[i]]
            m1 = magnitude[(y + ay) * w + x + ax]
            m2 = magnitude[(y + by) * w + x + bx]
            v = m if m >= m1 and m >= m2 else 0
            if v >= high:
                edges[i] = _STRONG
            elif v >= low:
                edges[i] = _WEAK

        for x, y in interior:
            if edges[y * w + x] != _STRONG:
                continue
            stack = [(x, y)]
            while stack:
                px, py = stack.pop()
                for dy in (-1, 0, 1):
                    for dx in (-1, 0, 1):
                        if dx == 0 and dy == 0:
                            continue
                        nx, ny = px + dx, py + dy
                        if nx <= 0 or nx >= w - 1 or ny <= 0 or ny >= h - 1:
                            continue
                        ni = ny * w + nx
                        if edges[ni] == _WEAK:
                            edges[ni] = _STRONG
                            stack.append((nx, ny))

        out.pixels = bytearray(255 if v == _STRONG else 0 for v in edges)
        return out