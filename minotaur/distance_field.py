"""Signed chamfer distance field from a thresholded bitmap."""

from __future__ import annotations

from collections.abc import Sequence

from .base import Bitmap, Filter, FilterParameter, FloatImage, lround

_INF = 1e20
_SQRT2 = 1.41421356237


def distance_transform_chamfer(
    distances: Sequence[float], width: int, height: int, w_orth: float, w_diag: float
) -> list[float]:
    """Two-pass chamfer transform; zeros are seeds. Returns a new list."""
    if len(distances) != width * height:
        raise ValueError("distances must hold width * height values")
    d = list(distances)

    for y in range(height):
        for x in range(width):
            i = y * width + x
            best = d[i]
            if best == 0.0:
                continue
            if x > 0:
                best = min(best, d[i - 1] + w_orth)
            if y > 0:
                best = min(best, d[i - width] + w_orth)
                if x > 0:
                    best = min(best, d[i - 1 - width] + w_diag)
                if x + 1 < width:
                    best = min(best, d[i + 1 - width] + w_diag)
            d[i] = best

    for y in reversed(range(height)):
        for x in reversed(range(width)):
            i = y * width + x
            best = d[i]
            if x + 1 < width:
                best = min(best, d[i + 1] + w_orth)
            if y + 1 < height:
                best = min(best, d[i + width] + w_orth)
                if x + 1 < width:
                    best = min(best, d[i + 1 + width] + w_diag)
                if x > 0:
                    best = min(best, d[i - 1 + width] + w_diag)
            d[i] = best

    return d


class BitmapToFloatFilter(Filter):
    """Signed distance field in mm: negative inside foreground (bright) pixels."""

    name = "Bitmap Distance Field"

    def __init__(self) -> None:
        super().__init__({
            "threshold": FilterParameter("threshold", 0.0, 1.0, 0.5),
        })

    def apply(self, image: Bitmap) -> FloatImage:
        w, h = image.width_px, image.height_px
        n = w * h
        out = FloatImage(w, h, image.pixel_size_mm)
        if n <= 0:
            return out

        cut = min(max(lround(self.value("threshold") * 255.0), 0), 255)
        fg = [v >= cut for v in image.pixels[:n]]
        has_fg = any(fg)
        has_bg = not all(fg)

        w_orth = image.pixel_size_mm
        w_diag = _SQRT2 * image.pixel_size_mm

        to_fg = [0.0 if f else _INF for f in fg]
        if has_fg:
            to_fg = distance_transform_chamfer(to_fg, w, h, w_orth, w_diag)
        to_bg = [_INF if f else 0.0 for f in fg]
        if has_bg:
            to_bg = distance_transform_chamfer(to_bg, w, h, w_orth, w_diag)

        out.pixels = [
            (-db if has_bg else 0.0) if f else (df if has_fg else 0.0)
            for f, df, db in zip(fg, to_fg, to_bg)
        ]
        out.compute_range()
        return out