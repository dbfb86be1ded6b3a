"""Bias/gain/invert adjustment of 8-bit grayscale bitmaps."""

from __future__ import annotations

from .base import Bitmap, Filter, FilterParameter, lround


class LevelsFilter(Filter):
    """Applies (v + bias) * gain on normalised values, optionally inverted."""

    name = "Levels"

    def __init__(self) -> None:
        super().__init__({
            "bias": FilterParameter("Bias", -1.0, 1.0, 0.0),
            "gain": FilterParameter("Gain", 0.0, 4.0, 1.0),
            "invert": FilterParameter("Invert (>=0.5 on)", 0.0, 1.0, 0.0),
        })

    def _level(self, v: int, bias: float, gain: float, invert: bool) -> int:
        f = (v / 255.0 + bias) * gain
        f = min(max(f, 0.0), 1.0)
        if invert:
            f = 1.0 - f
        return min(max(lround(f * 255.0), 0), 255)

    def apply(self, image: Bitmap) -> Bitmap:
        out = Bitmap(image.width_px, image.height_px, image.pixel_size_mm)
        if image.is_empty:
            return out

        bias = self.value("bias")
        gain = self.value("gain")
        invert = self.value("invert") > 0.5
        table = bytes(self._level(v, bias, gain, invert) for v in range(256))
        total = image.width_px * image.height_px
        out.pixels = bytearray(image.pixels[:total].translate(table))
        return out