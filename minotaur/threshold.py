"""Band threshold: pixels inside [min, max] become black, others white."""

from __future__ import annotations

from .base import Bitmap, Filter, FilterParameter


class ThresholdFilter(Filter):
    """Maps pixels within [min, max] to 0 and all others to 255."""

    name = "Threshold"

    def __init__(self) -> None:
        super().__init__({
            "min": FilterParameter("Min", 0.0, 255.0, 50.0),
            "max": FilterParameter("Max", 0.0, 255.0, 150.0),
        })

    def apply(self, image: Bitmap) -> Bitmap:
        out = Bitmap(image.width_px, image.height_px, image.pixel_size_mm)
        if image.is_empty:
            return out

        lo = int(self.value("min"))
        hi = int(self.value("max"))
        if lo > hi:
            lo, hi = hi, lo
        lo = min(max(lo, 0), 255)
        hi = min(max(hi, 0), 255)

        table = bytes(0 if lo <= v <= hi else 255 for v in range(256))
        total = image.width_px * image.height_px
        out.pixels = bytearray(image.pixels[:total].translate(table))
        return out