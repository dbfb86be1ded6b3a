"""Core image, path and filter types shared by all filters."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

Point = tuple[float, float]
Color = tuple[float, float, float, float]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)


def lround(x: float) -> int:
    """Round to the nearest integer, with halves going away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


@dataclass
class FilterParameter:
    """A tunable numeric filter setting with its allowed range."""

    label: str
    min_value: float
    max_value: float
    value: float


@dataclass
class Bitmap:
    """An 8-bit grayscale raster, stored row by row."""

    width_px: int = 0
    height_px: int = 0
    pixel_size_mm: float = 1.0
    pixels: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.pixels = bytearray(self.pixels)

    @property
    def is_empty(self) -> bool:
        return self.width_px <= 0 or self.height_px <= 0 or not self.pixels

    def rows(self) -> list[list[int]]:
        """Return the pixels as a list of rows."""
        w = self.width_px
        return [list(self.pixels[y * w:(y + 1) * w]) for y in range(self.height_px)]


@dataclass
class FloatImage:
    """A floating-point raster with a cached value range."""

    width_px: int = 0
    height_px: int = 0
    pixel_size_mm: float = 1.0
    pixels: list[float] = field(default_factory=list)
    min_value: float = 0.0
    max_value: float = 0.0

    def __post_init__(self) -> None:
        self.pixels = [float(v) for v in self.pixels]

    @property
    def is_empty(self) -> bool:
        return self.width_px <= 0 or self.height_px <= 0 or not self.pixels

    def compute_range(self) -> None:
        """Update min_value and max_value from the pixels."""
        if self.pixels:
            self.min_value = min(self.pixels)
            self.max_value = max(self.pixels)
        else:
            self.min_value = 0.0
            self.max_value = 0.0


@dataclass
class Path:
    """A polyline in millimetres."""

    points: list[Point] = field(default_factory=list)
    closed: bool = False


@dataclass
class PathSet:
    """A collection of polylines with a colour and bounding box."""

    paths: list[Path] = field(default_factory=list)
    color: Color = WHITE
    aabb_min: Optional[Point] = None
    aabb_max: Optional[Point] = None

    def compute_aabb(self) -> None:
        """Update the axis-aligned bounding box from all path points."""
        points = [p for path in self.paths for p in path.points]
        if not points:
            self.aabb_min = None
            self.aabb_max = None
            return
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        self.aabb_min = (min(xs), min(ys))
        self.aabb_max = (max(xs), max(ys))


class Filter(ABC):
    """Base for filters: named parameters plus a change counter."""

    name: str = ""

    def __init__(self, parameters: dict[str, FilterParameter]) -> None:
        self.parameters: dict[str, FilterParameter] = dict(parameters)
        self.version = 0

    def value(self, key: str) -> float:
        """Current value of a parameter; KeyError if unknown."""
        return self.parameters[key].value

    def set_parameter(self, key: str, value: float) -> None:
        """Set a parameter value and bump the version counter."""
        if key not in self.parameters:
            raise KeyError(key)
        self.parameters[key].value = float(value)
        self.version += 1

    @abstractmethod
    def apply(self, image: Any) -> Any:
        """Run the filter on *image* and return a new result."""