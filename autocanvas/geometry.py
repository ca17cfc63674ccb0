"""Immutable 2D value types used by the layout pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping


class GeometryError(ValueError):
    """Raised when a geometric value object is constructed with invalid data."""


@dataclass(frozen=True)
class Point2D:
    """Position on the canvas, ``y`` grows downwards."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def origin(cls) -> "Point2D":
        return cls(0.0, 0.0)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Point2D":
        return cls(float(data["x"]), float(data["y"]))  # type: ignore[arg-type]

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: "Point2D") -> "Point2D":
        return Point2D((self.x + other.x) * 0.5, (self.y + other.y) * 0.5)

    def offset(self, dx: float, dy: float) -> "Point2D":
        return Point2D(self.x + dx, self.y + dy)

    def scale(self, factor: float) -> "Point2D":
        return Point2D(self.x * factor, self.y * factor)

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


DEFAULT_NODE_WIDTH = 250.0
DEFAULT_NODE_HEIGHT = 150.0


@dataclass(frozen=True)
class Size2D:
    """Non-negative width/height pair."""

    width: float
    height: float

    def __post_init__(self) -> None:
        width = float(self.width)
        height = float(self.height)
        if not (math.isfinite(width) and math.isfinite(height)):
            raise GeometryError(f"size must be finite, got {width}x{height}")
        if width < 0 or height < 0:
            raise GeometryError(f"size must be non-negative, got {width}x{height}")
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)

    @classmethod
    def default_node(cls) -> "Size2D":
        return cls(DEFAULT_NODE_WIDTH, DEFAULT_NODE_HEIGHT)

    @classmethod
    def square(cls, side: float) -> "Size2D":
        return cls(side, side)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        return 0.0 if self.height == 0 else self.width / self.height

    def scale(self, factor: float) -> "Size2D":
        return Size2D(self.width * factor, self.height * factor)

    def pad(self, padding: float) -> "Size2D":
        return Size2D(self.width + 2.0 * padding, self.height + 2.0 * padding)

    def contains(self, other: "Size2D") -> bool:
        return self.width >= other.width and self.height >= other.height

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}"


__all__ = [
    "DEFAULT_NODE_HEIGHT",
    "DEFAULT_NODE_WIDTH",
    "GeometryError",
    "Point2D",
    "Size2D",
]
