"""Planar helpers shared by the pipeline stages"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from shapely.geometry import LineString, Polygon

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounds (min_x, min_y, max_x, max_y)"""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def empty(cls) -> "BoundingBox":
        return cls(0.0, 0.0, 0.0, 0.0)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Coordinate:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def contains_box(self, other: "BoundingBox") -> bool:
        return (self.min_x <= other.min_x and self.min_y <= other.min_y
                and other.max_x <= self.max_x and other.max_y <= self.max_y)

    def to_dict(self) -> dict:
        return {"min_x": self.min_x, "min_y": self.min_y, "max_x": self.max_x, "max_y": self.max_y}


def distance(p1: Coordinate, p2: Coordinate) -> float:
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def points_close(p1: Coordinate, p2: Coordinate, tolerance: float) -> bool:
    """Check if two points are within tolerance of each other"""
    return distance(p1, p2) <= tolerance


def triangle_area(a: Coordinate, b: Coordinate, c: Coordinate) -> float:
    return abs((b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1])) / 2


def bounding_box(points: Sequence[Coordinate]) -> BoundingBox:
    if not points:
        return BoundingBox.empty()
    coords = np.asarray(points, dtype=float)
    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    return BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))


def merge_boxes(boxes: Sequence[BoundingBox]) -> BoundingBox:
    if not boxes:
        return BoundingBox.empty()
    return BoundingBox(
        min(b.min_x for b in boxes),
        min(b.min_y for b in boxes),
        max(b.max_x for b in boxes),
        max(b.max_y for b in boxes),
    )


def polygon_area(points: Sequence[Coordinate]) -> float:
    """Absolute shoelace area of a ring; degenerate rings have no area"""
    if len(points) < 4:
        return 0.0
    return float(Polygon(points).area)


def path_length(points: Sequence[Coordinate], closed: bool = False) -> float:
    """Sum of segment lengths, plus the closing edge when it is missing"""
    if len(points) < 2:
        return 0.0
    length = float(LineString(points).length)
    if closed and tuple(points[0]) != tuple(points[-1]):
        length += distance(points[-1], points[0])
    return length


def point_in_polygon(point: Coordinate, ring: Sequence[Coordinate]) -> bool:
    """Ray casting test of a point against a closed ring"""
    if len(ring) < 4:
        return False
    coords = np.asarray(ring, dtype=float)
    x1, y1 = coords[:-1, 0], coords[:-1, 1]
    x2, y2 = coords[1:, 0], coords[1:, 1]
    px, py = point
    straddles = (y1 > py) != (y2 > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (x2 - x1) * (py - y1) / (y2 - y1) + x1
    crossings = np.count_nonzero(straddles & (px < x_cross))
    return bool(crossings % 2)
