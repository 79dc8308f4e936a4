"""Contours, labels and the pipeline result"""

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Iterable, List, NamedTuple, Optional, Tuple

from ..exceptions import UnknownContourError
from .geometry import BoundingBox, bounding_box, path_length, polygon_area


class Point(NamedTuple):
    x: float
    y: float


class Layer(str, Enum):
    CUT = "CUT"
    BOARDS = "BOARDS"


@dataclass
class Polyline:
    """A contour (chain of points), open or closed.

    ``id`` is assigned once at extraction and survives every stage. Stages
    build new polylines with ``dataclasses.replace``; only ``layer`` is
    changed afterwards, through :func:`toggle_layer`.
    """
    id: int
    points: Tuple[Point, ...]
    closed: bool = False
    layer: Optional[Layer] = None
    original_layer: str = "0"

    def __post_init__(self):
        self.points = tuple(Point(float(p[0]), float(p[1])) for p in self.points)
        # Re-close rather than carry a ring whose ends drifted apart
        if self.closed and self.points and self.points[0] != self.points[-1]:
            self.points = self.points + (self.points[0],)

    @cached_property
    def area(self) -> float:
        return polygon_area(self.points) if self.closed else 0.0

    @cached_property
    def bbox(self) -> BoundingBox:
        return bounding_box(self.points)

    @cached_property
    def perimeter(self) -> float:
        return path_length(self.points, closed=self.closed)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "points": [{"x": p.x, "y": p.y} for p in self.points],
            "closed": self.closed,
            "layer": self.layer.value if self.layer else None,
            "original_layer": self.original_layer,
        }


@dataclass
class TextEntity:
    """A placed size label"""
    x: float
    y: float
    text: str
    layer: str = Layer.BOARDS.value
    height: float = 1.0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "text": self.text, "layer": self.layer, "height": self.height}


@dataclass
class ProcessingStats:
    original_count: int = 0
    healed_count: int = 0
    debris_removed: int = 0
    bounds: BoundingBox = field(default_factory=BoundingBox.empty)
    material_height_yards: float = 0.0
    material_width_yards: float = 0.0

    def to_dict(self) -> dict:
        return {
            "original_count": self.original_count,
            "healed_count": self.healed_count,
            "debris_removed": self.debris_removed,
            "bounds": self.bounds.to_dict(),
            "material_height_yards": self.material_height_yards,
            "material_width_yards": self.material_width_yards,
        }


@dataclass
class ProcessedResult:
    polylines: List[Polyline]
    labels: List[TextEntity]
    stats: ProcessingStats
    frame_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "polylines": [p.to_dict() for p in self.polylines],
            "labels": [label.to_dict() for label in self.labels],
            "stats": self.stats.to_dict(),
            "frame_id": self.frame_id,
        }


def toggle_layer(polylines: Iterable[Polyline], contour_id: int) -> Polyline:
    """Flip the contour with ``contour_id`` between CUT and BOARDS in place"""
    for polyline in polylines:
        if polyline.id == contour_id:
            polyline.layer = Layer.BOARDS if polyline.layer != Layer.BOARDS else Layer.CUT
            return polyline
    raise UnknownContourError(contour_id)
