"""Removal of redundant collinear vertices"""

import logging
from dataclasses import replace
from typing import List, Sequence

from ..config import COLLINEAR_EPSILON
from ..core.geometry import triangle_area
from ..core.models import Point, Polyline

logger = logging.getLogger(__name__)


def simplify_points(points: Sequence[Point], epsilon: float = COLLINEAR_EPSILON) -> List[Point]:
    """Drop interior vertices lying on the line between their neighbours.

    The previous neighbour is the last vertex kept, so a long straight run
    collapses to its two ends. Endpoints are always kept, and so is a
    vertex where the path turns back on itself.
    """
    if len(points) < 3:
        return list(points)

    kept = [points[0]]
    for i in range(1, len(points) - 1):
        if not _is_knot(kept[-1], points[i], points[i + 1], epsilon):
            kept.append(points[i])
    kept.append(points[-1])
    return kept


def _is_knot(a: Point, b: Point, c: Point, epsilon: float) -> bool:
    """``b`` is redundant if it is collinear with ``a`` and ``c`` and lies between them"""
    if triangle_area(a, b, c) >= epsilon:
        return False
    return (b[0] - a[0]) * (c[0] - b[0]) + (b[1] - a[1]) * (c[1] - b[1]) >= 0


def simplify_polylines(polylines: Sequence[Polyline], epsilon: float = COLLINEAR_EPSILON) -> List[Polyline]:
    result = []
    removed = 0
    for polyline in polylines:
        points = simplify_points(polyline.points, epsilon)
        if len(points) != len(polyline.points):
            removed += len(polyline.points) - len(points)
            polyline = replace(polyline, points=tuple(points))
        result.append(polyline)

    logger.info(f"Removed {removed} collinear vertices")
    return result
