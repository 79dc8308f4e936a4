"""Classification of contours into CUT and BOARDS by nesting depth"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from ..config import MAX_NESTING_DEPTH
from ..core.geometry import point_in_polygon
from ..core.models import Layer, Polyline

logger = logging.getLogger(__name__)


@dataclass
class ContainmentNode:
    polyline: Polyline
    children: List["ContainmentNode"] = field(default_factory=list)


def contains(outer: Polyline, inner: Polyline) -> bool:
    """Whether ``inner`` nests in ``outer``, judged by bbox and first vertex only"""
    if not outer.bbox.contains_box(inner.bbox):
        return False
    return point_in_polygon(inner.start, outer.points)


def build_containment_forest(closed: Sequence[Polyline],
                             max_depth: int = MAX_NESTING_DEPTH) -> List[ContainmentNode]:
    """Insert closed chains, largest first, under their deepest container.

    Sorting by area guarantees a parent is in the forest before any chain
    it can contain. Descent stops at ``max_depth`` levels.
    """
    roots: List[ContainmentNode] = []
    for polyline in sorted(closed, key=lambda p: p.area, reverse=True):
        siblings = roots
        depth = 0
        while depth < max_depth:
            parent = next((node for node in siblings if contains(node.polyline, polyline)), None)
            if parent is None:
                break
            siblings = parent.children
            depth += 1
        siblings.append(ContainmentNode(polyline))
    return roots


def nesting_depths(roots: Sequence[ContainmentNode]) -> Dict[int, int]:
    """Map polyline id to nesting depth, walking the forest with an explicit stack"""
    depths: Dict[int, int] = {}
    stack = [(node, 0) for node in roots]
    while stack:
        node, depth = stack.pop()
        depths[node.polyline.id] = depth
        stack.extend((child, depth + 1) for child in node.children)
    return depths


def classify_polylines(polylines: Sequence[Polyline], frame_id: Optional[int] = None) -> List[Polyline]:
    """Assign CUT/BOARDS layers; returns new polylines in the input order.

    Closed chains alternate CUT, BOARDS, CUT... with nesting depth. Open
    chains starting inside a CUT piece are internal slits (BOARDS), other
    open chains stay CUT. The frame is always BOARDS.
    """
    closed = [p for p in polylines if p.closed and p.id != frame_id]
    depths = nesting_depths(build_containment_forest(closed))

    layers: Dict[int, Layer] = {
        pid: (Layer.CUT if depth % 2 == 0 else Layer.BOARDS) for pid, depth in depths.items()
    }
    if frame_id is not None:
        layers[frame_id] = Layer.BOARDS

    cut_pieces = [p for p in closed if layers[p.id] == Layer.CUT]
    for polyline in polylines:
        if polyline.closed or polyline.id == frame_id:
            continue
        inside_piece = any(point_in_polygon(polyline.start, piece.points) for piece in cut_pieces)
        layers[polyline.id] = Layer.BOARDS if inside_piece else Layer.CUT

    result = [replace(p, layer=layers[p.id]) for p in polylines]
    boards = sum(1 for p in result if p.layer == Layer.BOARDS)
    logger.info(f"Classified {len(result)} contours: {len(result) - boards} CUT, {boards} BOARDS")
    return result
