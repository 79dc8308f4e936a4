"""Gap healing: joins fragmented open chains into longer chains and loops"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from ..config import HEAL_TOLERANCE, MIN_RING_POINTS
from ..core.geometry import points_close
from ..core.models import Point, Polyline

logger = logging.getLogger(__name__)


def heal_polylines(polylines: Sequence[Polyline], tolerance: float = HEAL_TOLERANCE) -> List[Polyline]:
    """Merge open chains whose endpoints meet, repeating until nothing merges.

    A chain built in one pass can reach a fragment that was already visited
    in that pass, so passes are repeated while the chain count keeps
    dropping. Each merge removes one chain, which bounds the loop.
    """
    chains = list(polylines)
    passes = 0
    while True:
        passes += 1
        healed = _heal_pass(chains, tolerance)
        if len(healed) >= len(chains):
            break
        chains = healed

    closed = sum(1 for chain in healed if chain.closed)
    logger.info(f"Healed {len(polylines)} chains into {len(healed)} ({closed} closed) in {passes} passes")
    return healed


def _heal_pass(chains: List[Polyline], tolerance: float) -> List[Polyline]:
    consumed = [False] * len(chains)
    result: List[Polyline] = []

    for i, chain in enumerate(chains):
        if consumed[i]:
            continue
        consumed[i] = True
        if chain.closed:
            result.append(chain)
            continue

        points = list(chain.points)
        closed = False
        while True:
            if len(points) >= MIN_RING_POINTS and points_close(points[0], points[-1], tolerance):
                points[-1] = points[0]
                closed = True
                break

            extended = False
            for j, other in enumerate(chains):
                if consumed[j] or other.closed:
                    continue
                joined = _join(points, list(other.points), tolerance)
                if joined is not None:
                    points = joined
                    consumed[j] = True
                    extended = True
                    break
            if not extended:
                break

        if closed or len(points) != len(chain.points):
            chain = replace(chain, points=tuple(points), closed=closed)
        result.append(chain)

    return result


def _join(points: List[Point], other: List[Point], tolerance: float) -> Optional[List[Point]]:
    """Attach ``other`` to either end of ``points``, keeping our copy of the shared vertex"""
    if points_close(points[-1], other[0], tolerance):
        return points + other[1:]
    if points_close(points[-1], other[-1], tolerance):
        return points + other[::-1][1:]
    if points_close(points[0], other[-1], tolerance):
        return other[:-1] + points
    if points_close(points[0], other[0], tolerance):
        return other[::-1][:-1] + points
    return None
