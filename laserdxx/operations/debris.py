"""Filtering of stray short geometry"""

import logging
from typing import List, Sequence, Tuple

from ..config import MIN_PERIMETER
from ..core.models import Polyline

logger = logging.getLogger(__name__)


def filter_debris(polylines: Sequence[Polyline],
                  min_perimeter: float = MIN_PERIMETER) -> Tuple[List[Polyline], int]:
    """Drop chains shorter than ``min_perimeter``; returns (kept, removed count)"""
    kept = [p for p in polylines if p.perimeter >= min_perimeter]
    removed = len(polylines) - len(kept)
    if removed:
        logger.info(f"Removed {removed} debris chains shorter than {min_perimeter}")
    return kept, removed
