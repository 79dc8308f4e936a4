"""Detection of the material frame drawn around the pieces"""

import logging
from typing import Optional, Sequence, Tuple

from ..config import FRAME_WIDTH_BANDS
from ..core.geometry import point_in_polygon
from ..core.models import Polyline

logger = logging.getLogger(__name__)


def _in_band(width: float, bands: Sequence[Tuple[float, float]]) -> bool:
    return any(low <= width <= high for low, high in bands)


def detect_frame(polylines: Sequence[Polyline],
                 width_bands: Sequence[Tuple[float, float]] = FRAME_WIDTH_BANDS) -> Optional[int]:
    """Return the id of the frame rectangle, or None.

    The candidate is the closed chain with the largest bounding box whose
    width matches a roll width (inch or millimeter band). It only counts as
    a frame if some other chain starts inside it.
    """
    candidates = [p for p in polylines if p.closed and _in_band(p.bbox.width, width_bands)]
    if not candidates:
        logger.debug("No frame candidate in the roll width bands")
        return None

    frame = max(candidates, key=lambda p: p.bbox.area)
    holds_piece = any(
        other.id != frame.id and point_in_polygon(other.start, frame.points)
        for other in polylines
    )
    if not holds_piece:
        logger.debug(f"Rejected frame candidate {frame.id}: nothing inside it")
        return None

    bbox = frame.bbox
    logger.info(f"Detected material frame {frame.id}: {bbox.width:.1f}x{bbox.height:.1f}")
    return frame.id
