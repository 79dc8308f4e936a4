"""Size label placement: one label per size zone on its largest piece"""

import bisect
import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..config import PipelineConfig
from ..core.geometry import merge_boxes
from ..core.models import Layer, Polyline, TextEntity

logger = logging.getLogger(__name__)


def is_labelable_source(text: str, marker: str) -> bool:
    """Whether the raw drawing comes from the export flavor that carries size blocks"""
    return bool(marker) and marker.upper() in text.upper()


def find_dividers(polylines: Sequence[Polyline], frame_id: Optional[int] = None,
                  config: Optional[PipelineConfig] = None) -> List[float]:
    """X positions of the tall, thin marks separating size blocks"""
    config = config or PipelineConfig()
    shapes = [p for p in polylines if p.id != frame_id]
    drawing_height = merge_boxes([p.bbox for p in shapes]).height
    if drawing_height <= 0:
        return []

    positions = set()
    for polyline in shapes:
        bbox = polyline.bbox
        if bbox.height < config.divider_min_height_ratio * drawing_height:
            continue
        if bbox.width > config.divider_max_aspect * bbox.height:
            continue
        positions.add(bbox.center[0])
    return sorted(positions)


def place_size_labels(polylines: Sequence[Polyline], texts: Sequence[TextEntity],
                      frame_id: Optional[int] = None,
                      config: Optional[PipelineConfig] = None) -> List[TextEntity]:
    """Label the largest CUT piece of every zone that holds a size code"""
    config = config or PipelineConfig()
    if not texts:
        return []

    dividers = find_dividers(polylines, frame_id, config)

    codes_by_zone: Dict[int, Counter] = {}
    for text in texts:
        zone = bisect.bisect_right(dividers, text.x)
        codes_by_zone.setdefault(zone, Counter())[text.text] += 1

    largest: Dict[int, Polyline] = {}
    for polyline in polylines:
        if not polyline.closed or polyline.layer != Layer.CUT or polyline.id == frame_id:
            continue
        zone = bisect.bisect_right(dividers, polyline.bbox.center[0])
        current = largest.get(zone)
        if current is None or polyline.bbox.area > current.bbox.area:
            largest[zone] = polyline

    labels: List[TextEntity] = []
    for zone in sorted(codes_by_zone):
        piece = largest.get(zone)
        if piece is None:
            logger.debug(f"No CUT piece in size zone {zone}")
            continue
        # Counter keeps insertion order, so ties go to the first code seen
        code = codes_by_zone[zone].most_common(1)[0][0]
        bbox = piece.bbox
        labels.append(TextEntity(
            x=bbox.center[0],
            y=bbox.max_y + config.label_height,
            text=code,
            layer=Layer.BOARDS.value,
            height=config.label_height,
        ))

    logger.info(f"Placed {len(labels)} size labels across {len(dividers) + 1} zones")
    return labels
