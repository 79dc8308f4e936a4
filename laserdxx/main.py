"""Pipeline orchestration: DXF text in, classified contours and stats out"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .config import UNITS_PER_YARD, ExportMode, PipelineConfig, ProcessOptions
from .core.dxf_parser import DXFParser
from .core.geometry import BoundingBox, merge_boxes
from .core.models import Polyline, ProcessedResult, ProcessingStats, toggle_layer
from .operations.classify import classify_polylines
from .operations.debris import filter_debris
from .operations.frame import detect_frame
from .operations.healing import heal_polylines
from .operations.labels import is_labelable_source, place_size_labels
from .operations.simplify import simplify_polylines
from .postprocessors.r12 import generate_r12, select_for_export

logger = logging.getLogger(__name__)


class LaserDXFProcessor:
    def __init__(self, options: Optional[ProcessOptions] = None, config: Optional[PipelineConfig] = None):
        self.options = options or ProcessOptions()
        self.config = config or PipelineConfig()

    def process(self, dxf_text: str) -> ProcessedResult:
        """Run every stage over one drawing"""
        config = self.config
        labeling = self.options.enable_labeling

        polylines, texts = DXFParser(config).parse(dxf_text, capture_text=labeling)
        original_count = len(polylines)

        polylines = heal_polylines(polylines, config.heal_tolerance)
        healed_count = len(polylines)

        polylines = simplify_polylines(polylines, config.collinear_epsilon)
        polylines, debris_removed = filter_debris(polylines, config.min_perimeter)

        frame_id = None
        if self.options.preserve_frame:
            frame_id = detect_frame(polylines, config.frame_width_bands)

        polylines = classify_polylines(polylines, frame_id)

        labels = []
        if labeling and is_labelable_source(dxf_text, config.label_source_marker):
            labels = place_size_labels(polylines, texts, frame_id, config)

        bounds = consumption_bounds(polylines, frame_id)
        stats = ProcessingStats(
            original_count=original_count,
            healed_count=healed_count,
            debris_removed=debris_removed,
            bounds=bounds,
            material_height_yards=bounds.height / UNITS_PER_YARD,
            material_width_yards=bounds.width / UNITS_PER_YARD,
        )
        logger.info(
            f"Processed drawing: {original_count} chains -> {len(polylines)} contours, "
            f"{stats.material_width_yards:.2f} yd long"
        )
        return ProcessedResult(polylines=polylines, labels=labels, stats=stats, frame_id=frame_id)


def consumption_bounds(polylines: Sequence[Polyline], frame_id: Optional[int] = None) -> BoundingBox:
    """Bounds of everything but the frame; the zero box when nothing is left"""
    return merge_boxes([p.bbox for p in polylines if p.id != frame_id])


def process_dxf(dxf_text: str, options: Optional[ProcessOptions] = None,
                config: Optional[PipelineConfig] = None) -> ProcessedResult:
    return LaserDXFProcessor(options, config).process(dxf_text)


def process_dxf_file(dxf_path: Union[str, Path], output_path: Union[str, Path],
                     mode: Union[ExportMode, str] = ExportMode.ALL,
                     preserve_frame: bool = True, enable_labeling: bool = False,
                     flip_ids: Iterable[int] = ()) -> ProcessedResult:
    """Process a DXF file and write the selected geometry as R12"""
    text = Path(dxf_path).read_text(encoding="utf-8", errors="replace")
    options = ProcessOptions(preserve_frame=preserve_frame, enable_labeling=enable_labeling)
    result = process_dxf(text, options)

    for contour_id in flip_ids:
        toggle_layer(result.polylines, contour_id)

    polylines, labels = select_for_export(result.polylines, result.labels, mode)
    Path(output_path).write_text(generate_r12(polylines, labels), encoding="utf-8")
    logger.info(f"Wrote {len(polylines)} polylines to {output_path}")
    return result

