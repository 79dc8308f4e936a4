import os
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, Field

# Geometric tolerances, in drawing units. Outputs may differ slightly from
# older revisions of the tool, which used 0.05 for healing and other debris
# thresholds.
POINT_EPSILON = 1e-6  # consecutive duplicate points / closed-by-coincidence
HEAL_TOLERANCE = 0.1  # endpoint distance for joining fragments
COLLINEAR_EPSILON = 1e-6  # triangle area below which a vertex is redundant
MIN_PERIMETER = 2.0  # shorter chains are debris
ARC_SAGITTA = 0.01  # max deviation when flattening arcs and circles

# A ring needs three distinct vertices plus the closing copy. Shorter chains
# whose ends meet (a slit drawn there and back) stay open.
MIN_RING_POINTS = 4

# Accepted bounding-box widths for the material frame: inches and millimeters
FRAME_WIDTH_BANDS: List[Tuple[float, float]] = [(40.0, 80.0), (1000.0, 2000.0)]

MAX_NESTING_DEPTH = 64
UNITS_PER_YARD = 36.0

# Size labelling
LABEL_SOURCE_MARKER = "OPTITEX"
LABEL_HEIGHT = 1.0
DIVIDER_MIN_HEIGHT_RATIO = 0.8
DIVIDER_MAX_ASPECT = 0.01


class ExportMode(str, Enum):
    ALL = "ALL"
    CUT = "CUT"
    BOARDS = "BOARDS"


EXPORT_SUFFIXES = {
    ExportMode.ALL: "_FULL",
    ExportMode.CUT: "_CUT_ONLY",
    ExportMode.BOARDS: "_INTERNAL_ONLY",
}


class ProcessOptions(BaseModel):
    preserve_frame: bool = Field(True, description="Detect the material frame and keep it out of the nesting")
    enable_labeling: bool = Field(False, description="Capture size codes and place one label per size zone")


class PipelineConfig(BaseModel):
    point_epsilon: float = Field(POINT_EPSILON, description="Distance under which consecutive points are duplicates")
    heal_tolerance: float = Field(HEAL_TOLERANCE, description="Max endpoint gap joined by the healer")
    collinear_epsilon: float = Field(COLLINEAR_EPSILON, description="Triangle area under which a vertex is dropped")
    min_perimeter: float = Field(MIN_PERIMETER, description="Chains with a shorter perimeter are debris")
    arc_sagitta: float = Field(ARC_SAGITTA, description="Max chord deviation when flattening arcs")
    frame_width_bands: List[Tuple[float, float]] = Field(
        default_factory=lambda: list(FRAME_WIDTH_BANDS),
        description="Accepted (min, max) frame widths",
    )
    label_source_marker: str = Field(LABEL_SOURCE_MARKER, description="Substring identifying a labelable export")
    label_height: float = Field(LABEL_HEIGHT, description="Height of placed size labels")
    divider_min_height_ratio: float = Field(
        DIVIDER_MIN_HEIGHT_RATIO, description="Min divider height as a fraction of the drawing height"
    )
    divider_max_aspect: float = Field(DIVIDER_MAX_ASPECT, description="Max divider width as a fraction of its height")


class AppConfig(BaseModel):
    app_name: str = "LaserDXX"
    version: str = "1.0.0"
    max_file_size: int = 50 * 1024 * 1024  # 50MB
    allowed_extensions: list[str] = [".dxf"]
    host: str = os.environ.get("LASERDXX_HOST", "0.0.0.0")
    port: int = int(os.environ.get("LASERDXX_PORT", "8000"))
    log_level: str = os.environ.get("LASERDXX_LOG_LEVEL", "info")


app_config = AppConfig()
