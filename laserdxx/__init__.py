"""DXF cut-path cleanup and CUT/BOARDS classification for laser cutting"""

from .config import ExportMode, PipelineConfig, ProcessOptions
from .core.models import Layer, Point, Polyline, ProcessedResult, TextEntity, toggle_layer
from .exceptions import LaserDXXError, MalformedInputError, UnknownContourError
from .main import LaserDXFProcessor, process_dxf
from .postprocessors.r12 import generate_r12, select_for_export

__version__ = "1.0.0"

__all__ = [
    "ExportMode",
    "Layer",
    "LaserDXFProcessor",
    "LaserDXXError",
    "MalformedInputError",
    "PipelineConfig",
    "Point",
    "Polyline",
    "ProcessOptions",
    "ProcessedResult",
    "TextEntity",
    "UnknownContourError",
    "generate_r12",
    "process_dxf",
    "select_for_export",
    "toggle_layer",
]
