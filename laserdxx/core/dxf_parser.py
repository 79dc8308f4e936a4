"""DXF parser for extracting cut chains and size-code text"""

import io
import logging
import re
from typing import Iterable, List, Optional, Tuple

import ezdxf
from ezdxf import path as ezdxf_path
from ezdxf.document import Drawing
from ezdxf.lldxf.const import DXFError

from ..config import MIN_RING_POINTS, PipelineConfig
from ..exceptions import MalformedInputError
from .geometry import points_close
from .models import Point, Polyline, TextEntity

logger = logging.getLogger(__name__)

SUPPORTED_ENTITIES = "LINE LWPOLYLINE POLYLINE CIRCLE ARC TEXT MTEXT"

_BASE_SIZES = ["XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL",
               "2XL", "3XL", "4XL", "5XL", "2X", "3X", "4X", "5X"]
_YOUTH_SIZES = ["Y" + size for size in ["XS", "S", "M", "L", "XL"]]
_REGULAR_SIZES = [size + "R" for size in ["XS", "S", "M", "L", "XL", "XXL", "2XL", "3XL"]]
SIZE_CODES = tuple(_BASE_SIZES + _YOUTH_SIZES + _REGULAR_SIZES)

# Longest alternatives first so "XXL" wins over "XL" and "L"
SIZE_PATTERN = re.compile(
    r"(?<![A-Z0-9])("
    + "|".join(re.escape(code) for code in sorted(SIZE_CODES, key=len, reverse=True))
    + r")(?![A-Z0-9])"
)

# Lone S, M and L are common words and annotations ("CUT L 2"); they only
# count when they are the whole text or follow a size keyword
SIZE_KEYWORD = re.compile(r"(?<![A-Z])(?:SIZE|TALLA|TAILLE|GR)\.?\s*[:=\-]?\s*$")


def match_size_code(text: str) -> Optional[str]:
    """Return the size code contained in ``text``, or None"""
    upper = text.upper()
    for match in SIZE_PATTERN.finditer(upper):
        code = match.group(1)
        if len(code) > 1 or upper.strip() == code or SIZE_KEYWORD.search(upper[:match.start()]):
            return code
    return None


def load_drawing(text: str) -> Drawing:
    """Parse DXF text into an ezdxf document"""
    if not text or not text.strip():
        raise MalformedInputError("Empty DXF input")
    try:
        return ezdxf.read(io.StringIO(text))
    except (DXFError, ValueError) as e:
        raise MalformedInputError(f"Invalid DXF content: {e}") from e


class DXFParser:
    """Turns modelspace entities into polylines and size labels"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self._next_id = 0

    def parse(self, text: str, capture_text: bool = False) -> Tuple[List[Polyline], List[TextEntity]]:
        doc = load_drawing(text)
        return self.extract(doc.modelspace().query(SUPPORTED_ENTITIES), capture_text)

    def extract(self, entities: Iterable, capture_text: bool = False) -> Tuple[List[Polyline], List[TextEntity]]:
        polylines: List[Polyline] = []
        texts: List[TextEntity] = []
        skipped = 0

        for entity in entities:
            kind = entity.dxftype()
            if kind in ("TEXT", "MTEXT"):
                if capture_text:
                    label = self._text_to_label(entity)
                    if label is not None:
                        texts.append(label)
                continue

            if kind == "LINE":
                points, closed = self._line_points(entity), False
            elif kind == "LWPOLYLINE":
                points, closed = self._lwpolyline_points(entity), entity.closed
            elif kind == "POLYLINE":
                if not (entity.is_2d_polyline or entity.is_3d_polyline):
                    skipped += 1
                    continue
                points, closed = [Point(v.x, v.y) for v in entity.points()], entity.is_closed
            elif kind == "CIRCLE":
                points, closed = self._flatten(entity), True
            elif kind == "ARC":
                points, closed = self._flatten(entity), False
            else:
                skipped += 1
                continue

            polyline = self._make_polyline(points, closed, entity.dxf.layer)
            if polyline is not None:
                polylines.append(polyline)

        logger.info(f"Extracted {len(polylines)} chains and {len(texts)} size labels ({skipped} entities ignored)")
        return polylines, texts

    def _make_polyline(self, points: List[Point], closed: bool, layer: str) -> Optional[Polyline]:
        points = self._drop_duplicates(points)
        if len(points) < 2:
            return None

        eps = self.config.point_epsilon
        if len(points) >= MIN_RING_POINTS and points_close(points[0], points[-1], eps):
            points[-1] = points[0]
            closed = True
        elif closed:
            points.append(points[0])

        polyline = Polyline(id=self._next_id, points=tuple(points), closed=closed, original_layer=layer)
        self._next_id += 1
        return polyline

    def _drop_duplicates(self, points: List[Point]) -> List[Point]:
        eps = self.config.point_epsilon
        result: List[Point] = []
        for point in points:
            if result and points_close(result[-1], point, eps):
                continue
            result.append(point)
        return result

    def _line_points(self, line) -> List[Point]:
        start, end = line.dxf.start, line.dxf.end
        return [Point(start.x, start.y), Point(end.x, end.y)]

    def _lwpolyline_points(self, entity) -> List[Point]:
        if entity.has_arc:
            flattened = ezdxf_path.make_path(entity).flattening(self.config.arc_sagitta)
            return [Point(v.x, v.y) for v in flattened]
        return [Point(x, y) for x, y in entity.get_points("xy")]

    def _flatten(self, entity) -> List[Point]:
        return [Point(v.x, v.y) for v in entity.flattening(self.config.arc_sagitta)]

    def _text_to_label(self, entity) -> Optional[TextEntity]:
        if entity.dxftype() == "MTEXT":
            content = entity.plain_text()
            height = entity.dxf.get("char_height", 1.0)
        else:
            content = entity.dxf.text
            height = entity.dxf.get("height", 1.0)

        code = match_size_code(content)
        if code is None:
            return None
        insert = entity.dxf.insert
        return TextEntity(x=insert.x, y=insert.y, text=code, layer=entity.dxf.layer, height=height)


def extract_entities(text: str, capture_text: bool = False,
                     config: Optional[PipelineConfig] = None) -> Tuple[List[Polyline], List[TextEntity]]:
    """Parse DXF text into open/closed chains and recognised size labels"""
    return DXFParser(config).parse(text, capture_text)
