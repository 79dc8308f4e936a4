"""DXF R12 post-processor for the cutting machine"""

import logging
from typing import Iterable, List, Sequence, Tuple, Union

from ..config import EXPORT_SUFFIXES, ExportMode
from ..core.models import Layer, Polyline, TextEntity

logger = logging.getLogger(__name__)

LAYER_COLORS = {
    Layer.BOARDS: 1,  # red
    Layer.CUT: 3,  # green
}


def _fmt(value: float) -> str:
    return f"{value:.6f}"


class R12PostProcessor:
    """Writes classified polylines and labels as a minimal DXF R12 file.

    Internal geometry (BOARDS) is written before the outer cuts so a piece
    never drops out of the sheet before its details are cut.
    """

    def generate(self, polylines: Sequence[Polyline], labels: Sequence[TextEntity] = ()) -> str:
        tags: List[str] = []
        tags.extend(self._generate_header())
        tags.extend(["0", "SECTION", "2", "ENTITIES"])

        ordered = sorted(polylines, key=lambda p: 0 if p.layer == Layer.BOARDS else 1)
        for polyline in ordered:
            tags.extend(self._polyline_tags(polyline))
        for label in labels:
            tags.extend(self._text_tags(label))

        tags.extend(["0", "ENDSEC", "0", "EOF"])
        logger.info(f"Serialized {len(ordered)} polylines and {len(labels)} labels")
        return "\n".join(tags) + "\n"

    def _generate_header(self) -> List[str]:
        return [
            "0", "SECTION", "2", "HEADER",
            "9", "$ACADVER", "1", "AC1009",
            "0", "ENDSEC",
            "0", "SECTION", "2", "TABLES",
            "0", "ENDSEC",
        ]

    def _polyline_tags(self, polyline: Polyline) -> List[str]:
        layer = Layer.BOARDS if polyline.layer == Layer.BOARDS else Layer.CUT
        color = str(LAYER_COLORS[layer])
        points = polyline.points
        if polyline.closed and len(points) > 1 and points[0] == points[-1]:
            # The closed flag stands in for the repeated start vertex
            points = points[:-1]

        tags = [
            "0", "POLYLINE",
            "8", layer.value,
            "62", color,
            "66", "1",
            "10", _fmt(0.0), "20", _fmt(0.0), "30", _fmt(0.0),
            "70", "1" if polyline.closed else "0",
        ]
        for point in points:
            tags.extend([
                "0", "VERTEX",
                "8", layer.value,
                "10", _fmt(point.x), "20", _fmt(point.y), "30", _fmt(0.0),
            ])
        tags.extend(["0", "SEQEND", "8", layer.value])
        return tags

    def _text_tags(self, label: TextEntity) -> List[str]:
        x, y = _fmt(label.x), _fmt(label.y)
        return [
            "0", "TEXT",
            "8", Layer.BOARDS.value,
            "62", str(LAYER_COLORS[Layer.BOARDS]),
            "10", x, "20", y, "30", _fmt(0.0),
            "40", _fmt(label.height),
            "1", label.text,
            "72", "1",
            "11", x, "21", y, "31", _fmt(0.0),
        ]


def generate_r12(polylines: Sequence[Polyline], labels: Sequence[TextEntity] = ()) -> str:
    """Serialize polylines and labels to DXF R12 text"""
    return R12PostProcessor().generate(polylines, labels)


def select_for_export(polylines: Iterable[Polyline], labels: Iterable[TextEntity],
                      mode: Union[ExportMode, str] = ExportMode.ALL) -> Tuple[List[Polyline], List[TextEntity]]:
    """Pick the polylines and labels written for an export mode.

    CUT exports only outer cuts and no labels; BOARDS exports the internal
    geometry together with the labels.
    """
    mode = ExportMode(mode)
    polylines, labels = list(polylines), list(labels)
    if mode == ExportMode.CUT:
        return [p for p in polylines if p.layer == Layer.CUT], []
    if mode == ExportMode.BOARDS:
        return [p for p in polylines if p.layer == Layer.BOARDS], labels
    return polylines, labels


def export_filename(source_name: str, mode: Union[ExportMode, str] = ExportMode.ALL) -> str:
    """Output file name: source name without .dxf plus the mode suffix"""
    base = source_name[:-4] if source_name.lower().endswith(".dxf") else source_name
    return f"{base or 'LASERDXX'}{EXPORT_SUFFIXES[ExportMode(mode)]}.dxf"
