import pytest

from conftest import chain, ring, square
from laserdxx.config import ExportMode
from laserdxx.core.dxf_parser import extract_entities
from laserdxx.core.models import Layer, TextEntity
from laserdxx.operations.healing import heal_polylines
from laserdxx.postprocessors.r12 import export_filename, generate_r12, select_for_export


def classified():
    return [
        ring(0, square(100), Layer.CUT),
        ring(1, square(50, (25, 25)), Layer.BOARDS),
        chain(2, [(10, 10), (10.5, 20.25)], Layer.BOARDS),
    ]


def tag_pairs(text):
    lines = text.split("\n")
    assert lines[-1] == ""
    lines = lines[:-1]
    assert len(lines) % 2 == 0
    return list(zip(lines[0::2], lines[1::2]))


def test_document_structure():
    """R12 header, an entities section, EOF"""
    pairs = tag_pairs(generate_r12(classified()))

    assert pairs[:4] == [("0", "SECTION"), ("2", "HEADER"), ("9", "$ACADVER"), ("1", "AC1009")]
    assert ("2", "ENTITIES") in pairs
    assert pairs[-2:] == [("0", "ENDSEC"), ("0", "EOF")]


def test_boards_written_before_cut():
    pairs = tag_pairs(generate_r12(classified()))

    polyline_layers = [pairs[i + 1][1] for i, pair in enumerate(pairs) if pair == ("0", "POLYLINE")]

    assert polyline_layers == ["BOARDS", "BOARDS", "CUT"]


def test_colors_and_flags():
    """BOARDS are red (1), CUT green (3); closed flag set on rings"""
    text = generate_r12([ring(0, square(10), Layer.CUT)])

    assert "0\nPOLYLINE\n8\nCUT\n62\n3\n66\n1\n" in text
    assert "70\n1\n" in text
    assert text.count("0\nVERTEX\n") == 4
    assert text.count("0\nSEQEND\n") == 1


def test_coordinates_fixed_precision():
    text = generate_r12([chain(0, [(10, 10), (10.5, 20.25)], Layer.BOARDS)])

    assert "62\n1\n" in text
    assert "10\n10.500000\n20\n20.250000\n30\n0.000000\n" in text
    assert "70\n0\n" in text


def test_unclassified_written_as_cut():
    text = generate_r12([chain(0, [(0, 0), (5, 5)])])

    assert "8\nCUT\n62\n3\n" in text


def test_label_tags():
    label = TextEntity(30.0, 51.0, "S", "BOARDS", 1.0)

    text = generate_r12([], [label])

    assert (
        "0\nTEXT\n8\nBOARDS\n62\n1\n10\n30.000000\n20\n51.000000\n30\n0.000000\n"
        "40\n1.000000\n1\nS\n72\n1\n11\n30.000000\n21\n51.000000\n31\n0.000000\n"
    ) in text


def test_output_reads_back():
    """Written files load again with the same geometry and labels"""
    label = TextEntity(50.0, 101.0, "XL", "BOARDS", 1.0)

    polylines, texts = extract_entities(generate_r12(classified(), [label]), capture_text=True)

    shapes = {(p.original_layer, p.closed, len(p.points)) for p in polylines}
    assert shapes == {("CUT", True, 5), ("BOARDS", True, 5), ("BOARDS", False, 2)}
    assert [(t.x, t.y, t.text) for t in texts] == [(50.0, 101.0, "XL")]


def flat(points):
    return [value for point in points for value in point]


def test_round_trip_keeps_coordinates():
    """Read-back geometry matches to six decimals, BOARDS first then CUT"""
    polylines = [
        ring(0, square(100), Layer.CUT),
        ring(1, square(12.345678, (25.125, 25.5)), Layer.BOARDS),
        chain(2, [(10, 10), (10.5, 20.25), (33.3333333, 1.0000004)], Layer.BOARDS),
        chain(3, [(0, -5), (10, -5), (0, -5)], Layer.CUT),
    ]
    written_order = [polylines[1], polylines[2], polylines[0], polylines[3]]

    read_back, _ = extract_entities(generate_r12(polylines))

    assert len(read_back) == len(written_order)
    for original, loaded in zip(written_order, read_back):
        assert loaded.original_layer == original.layer.value
        assert loaded.closed == original.closed
        assert flat(loaded.points) == pytest.approx(flat(original.points), abs=1e-6)


def test_there_and_back_chain_reads_back_open():
    """Open chains ending on their start are not turned into rings"""
    slit = heal_polylines([chain(0, [(0, 0), (10, 0)]), chain(1, [(10, 0), (0, 0)])])

    read_back, _ = extract_entities(generate_r12(slit))

    assert [(p.closed, p.points) for p in read_back] == [(False, ((0, 0), (10, 0), (0, 0)))]


def test_select_for_export():
    polylines = classified()
    labels = [TextEntity(1, 1, "M")]

    cut, cut_labels = select_for_export(polylines, labels, ExportMode.CUT)
    boards, board_labels = select_for_export(polylines, labels, "BOARDS")
    everything, all_labels = select_for_export(polylines, labels)

    assert [p.id for p in cut] == [0]
    assert cut_labels == []
    assert [p.id for p in boards] == [1, 2]
    assert board_labels == labels
    assert everything == polylines
    assert all_labels == labels


def test_select_rejects_unknown_mode():
    with pytest.raises(ValueError):
        select_for_export(classified(), [], "EVERYTHING")


@pytest.mark.parametrize("source,mode,expected", [
    ("marker.dxf", ExportMode.ALL, "marker_FULL.dxf"),
    ("marker.DXF", "CUT", "marker_CUT_ONLY.dxf"),
    ("marker", ExportMode.BOARDS, "marker_INTERNAL_ONLY.dxf"),
    ("", ExportMode.CUT, "LASERDXX_CUT_ONLY.dxf"),
])
def test_export_filename(source, mode, expected):
    assert export_filename(source, mode) == expected
