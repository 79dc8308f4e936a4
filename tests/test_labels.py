from conftest import chain, rectangle, ring, square
from laserdxx.core.models import Layer, TextEntity
from laserdxx.operations.labels import find_dividers, is_labelable_source, place_size_labels


def size_sheet():
    """Three size zones split by vertical marks at x=100 and x=200"""
    return [
        ring(0, square(40, (10, 10)), Layer.CUT),
        chain(1, [(100, 0), (100, 100)], Layer.CUT),
        ring(2, rectangle(80, 40, (100, 0)), Layer.CUT),
        ring(3, square(20, (160, 50)), Layer.CUT),
        ring(4, square(10, (120, 10)), Layer.BOARDS),
        chain(5, [(200, 0), (200, 100)], Layer.CUT),
    ]


def test_labelable_source():
    assert is_labelable_source("999\nOptitex export\n0\nSECTION", "OPTITEX")
    assert not is_labelable_source("0\nSECTION\n2\nENTITIES", "OPTITEX")
    assert not is_labelable_source("OPTITEX", "")


def test_dividers_found():
    """Tall zero-width marks are dividers, pieces are not"""
    assert find_dividers(size_sheet()) == [100.0, 200.0]


def test_short_marks_are_not_dividers():
    polylines = [ring(0, square(100)), chain(1, [(50, 0), (50, 30)])]

    assert find_dividers(polylines) == []


def test_one_label_per_zone_on_largest_piece():
    """Each zone's most frequent code lands above its biggest CUT piece"""
    texts = [
        TextEntity(20, 5, "S"),
        TextEntity(150, 5, "M"),
        TextEntity(155, 5, "M"),
        TextEntity(170, 55, "L"),
        TextEntity(250, 5, "XL"),
    ]

    labels = place_size_labels(size_sheet(), texts)

    assert labels == [
        TextEntity(30.0, 51.0, "S", "BOARDS", 1.0),
        TextEntity(140.0, 41.0, "M", "BOARDS", 1.0),
    ]


def test_tie_goes_to_first_code_seen():
    texts = [TextEntity(20, 5, "L"), TextEntity(30, 5, "S")]

    labels = place_size_labels(size_sheet(), texts)

    assert [label.text for label in labels] == ["L"]


def test_no_dividers_single_zone():
    """Without dividers the whole drawing is one size zone"""
    pieces = [ring(0, square(10), Layer.CUT), ring(1, square(30, (50, 0)), Layer.CUT)]
    texts = [TextEntity(5, 5, "XL"), TextEntity(60, 5, "XL")]

    labels = place_size_labels(pieces, texts)

    assert len(labels) == 1
    assert (labels[0].x, labels[0].y, labels[0].text) == (65.0, 31.0, "XL")


def test_no_texts_no_labels():
    assert place_size_labels(size_sheet(), []) == []


def test_frame_ignored():
    """The frame does not count toward the drawing height"""
    frame = ring(9, rectangle(60, 400, (-10, -10)), Layer.BOARDS)
    pieces = [ring(0, square(40, (10, 10)), Layer.CUT), chain(1, [(55, 0), (55, 60)], Layer.CUT)]

    assert find_dividers(pieces + [frame], frame_id=9) == [55.0]
