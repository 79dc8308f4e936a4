import io
import os
import sys

import ezdxf
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from laserdxx.core.models import Point, Polyline


def square(size, origin=(0.0, 0.0)):
    """Corner list of an axis-aligned square, counter-clockwise"""
    x, y = origin
    return [(x, y), (x + size, y), (x + size, y + size), (x, y + size)]


def rectangle(width, height, origin=(0.0, 0.0)):
    x, y = origin
    return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]


def ring(pid, corners, layer=None):
    """Closed polyline from a corner list (closing vertex added)"""
    points = tuple(Point(*c) for c in corners) + (Point(*corners[0]),)
    return Polyline(id=pid, points=points, closed=True, layer=layer)


def chain(pid, points, layer=None):
    return Polyline(id=pid, points=tuple(Point(*p) for p in points), closed=False, layer=layer)


def dxf_to_text(doc):
    stream = io.StringIO()
    doc.write(stream)
    return stream.getvalue()


@pytest.fixture
def new_doc():
    """Fresh DXF document and its modelspace"""
    doc = ezdxf.new("R2010")
    return doc, doc.modelspace()


@pytest.fixture
def concentric_squares_dxf(new_doc):
    """Outer 100x100 square with a centred 50x50 square inside"""
    doc, msp = new_doc
    msp.add_lwpolyline(square(100), close=True)
    msp.add_lwpolyline(square(50, (25, 25)), close=True)
    return dxf_to_text(doc)
