import pytest
from shapely.geometry import Point, Polygon

from modules.isoline import DelaunayIsolineBuilder, clip_triangle

RINGS = [
    [(0.0, 0.0)],
    [(1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0)],
    [(2.0, 0.0), (0.0, 2.0), (-2.0, 0.0), (0.0, -2.0)],
]


def test_clip_triangle_partial():
    clipped = clip_triangle([(0, 0, 0), (2, 0, 2), (0, 2, 2)], 1)
    assert clipped == [(0, 0), (1.0, 0.0), (0.0, 1.0)]


def test_clip_triangle_inside_and_outside():
    triangle = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
    assert clip_triangle(triangle, 0.5) == [(0, 0), (1, 0), (0, 1)]
    assert clip_triangle(triangle, -0.5) == []


def test_extract_one_closed_ring_per_level():
    rings = DelaunayIsolineBuilder().extract(RINGS, 2)
    assert len(rings) == 2
    for ring in rings:
        assert len(ring) >= 4
        assert ring[0] == ring[-1]

    inner, outer = (Polygon(ring) for ring in rings)
    # each of the four triangles around the centre is cut halfway
    assert inner.area == pytest.approx(0.5)
    assert outer.area > inner.area
    assert outer.contains(Point(0, 0))


def test_extract_no_levels():
    assert DelaunayIsolineBuilder().extract(RINGS, 0) == []


def test_extract_without_points():
    with pytest.raises(ValueError):
        DelaunayIsolineBuilder().extract([[], []], 1)


def test_collinear_points_use_buffered_hull():
    builder = DelaunayIsolineBuilder(fallback_buffer_deg=0.1)
    buckets = [[(0.0, 0.0), (1.0, 0.0)], [(1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]]
    rings = builder.extract(buckets, 1)
    assert len(rings) == 1
    polygon = Polygon(rings[0])
    assert rings[0][0] == rings[0][-1]
    # (1, 0) keeps the lowest bucket it appears in
    assert polygon.contains(Point(1.0, 0.0))
    assert polygon.contains(Point(0.5, 0.05))
    assert not polygon.contains(Point(2.0, 0.0))


def test_two_points_use_buffered_hull():
    rings = DelaunayIsolineBuilder().extract([[(11.5, 48.1)], [(11.51, 48.1)]], 1)
    polygon = Polygon(rings[0])
    assert polygon.contains(Point(11.5, 48.1))
    assert not polygon.contains(Point(11.51, 48.1))
