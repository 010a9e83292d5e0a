import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import Delaunay, QhullError
from shapely.geometry import MultiPoint, Polygon
from shapely.ops import unary_union

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]
Vertex = Tuple[float, float, float]


def _largest_polygon(geom) -> Polygon:
    if geom is None or geom.is_empty:
        return Polygon()
    if isinstance(geom, Polygon):
        return geom
    if hasattr(geom, "geoms"):
        polygons = [g for g in geom.geoms if isinstance(g, Polygon) and not g.is_empty]
        if polygons:
            return max(polygons, key=lambda g: g.area)
    return Polygon()


def _crossing(a: Vertex, b: Vertex, threshold: float) -> Coordinate:
    # interpolate from the lower vertex so shared triangle edges yield identical points
    lo, hi = (a, b) if (a[2], a[0], a[1]) <= (b[2], b[0], b[1]) else (b, a)
    ratio = (threshold - lo[2]) / (hi[2] - lo[2])
    return lo[0] + ratio * (hi[0] - lo[0]), lo[1] + ratio * (hi[1] - lo[1])


def clip_triangle(vertices: Sequence[Vertex], threshold: float) -> List[Coordinate]:
    """Part of a triangle where the linearly interpolated z is <= threshold."""
    out: List[Coordinate] = []
    for i in range(3):
        cur = vertices[i]
        nxt = vertices[(i + 1) % 3]
        cur_in = cur[2] <= threshold
        nxt_in = nxt[2] <= threshold
        if cur_in:
            out.append((cur[0], cur[1]))
        if cur_in != nxt_in:
            out.append(_crossing(cur, nxt, threshold))
    return out


class DelaunayIsolineBuilder:
    """
    Turns bucketed reachability points into one closed ring per level.

    All points are triangulated together with their bucket index as height;
    the ring of level k is the outline of the area whose interpolated height
    stays below k + 0.5.
    """

    def __init__(self, fallback_buffer_deg: float = 0.0005):
        self.fallback_buffer_deg = fallback_buffer_deg

    def extract(self, buckets: Sequence[Sequence[Coordinate]], levels: int) -> List[List[Coordinate]]:
        heights: Dict[Coordinate, int] = {}
        for z, bucket in enumerate(buckets):
            for coord in bucket:
                key = (float(coord[0]), float(coord[1]))
                if key not in heights or z < heights[key]:
                    heights[key] = z

        if not heights:
            raise ValueError("no points to build isolines from")

        points = np.array(list(heights.keys()), dtype=float)
        z = np.array(list(heights.values()), dtype=float)
        simplices = self._triangulate(points)

        rings: List[List[Coordinate]] = []
        for level in range(levels):
            polygon = Polygon()
            if simplices is not None:
                polygon = self._level_polygon(points, z, simplices, level + 0.5)
            if polygon.is_empty:
                polygon = self._fallback_polygon(points, z, level)
            rings.append([(float(x), float(y)) for x, y in polygon.exterior.coords])
        return rings

    def _triangulate(self, points: np.ndarray) -> Optional[np.ndarray]:
        if len(points) < 3:
            return None
        try:
            return Delaunay(points).simplices
        except QhullError as exc:
            logger.warning("Delaunay triangulation failed for %d points: %s", len(points), exc)
            return None

    def _level_polygon(self, points: np.ndarray, z: np.ndarray, simplices: np.ndarray, threshold: float) -> Polygon:
        pieces: List[Polygon] = []
        for simplex in simplices:
            heights = z[simplex]
            if heights.min() > threshold:
                continue
            vertices = [(points[i][0], points[i][1], z[i]) for i in simplex]
            if heights.max() <= threshold:
                ring = [(v[0], v[1]) for v in vertices]
            else:
                ring = clip_triangle(vertices, threshold)
            if len(ring) >= 3:
                piece = Polygon(ring)
                if piece.area > 0:
                    pieces.append(piece)
        if not pieces:
            return Polygon()
        return _largest_polygon(unary_union(pieces))

    def _fallback_polygon(self, points: np.ndarray, z: np.ndarray, level: int) -> Polygon:
        selected = points[z <= level]
        if len(selected) == 0:
            selected = points
        hull = MultiPoint([tuple(p) for p in selected]).convex_hull
        logger.warning(
            "Using fallback isoline for level %d: buffered convex hull of %d points",
            level, len(selected),
        )
        return _largest_polygon(hull.buffer(max(self.fallback_buffer_deg, 1e-9)))
