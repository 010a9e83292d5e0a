import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple

from .contracts import Bucket, Coordinate, IsolineExtractor, ReachabilityLabel
from .schemas import PointListColumn

logger = logging.getLogger(__name__)


def _ensure_closed_ring(coords: List[Coordinate]) -> List[Coordinate]:
    if not coords:
        return []
    if coords[0] == coords[-1]:
        return coords
    return coords + [coords[0]]


def shape_polygons(buckets: Sequence[Bucket], extractor: IsolineExtractor) -> List[Dict[str, Any]]:
    """
    Build one GeoJSON Polygon feature per isoline ring.

    The outermost bucket is the frontier past the limit and only serves as the
    outside of the last level, so `len(buckets) - 1` rings are requested. The
    `bucket` property is the emission index of the ring.
    """
    rings = extractor.extract(buckets, len(buckets) - 1)
    features: List[Dict[str, Any]] = []
    for ring in rings:
        shell = _ensure_closed_ring([(float(x), float(y)) for x, y in ring])
        features.append(
            {
                "type": "Feature",
                "properties": {"bucket": len(features)},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[list(pt) for pt in shell]],
                },
            }
        )
    return features


def _prev_longitude(label: ReachabilityLabel):
    return None if label.prev_coordinate is None else label.prev_coordinate[0]


def _prev_latitude(label: ReachabilityLabel):
    return None if label.prev_coordinate is None else label.prev_coordinate[1]


PROJECTIONS: Dict[PointListColumn, Callable[[ReachabilityLabel], Any]] = {
    PointListColumn.LONGITUDE: lambda label: label.coordinate[0],
    PointListColumn.LATITUDE: lambda label: label.coordinate[1],
    PointListColumn.TIME: lambda label: label.time_ms,
    PointListColumn.DISTANCE: lambda label: label.distance_m,
    PointListColumn.NODE_ID: lambda label: label.node_id,
    PointListColumn.EDGE_ID: lambda label: label.edge_id,
    PointListColumn.PREV_LONGITUDE: _prev_longitude,
    PointListColumn.PREV_LATITUDE: _prev_latitude,
    PointListColumn.PREV_NODE_ID: lambda label: label.prev_node_id,
}


def shape_point_list(
    labels: Sequence[ReachabilityLabel],
    columns: Sequence[PointListColumn],
) -> Tuple[List[str], List[List[Any]]]:
    """Project labels onto the requested columns, keeping the search order."""
    projections = [PROJECTIONS[column] for column in columns]
    header = [column.value for column in columns]
    items = [[project(label) for project in projections] for label in labels]
    return header, items
