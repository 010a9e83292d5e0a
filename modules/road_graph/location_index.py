import logging
from typing import Dict, List, Optional

from shapely import STRtree
from shapely.geometry import LineString, Point

from modules.isochrone.contracts import ResolvedLocation

from .graph import RoadEdge, RoadGraph, haversine_m
from .profiles import ProfileRegistry, VehicleProfile

logger = logging.getLogger(__name__)


class _ProfileEdgeTree:
    def __init__(self, edges: List[RoadEdge], lines: List[LineString]):
        self.edges = edges
        self.lines = lines
        self.tree = STRtree(lines) if lines else None


class EdgeLocationIndex:
    """
    Nearest-edge lookup over the road graph.

    One STRtree per vehicle profile holds only the edges that profile may use,
    so the traversal filter is applied by picking the tree. Trees are built in
    the constructor and only queried afterwards. Points farther than
    `max_snap_distance_m` from every accessible edge resolve to an invalid
    location.
    """

    def __init__(self, graph: RoadGraph, profiles: ProfileRegistry, max_snap_distance_m: Optional[float] = None):
        self.graph = graph
        self.max_snap_distance_m = max_snap_distance_m
        self._trees: Dict[str, _ProfileEdgeTree] = {}
        for profile in profiles:
            edges: List[RoadEdge] = []
            lines: List[LineString] = []
            for edge in graph.edges():
                if not profile.accepts(edge) or edge.base == edge.adj:
                    continue
                edges.append(edge)
                lines.append(LineString([graph.coordinate(edge.base), graph.coordinate(edge.adj)]))
            self._trees[profile.name] = _ProfileEdgeTree(edges, lines)
            logger.debug("Location index for %s: %d edges", profile.name, len(edges))

    def find_closest(self, lat: float, lon: float, edge_filter: VehicleProfile) -> ResolvedLocation:
        invalid = ResolvedLocation(query_point=(lat, lon))
        entry = self._trees.get(edge_filter.name)
        if entry is None or entry.tree is None:
            return invalid

        query = Point(lon, lat)
        idx = entry.tree.nearest(query)
        if idx is None:
            return invalid

        edge = entry.edges[int(idx)]
        line = entry.lines[int(idx)]
        along = line.project(query)
        snapped = line.interpolate(along)
        query_distance_m = haversine_m(lon, lat, snapped.x, snapped.y)
        if self.max_snap_distance_m is not None and query_distance_m > self.max_snap_distance_m:
            logger.debug(
                "Nearest %s edge %s is %.0fm from %s,%s, beyond %.0fm",
                edge_filter.name, edge.id, query_distance_m, lat, lon, self.max_snap_distance_m,
            )
            return invalid

        closest_node = edge.base if along <= line.length / 2.0 else edge.adj
        return ResolvedLocation(
            query_point=(lat, lon),
            closest_node=closest_node,
            closest_edge=edge.id,
            snapped_point=(snapped.x, snapped.y),
            query_distance_m=query_distance_m,
        )
