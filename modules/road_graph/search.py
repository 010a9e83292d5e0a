import heapq
import itertools
import logging
from typing import Dict, List, NamedTuple, Optional

from modules.isochrone.contracts import Bucket, ReachabilityLabel, ResolvedLocation, SearchLimit

from .graph import RoadGraph
from .weighting import FastestWeighting

logger = logging.getLogger(__name__)

NO_EDGE = -1


class _Entry(NamedTuple):
    node: int
    edge: int
    weight: float
    time_ms: int
    distance: float
    parent: Optional[int]


class ReachabilityHandle:
    """
    Result handle of one request's search.

    The Dijkstra runs lazily from the node passed to `labeled_reachability` or
    `bucketed_gps` and is cached per start node. The handle belongs to a single
    request, the graph it reads is shared and read-only.
    """

    def __init__(
        self,
        graph: RoadGraph,
        weighting: FastestWeighting,
        reverse_flow: bool,
        limit: SearchLimit,
    ):
        self.graph = graph
        self.weighting = weighting
        self.reverse_flow = reverse_flow
        self.limit = limit
        self._explored: Dict[int, Dict[int, _Entry]] = {}
        self._visited_nodes = 0

    def visited_node_count(self) -> int:
        return self._visited_nodes

    def _explore(self, start: int) -> Dict[int, _Entry]:
        cached = self._explored.get(start)
        if cached is not None:
            return cached

        profile = self.weighting.profile
        # insertion order of `entries` is the labeling order
        entries: Dict[int, _Entry] = {start: _Entry(start, NO_EDGE, 0.0, 0, 0.0, None)}
        settled = set()
        counter = itertools.count()
        heap = [(0.0, next(counter), start)]
        visited = 0

        while heap:
            weight, _, node = heapq.heappop(heap)
            if node in settled:
                continue
            current = entries[node]
            if weight > current.weight:
                continue
            settled.add(node)
            visited += 1
            # entries past the limit stay as frontier labels
            if not self.limit.is_within(current.time_ms, current.distance):
                break

            for edge, other, along_edge in self.graph.adjacent(node):
                if other in settled:
                    continue
                travels_along = along_edge if not self.reverse_flow else not along_edge
                if not profile.can_traverse(edge, travels_along):
                    continue
                new_weight = current.weight + self.weighting.calc_weight(edge)
                existing = entries.get(other)
                if existing is not None and existing.weight <= new_weight:
                    continue
                entries[other] = _Entry(
                    node=other,
                    edge=edge.id,
                    weight=new_weight,
                    time_ms=current.time_ms + self.weighting.calc_millis(edge),
                    distance=current.distance + edge.distance,
                    parent=node,
                )
                heapq.heappush(heap, (new_weight, next(counter), other))

        self._visited_nodes = visited
        self._explored[start] = entries
        logger.debug(
            "Explored from node %s: %d labels, %d visited nodes (%s limit %s)",
            start, len(entries), visited, self.limit.kind, self.limit.value,
        )
        return entries

    def labeled_reachability(self, node_id: int) -> List[ReachabilityLabel]:
        labels: List[ReachabilityLabel] = []
        for entry in self._explore(node_id).values():
            if not self.limit.is_within(entry.time_ms, entry.distance):
                continue
            prev_coordinate = None
            if entry.parent is not None:
                prev_coordinate = self.graph.coordinate(entry.parent)
            labels.append(
                ReachabilityLabel(
                    node_id=entry.node,
                    edge_id=entry.edge,
                    time_ms=entry.time_ms,
                    distance_m=entry.distance,
                    coordinate=self.graph.coordinate(entry.node),
                    prev_node_id=entry.parent,
                    prev_coordinate=prev_coordinate,
                )
            )
        return labels

    def bucketed_gps(self, node_id: int, bucket_count: int) -> List[Bucket]:
        """
        Split explored nodes into `bucket_count + 1` coordinate lists by explore
        value. The last list collects the frontier just past the limit.
        """
        if bucket_count < 1:
            raise ValueError("bucket_count must be positive")

        entries = self._explore(node_id)
        bucket_size = self.limit.value / bucket_count
        buckets: List[Bucket] = [[] for _ in range(bucket_count + 1)]

        for entry in entries.values():
            value = self.limit.explore_value(entry.time_ms, entry.distance)
            if bucket_size > 0:
                index = int(value / bucket_size)
            else:
                index = 0 if value <= 0 else bucket_count
            if index > bucket_count:
                continue

            lon, lat = self.graph.coordinate(entry.node)
            buckets[index].append((lon, lat))
            # middle of the road towards the parent improves the outline of long edges
            if entry.parent is not None:
                prev_lon, prev_lat = self.graph.coordinate(entry.parent)
                buckets[index].append(((prev_lon + lon) / 2.0, (prev_lat + lat) / 2.0))

        return buckets


class ReachabilitySearch:
    def __init__(self, graph: RoadGraph):
        self.graph = graph

    def run(
        self,
        location: ResolvedLocation,
        weighting: FastestWeighting,
        reverse_flow: bool,
        limit: SearchLimit,
    ) -> ReachabilityHandle:
        return ReachabilityHandle(self.graph, weighting, reverse_flow, limit)
