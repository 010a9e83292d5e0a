import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371008.8


def haversine_m(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(max(1e-12, 1.0 - a)))
    return EARTH_RADIUS_M * c


class RoadNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class RoadEdge(BaseModel):
    """
    A road segment between two tower nodes.
    `oneway` edges may only be travelled from `base` to `adj`.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    base: int
    adj: int
    distance: Optional[float] = Field(None, ge=0, description="Length in meters, haversine when omitted")
    road_class: str = "residential"
    oneway: bool = False


class RoadGraph:
    """
    Read-only in-memory road network.

    Built once at startup and shared between requests; nothing mutates it
    after construction.
    """

    def __init__(self, nodes: Iterable[RoadNode], edges: Iterable[RoadEdge]):
        self._nodes: Dict[int, RoadNode] = {}
        for node in nodes:
            if node.id in self._nodes:
                raise ValueError(f"duplicate node id {node.id}")
            self._nodes[node.id] = node

        self._edges: Dict[int, RoadEdge] = {}
        self._adjacency: Dict[int, List[Tuple[RoadEdge, int, bool]]] = {nid: [] for nid in self._nodes}
        for edge in edges:
            if edge.id in self._edges:
                raise ValueError(f"duplicate edge id {edge.id}")
            if edge.base not in self._nodes or edge.adj not in self._nodes:
                raise ValueError(f"edge {edge.id} references an unknown node")
            if edge.distance is None:
                a = self._nodes[edge.base]
                b = self._nodes[edge.adj]
                edge = edge.model_copy(update={"distance": haversine_m(a.lon, a.lat, b.lon, b.lat)})
            self._edges[edge.id] = edge
            # (edge, other node, travelling along the edge direction)
            self._adjacency[edge.base].append((edge, edge.adj, True))
            if edge.adj != edge.base:
                self._adjacency[edge.adj].append((edge, edge.base, False))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoadGraph":
        nodes = [RoadNode.model_validate(item) for item in data.get("nodes") or []]
        edges = [RoadEdge.model_validate(item) for item in data.get("edges") or []]
        return cls(nodes, edges)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def node(self, node_id: int) -> RoadNode:
        return self._nodes[node_id]

    def edge(self, edge_id: int) -> RoadEdge:
        return self._edges[edge_id]

    def edges(self) -> Iterator[RoadEdge]:
        return iter(self._edges.values())

    def coordinate(self, node_id: int) -> Tuple[float, float]:
        """(lon, lat) of a node."""
        node = self._nodes[node_id]
        return node.lon, node.lat

    def adjacent(self, node_id: int) -> List[Tuple[RoadEdge, int, bool]]:
        return self._adjacency.get(node_id, [])


def load_graph(path: Union[str, Path, None]) -> RoadGraph:
    """
    Load a graph from a JSON file shaped like {"nodes": [...], "edges": [...]}.
    A missing file yields an empty graph so the service can still start.
    """
    if not path:
        logger.warning("No graph file configured, starting with an empty road graph")
        return RoadGraph([], [])

    graph_path = Path(path)
    if not graph_path.exists():
        logger.warning("Graph file %s not found, starting with an empty road graph", graph_path)
        return RoadGraph([], [])

    with graph_path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    graph = RoadGraph.from_dict(data)
    logger.info("Loaded road graph %s: %d nodes, %d edges", graph_path, graph.node_count, graph.edge_count)
    return graph
