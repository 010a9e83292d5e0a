from typing import List, Optional

from modules.isoline import DelaunayIsolineBuilder
from modules.road_graph import (
    EdgeLocationIndex,
    ProfileRegistry,
    ReachabilitySearch,
    RoadGraph,
    WeightingFactory,
)

from .contracts import IsochroneServices


def build_services(
    graph: RoadGraph,
    max_visited_nodes: int,
    copyrights: List[str],
    profiles: Optional[ProfileRegistry] = None,
    fallback_buffer_deg: float = 0.0005,
    max_snap_distance_m: Optional[float] = 1000.0,
) -> IsochroneServices:
    """
    Wire the in-memory road graph collaborators once at startup.
    """
    profiles = profiles or ProfileRegistry()
    return IsochroneServices(
        profiles=profiles,
        location_index=EdgeLocationIndex(graph, profiles, max_snap_distance_m=max_snap_distance_m),
        weighting_factory=WeightingFactory(),
        search=ReachabilitySearch(graph),
        isoline_extractor=DelaunayIsolineBuilder(fallback_buffer_deg=fallback_buffer_deg),
        network=graph,
        max_visited_nodes=max_visited_nodes,
        copyrights=list(copyrights),
    )
