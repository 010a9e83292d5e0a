from .graph import RoadEdge, RoadGraph, RoadNode, haversine_m, load_graph
from .location_index import EdgeLocationIndex
from .profiles import DEFAULT_PROFILES, ProfileRegistry, VehicleProfile
from .search import ReachabilityHandle, ReachabilitySearch
from .weighting import FastestWeighting, ShortestWeighting, WeightingFactory

__all__ = [
    "DEFAULT_PROFILES",
    "EdgeLocationIndex",
    "FastestWeighting",
    "ProfileRegistry",
    "ReachabilityHandle",
    "ReachabilitySearch",
    "RoadEdge",
    "RoadGraph",
    "RoadNode",
    "ShortestWeighting",
    "VehicleProfile",
    "WeightingFactory",
    "haversine_m",
    "load_graph",
]
