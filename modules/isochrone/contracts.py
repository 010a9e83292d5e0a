"""
Data types and collaborator interfaces used by the isochrone pipeline.

The pipeline only talks to these narrow protocols, so it can run against the
in-memory road graph in `modules.road_graph` or against test fakes.
"""

from typing import Any, List, Literal, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

Coordinate = Tuple[float, float]  # (lon, lat)
Bucket = List[Coordinate]


class ResolvedLocation(BaseModel):
    """Query point snapped onto the nearest edge the profile may use."""

    model_config = ConfigDict(frozen=True)

    query_point: Tuple[float, float]  # (lat, lon)
    closest_node: Optional[int] = None
    closest_edge: Optional[int] = None
    snapped_point: Optional[Coordinate] = None
    query_distance_m: Optional[float] = None

    @property
    def is_valid(self) -> bool:
        return self.closest_node is not None


class ReachabilityLabel(BaseModel):
    """One node reached by the search, with the edge and predecessor that reached it."""

    model_config = ConfigDict(frozen=True)

    node_id: int
    edge_id: int
    time_ms: int
    distance_m: float
    coordinate: Coordinate
    prev_node_id: Optional[int] = None
    prev_coordinate: Optional[Coordinate] = None


class SearchLimit(BaseModel):
    """
    Budget of a reachability search.
    `value` is seconds for kind="time" and meters for kind="distance".
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["time", "distance"]
    value: float = Field(..., ge=0)

    def explore_value(self, time_ms: float, distance_m: float) -> float:
        if self.kind == "time":
            return time_ms / 1000.0
        return distance_m

    def is_within(self, time_ms: float, distance_m: float) -> bool:
        return self.explore_value(time_ms, distance_m) <= self.value


@runtime_checkable
class ProfileRegistry(Protocol):
    def has_profile(self, name: str) -> bool: ...

    def resolve_profile(self, name: str) -> Any: ...

    def names(self) -> List[str]: ...


@runtime_checkable
class LocationIndex(Protocol):
    def find_closest(self, lat: float, lon: float, edge_filter: Any) -> ResolvedLocation: ...


class Weighting(Protocol):
    name: str


@runtime_checkable
class WeightingFactory(Protocol):
    def build(self, hints: Mapping[str, str], profile: Any) -> Weighting: ...


class SearchHandle(Protocol):
    def labeled_reachability(self, node_id: int) -> Sequence[ReachabilityLabel]: ...

    def bucketed_gps(self, node_id: int, bucket_count: int) -> List[Bucket]: ...

    def visited_node_count(self) -> int: ...


@runtime_checkable
class ReachabilitySearch(Protocol):
    def run(
        self,
        location: ResolvedLocation,
        weighting: Weighting,
        reverse_flow: bool,
        limit: SearchLimit,
    ) -> SearchHandle: ...


@runtime_checkable
class IsolineExtractor(Protocol):
    def extract(self, buckets: Sequence[Bucket], levels: int) -> List[List[Coordinate]]: ...


@runtime_checkable
class RoadNetwork(Protocol):
    """Size of the loaded road network, reported by the health check."""

    @property
    def node_count(self) -> int: ...

    @property
    def edge_count(self) -> int: ...


class IsochroneServices(BaseModel):
    """Process-wide, read-only collaborators shared by all requests."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    profiles: ProfileRegistry
    location_index: LocationIndex
    weighting_factory: WeightingFactory
    search: ReachabilitySearch
    isoline_extractor: IsolineExtractor
    network: Optional[RoadNetwork] = None
    max_visited_nodes: int = Field(1_000_000, gt=0)
    copyrights: List[str] = Field(default_factory=list)
