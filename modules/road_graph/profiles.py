from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .graph import RoadEdge


class VehicleProfile(BaseModel):
    """
    Traversal rules for one vehicle.
    Road classes missing from `speeds_kmh` are not accessible.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    speeds_kmh: Dict[str, float] = Field(default_factory=dict)
    honors_oneway: bool = True

    def accepts(self, edge: RoadEdge) -> bool:
        return self.speeds_kmh.get(edge.road_class, 0.0) > 0

    def can_traverse(self, edge: RoadEdge, along_edge: bool) -> bool:
        if not self.accepts(edge):
            return False
        if along_edge or not self.honors_oneway:
            return True
        return not edge.oneway

    def speed_kmh(self, edge: RoadEdge) -> float:
        return self.speeds_kmh.get(edge.road_class, 0.0)


DEFAULT_PROFILES: List[VehicleProfile] = [
    VehicleProfile(
        name="car",
        speeds_kmh={
            "motorway": 100.0,
            "trunk": 80.0,
            "primary": 65.0,
            "secondary": 60.0,
            "tertiary": 50.0,
            "unclassified": 30.0,
            "residential": 30.0,
            "living_street": 6.0,
            "service": 20.0,
        },
    ),
    VehicleProfile(
        name="bike",
        speeds_kmh={
            "primary": 18.0,
            "secondary": 18.0,
            "tertiary": 18.0,
            "unclassified": 16.0,
            "residential": 16.0,
            "living_street": 12.0,
            "service": 14.0,
            "track": 12.0,
            "cycleway": 18.0,
            "path": 12.0,
        },
    ),
    VehicleProfile(
        name="foot",
        speeds_kmh={
            "primary": 5.0,
            "secondary": 5.0,
            "tertiary": 5.0,
            "unclassified": 5.0,
            "residential": 5.0,
            "living_street": 5.0,
            "service": 5.0,
            "track": 5.0,
            "cycleway": 5.0,
            "path": 5.0,
            "footway": 5.0,
            "pedestrian": 5.0,
            "steps": 2.0,
        },
        honors_oneway=False,
    ),
]


class ProfileRegistry:
    """Vehicle profiles known to the service, fixed at startup."""

    def __init__(self, profiles: Optional[List[VehicleProfile]] = None):
        self._profiles: Dict[str, VehicleProfile] = {
            p.name: p for p in (profiles if profiles is not None else DEFAULT_PROFILES)
        }

    def has_profile(self, name: str) -> bool:
        return name in self._profiles

    def resolve_profile(self, name: str) -> VehicleProfile:
        try:
            return self._profiles[name]
        except KeyError:
            raise KeyError(f"unknown vehicle profile: {name}") from None

    def names(self) -> List[str]:
        return list(self._profiles)

    def __iter__(self) -> Iterator[VehicleProfile]:
        return iter(self._profiles.values())
