from typing import Mapping

from .graph import RoadEdge
from .profiles import VehicleProfile

DEFAULT_WEIGHTING = "fastest"


class FastestWeighting:
    """Edge weight is the travel time in seconds."""

    name = "fastest"

    def __init__(self, profile: VehicleProfile):
        self.profile = profile

    def calc_millis(self, edge: RoadEdge) -> int:
        speed = self.profile.speed_kmh(edge)
        if speed <= 0:
            raise ValueError(f"edge {edge.id} is not accessible for {self.profile.name}")
        return int(round(edge.distance / (speed / 3.6) * 1000))

    def calc_weight(self, edge: RoadEdge) -> float:
        return self.calc_millis(edge) / 1000.0


class ShortestWeighting(FastestWeighting):
    """Edge weight is the length in meters; travel time is still tracked."""

    name = "shortest"

    def calc_weight(self, edge: RoadEdge) -> float:
        return float(edge.distance)


WEIGHTINGS = {
    FastestWeighting.name: FastestWeighting,
    ShortestWeighting.name: ShortestWeighting,
}


class WeightingFactory:
    """Builds a weighting from routing hints taken verbatim from the query string."""

    def build(self, hints: Mapping[str, str], profile: VehicleProfile) -> FastestWeighting:
        name = (hints.get("weighting") or DEFAULT_WEIGHTING).strip().lower()
        weighting_cls = WEIGHTINGS.get(name)
        if weighting_cls is None:
            raise ValueError(f"weighting not supported: {name}")
        return weighting_cls(profile)
