import logging
from typing import Mapping, Optional, Tuple

from core.exceptions import InvalidParameter, PointNotFound

from .contracts import IsochroneServices, ResolvedLocation, SearchHandle, SearchLimit
from .schemas import IsochroneQuery

logger = logging.getLogger(__name__)


def search_limit_for(query: IsochroneQuery) -> SearchLimit:
    """Distance wins over time when it is positive."""
    if query.uses_distance_limit:
        return SearchLimit(kind="distance", value=query.distance_limit_m)
    return SearchLimit(kind="time", value=query.time_limit_s)


def run_reachability(
    query: IsochroneQuery,
    services: IsochroneServices,
    hints: Optional[Mapping[str, str]] = None,
) -> Tuple[ResolvedLocation, SearchHandle]:
    """
    Snap the query point onto the graph and start the reachability search.

    Args:
        query: Validated query.
        services: Collaborators (profiles, location index, weighting, search).
        hints: Raw query-string parameters, handed to the weighting factory as is.

    Returns:
        The resolved location and the search handle.
    """
    profile = services.profiles.resolve_profile(query.vehicle)
    lat, lon = query.point

    location = services.location_index.find_closest(lat, lon, profile)
    if not location.is_valid:
        raise PointNotFound(lat, lon, query.vehicle)
    logger.debug(
        "Snapped %s,%s to node %s (edge %s, %.1fm away)",
        lat, lon, location.closest_node, location.closest_edge, location.query_distance_m or 0.0,
    )

    try:
        weighting = services.weighting_factory.build(hints or {}, profile)
    except ValueError as exc:
        raise InvalidParameter(str(exc)) from exc

    limit = search_limit_for(query)
    handle = services.search.run(location, weighting, query.reverse_flow, limit)
    return location, handle
