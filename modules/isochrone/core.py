import logging
import time
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

from .adapter import run_reachability
from .buckets import partition_buckets
from .contracts import IsochroneServices
from .envelope import build_envelope
from .schemas import IsochroneQuery, ResultMode
from .shaper import shape_point_list, shape_polygons

logger = logging.getLogger(__name__)


class IsochroneResult(BaseModel):
    body: Dict[str, Any]
    took_ms: int
    visited_nodes: int


def compute_isochrone(
    query: IsochroneQuery,
    services: IsochroneServices,
    hints: Optional[Mapping[str, str]] = None,
    started_at: Optional[float] = None,
) -> IsochroneResult:
    """
    Run one isochrone request end to end.

    Args:
        query: Validated query.
        services: Shared read-only collaborators.
        hints: Raw query-string parameters for the weighting factory.
        started_at: `time.perf_counter()` value of the request start, defaults to now.

    Returns:
        The response body (polygons or point list, plus `info`) and timing.
    """
    start = time.perf_counter() if started_at is None else started_at

    location, handle = run_reachability(query, services, hints)
    node_id = location.closest_node

    if query.result_mode is ResultMode.POLYGON:
        buckets = partition_buckets(handle, node_id, query.buckets, services.max_visited_nodes)
        payload: Dict[str, Any] = {"polygons": shape_polygons(buckets, services.isoline_extractor)}
    else:
        # no visited node guard for point lists
        labels = handle.labeled_reachability(node_id)
        header, items = shape_point_list(labels, query.columns)
        payload = {"header": header, "items": items}

    took_s = time.perf_counter() - start
    visited = handle.visited_node_count()
    logger.info(
        "took: %.3fs, visited nodes: %d, vehicle: %s, point: %s, buckets: %d, result: %s",
        took_s, visited, query.vehicle, query.point, query.buckets, query.result_mode.value,
    )

    return IsochroneResult(
        body=build_envelope(payload, took_s, services.copyrights),
        took_ms=int(round(took_s * 1000)),
        visited_nodes=visited,
    )
