import asyncio
import logging
import time
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request, Response

from modules.isochrone import IsochroneServices, compute_isochrone, validate_query
from modules.isochrone.schemas import PointListResponse, PolygonResponse
from router.utils.deps import get_isochrone_services

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Isochrone"])

TOOK_HEADER = "X-Took"


@router.get(
    "/isochrone",
    response_model=Union[PolygonResponse, PointListResponse],
    summary="Calculate Isochrones",
    description=(
        "Reachable areas from a point within a time or distance budget, "
        "as polygons per bucket or as a list of visited points."
    ),
)
async def isochrone_endpoint(
    request: Request,
    response: Response,
    vehicle: str = Query("car", description="Vehicle profile"),
    buckets: int = Query(1, description="Number of isochrone levels, 1-20"),
    reverse_flow: bool = Query(False, description="Who can reach the point instead of where the point can reach"),
    point: Optional[str] = Query(None, description="lat,lon"),
    result: str = Query("polygon", description="polygon or pointlist"),
    pointlist_ext_header: Optional[str] = Query(None, description="Extra point list columns, comma separated"),
    time_limit: int = Query(600, description="Time budget in seconds"),
    distance_limit: float = Query(-1, description="Distance budget in meters, overrides time_limit when positive"),
    services: IsochroneServices = Depends(get_isochrone_services),
):
    start = time.perf_counter()
    query = validate_query(
        vehicle=vehicle,
        buckets=buckets,
        reverse_flow=reverse_flow,
        point=point,
        result=result,
        pointlist_ext_header=pointlist_ext_header,
        time_limit=time_limit,
        distance_limit=distance_limit,
        profiles=services.profiles,
    )

    # the search is CPU bound, keep it off the event loop
    outcome = await asyncio.to_thread(
        compute_isochrone,
        query,
        services,
        dict(request.query_params),
        start,
    )

    response.headers[TOOK_HEADER] = str(outcome.took_ms)
    return outcome.body
