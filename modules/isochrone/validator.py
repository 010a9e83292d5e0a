import logging
import math
from typing import List, Optional, Tuple

from core.exceptions import InvalidParameter, UnknownColumn

from .contracts import ProfileRegistry
from .schemas import DEFAULT_COLUMNS, IsochroneQuery, PointListColumn, ResultMode

logger = logging.getLogger(__name__)

MIN_BUCKETS = 1
MAX_BUCKETS = 20


def parse_point(raw: Optional[str]) -> Tuple[float, float]:
    """
    Parse "lat,lon" into a (lat, lon) tuple.
    """
    if raw is None or not raw.strip():
        raise InvalidParameter("missing point")
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 2:
        raise InvalidParameter("invalid point, expected 'lat,lon'", point=raw)
    try:
        lat = float(parts[0])
        lon = float(parts[1])
    except ValueError:
        raise InvalidParameter("invalid point, expected 'lat,lon'", point=raw) from None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise InvalidParameter("invalid point, coordinates out of range", point=raw)
    return lat, lon


def parse_result_mode(raw: Optional[str]) -> ResultMode:
    normalized = (raw or "").strip().lower()
    try:
        return ResultMode(normalized)
    except ValueError:
        raise InvalidParameter("unsupported result type", result=raw) from None


def parse_columns(extended_header: Optional[str]) -> Tuple[PointListColumn, ...]:
    """
    Default columns followed by the comma separated extension.
    Duplicates are dropped, unknown names fail before any search runs.
    """
    columns: List[PointListColumn] = list(DEFAULT_COLUMNS)
    if not extended_header:
        return tuple(columns)
    for name in extended_header.split(","):
        name = name.strip()
        if not name:
            continue
        try:
            column = PointListColumn(name)
        except ValueError:
            raise UnknownColumn(name) from None
        if column not in columns:
            columns.append(column)
    return tuple(columns)


def validate_query(
    *,
    vehicle: str,
    buckets: int,
    reverse_flow: bool,
    point: Optional[str],
    result: str,
    pointlist_ext_header: Optional[str],
    time_limit: int,
    distance_limit: float,
    profiles: ProfileRegistry,
) -> IsochroneQuery:
    if buckets > MAX_BUCKETS or buckets < MIN_BUCKETS:
        raise InvalidParameter(
            "bucket count out of range, has to be in [1, 20]",
            buckets=buckets,
        )

    lat, lon = parse_point(point)

    vehicle = (vehicle or "").strip()
    if not profiles.has_profile(vehicle):
        raise InvalidParameter(f"unsupported vehicle: {vehicle}", vehicle=vehicle)

    result_mode = parse_result_mode(result)

    columns = DEFAULT_COLUMNS
    if result_mode is ResultMode.POINTLIST:
        columns = parse_columns(pointlist_ext_header)

    if not math.isfinite(time_limit):
        raise InvalidParameter("time limit must be finite", time_limit=str(time_limit))
    if not math.isfinite(distance_limit):
        raise InvalidParameter("distance limit must be finite", distance_limit=str(distance_limit))
    if distance_limit <= 0 and time_limit < 0:
        raise InvalidParameter("time limit must not be negative", time_limit=time_limit)

    query = IsochroneQuery(
        vehicle=vehicle,
        buckets=buckets,
        reverse_flow=reverse_flow,
        point=(lat, lon),
        result_mode=result_mode,
        columns=columns,
        time_limit_s=time_limit,
        distance_limit_m=distance_limit,
    )
    logger.debug("Validated isochrone query: %s", query)
    return query
