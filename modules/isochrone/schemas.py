from enum import Enum
from typing import Any, Dict, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ResultMode(str, Enum):
    POLYGON = "polygon"
    POINTLIST = "pointlist"


class PointListColumn(str, Enum):
    LONGITUDE = "longitude"
    LATITUDE = "latitude"
    TIME = "time"
    DISTANCE = "distance"
    NODE_ID = "node_id"
    EDGE_ID = "edge_id"
    PREV_LONGITUDE = "prev_longitude"
    PREV_LATITUDE = "prev_latitude"
    PREV_NODE_ID = "prev_node_id"


DEFAULT_COLUMNS: Tuple[PointListColumn, ...] = (
    PointListColumn.LONGITUDE,
    PointListColumn.LATITUDE,
    PointListColumn.TIME,
    PointListColumn.DISTANCE,
)


class IsochroneQuery(BaseModel):
    """
    Validated isochrone request.
    The distance limit is active when positive, otherwise the time limit applies.
    """

    model_config = ConfigDict(frozen=True)

    vehicle: str = Field("car", description="Vehicle profile")
    buckets: int = Field(1, ge=1, le=20, description="Number of isochrone levels")
    reverse_flow: bool = Field(False, description="Search who can reach the point instead of where it can reach")
    point: Tuple[float, float] = Field(..., description="(lat, lon)")
    result_mode: ResultMode = Field(ResultMode.POLYGON)
    columns: Tuple[PointListColumn, ...] = Field(DEFAULT_COLUMNS, description="Point list columns, in output order")
    time_limit_s: int = Field(600, description="Time budget in seconds")
    distance_limit_m: float = Field(-1.0, description="Distance budget in meters, -1 when unset")

    @property
    def uses_distance_limit(self) -> bool:
        return self.distance_limit_m > 0


class PolygonGeometry(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]


class PolygonFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: Dict[str, Any]
    geometry: PolygonGeometry


class IsochroneInfo(BaseModel):
    copyrights: List[str] = Field(default_factory=list)
    took: int = Field(0, ge=0, description="Elapsed milliseconds")


class PolygonResponse(BaseModel):
    polygons: List[PolygonFeature]
    info: IsochroneInfo


class PointListResponse(BaseModel):
    header: List[str]
    items: List[List[Any]]
    info: IsochroneInfo
