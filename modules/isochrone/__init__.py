from .contracts import IsochroneServices, ReachabilityLabel, ResolvedLocation, SearchLimit
from .core import IsochroneResult, compute_isochrone
from .schemas import IsochroneQuery, PointListColumn, ResultMode
from .validator import validate_query

__all__ = [
    "IsochroneQuery",
    "IsochroneResult",
    "IsochroneServices",
    "PointListColumn",
    "ReachabilityLabel",
    "ResolvedLocation",
    "ResultMode",
    "SearchLimit",
    "compute_isochrone",
    "validate_query",
]
