from .isochrone import router as isochrone_router
from .misc import router as misc_router

__all__ = ["isochrone_router", "misc_router"]
