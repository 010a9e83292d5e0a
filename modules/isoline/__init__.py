from .builder import DelaunayIsolineBuilder, clip_triangle

__all__ = ["DelaunayIsolineBuilder", "clip_triangle"]
