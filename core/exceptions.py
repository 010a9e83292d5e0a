from typing import Any, Dict, Optional

class BizError(Exception):
    """
    通用业务异常
    """
    def __init__(
        self,
        message: str,
        code: int = 400,
        payload: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.payload = payload or {}
        super().__init__(self.message)

class InvalidParameter(BizError):
    """
    请求参数缺失、格式错误或超出范围
    """
    def __init__(self, message: str, **payload: Any):
        super().__init__(message=message, code=400, payload=payload)

class PointNotFound(BizError):
    """
    查询点在当前交通方式下无法吸附到路网
    """
    def __init__(self, lat: float, lon: float, vehicle: str):
        super().__init__(
            message=f"Point not found: {lat},{lon}",
            code=400,
            payload={"point": [lat, lon], "vehicle": vehicle},
        )

class SearchTooExpensive(BizError):
    """
    搜索访问节点数超过服务端上限
    """
    def __init__(self, visited_nodes: int, max_allowed: int):
        super().__init__(
            message=(
                f"Server side reset: too many junction nodes would have to be explored ({visited_nodes}). "
                "Try a smaller 'buckets' count or a smaller 'time_limit'."
            ),
            code=400,
            payload={"visited_nodes": visited_nodes, "max_allowed": max_allowed},
        )
        self.visited_nodes = visited_nodes

class InsufficientBucketPoints(BizError):
    """
    某个分桶的边界点少于 2 个，无法构造等时线
    """
    def __init__(self, bucket_index: int, point_count: int):
        super().__init__(
            message=(
                f"Too few points found for bucket {bucket_index}. "
                "Please try a different 'point', a smaller 'buckets' count or a larger 'time_limit'."
            ),
            code=400,
            payload={"bucket": bucket_index, "points": point_count},
        )
        self.bucket_index = bucket_index

class UnknownColumn(BizError):
    """
    pointlist 模式请求了无法识别的列
    """
    def __init__(self, name: str):
        super().__init__(
            message=f"Unknown property {name}",
            code=400,
            payload={"column": name},
        )
        self.name = name
