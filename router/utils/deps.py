import logging

from fastapi import HTTPException, Request, status

from modules.isochrone import IsochroneServices

logger = logging.getLogger(__name__)


def get_isochrone_services(request: Request) -> IsochroneServices:
    """
    返回应用启动时构建的等时圈服务（路网、索引、搜索等只读对象）
    """
    services = getattr(request.app.state, "isochrone_services", None)
    if services is None:
        logger.error("等时圈服务尚未初始化")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="路网服务尚未就绪，请稍后重试",
        )
    return services
