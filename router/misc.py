from datetime import datetime

from fastapi import APIRouter, Depends

from core.config import settings
from modules.isochrone import IsochroneServices
from router.utils.deps import get_isochrone_services

router = APIRouter()


@router.get("/health", summary="健康检查")
async def health_check(services: IsochroneServices = Depends(get_isochrone_services)):
    """检查服务是否正常运行"""
    network = services.network
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": "1.0.0",
        "graph": {
            "nodes": network.node_count if network is not None else 0,
            "edges": network.edge_count if network is not None else 0,
        },
        "vehicles": services.profiles.names(),
    }


@router.get("/", summary="根路径")
async def root():
    """返回欢迎信息"""
    return {
        "message": "Isochrone API",
        "docs": f"{settings.app_base_url}/docs",
        "health": f"{settings.app_base_url}/health",
        "isochrone": f"{settings.app_base_url}/isochrone?point=48.1,11.5",
    }
