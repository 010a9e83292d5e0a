"""
FastAPI主应用入口
职责：创建应用实例、集成中间件、加载路网、挂载路由、处理请求生命周期
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.exceptions import BizError
from modules.isochrone.services import build_services
from modules.road_graph import load_graph
from router import isochrone_router, misc_router

# ==================== 配置日志 ====================
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("=" * 50)
    logger.info("应用启动中...")
    logger.info(f"基础URL: {settings.app_base_url}")
    logger.info(f"路网文件: {settings.graph_file}")
    logger.info(f"最大访问节点数: {settings.max_visited_nodes}")
    logger.info(f"最大吸附距离: {settings.max_snap_distance_m}m")
    logger.info("=" * 50)

    # 加载路网并构建只读服务（请求之间共享，不再修改）
    graph = await asyncio.to_thread(load_graph, settings.graph_file)
    app.state.isochrone_services = build_services(
        graph,
        max_visited_nodes=settings.max_visited_nodes,
        copyrights=settings.copyrights,
        fallback_buffer_deg=settings.isoline_fallback_buffer_deg,
        max_snap_distance_m=settings.max_snap_distance_m,
    )

    try:
        yield
    finally:
        logger.info("应用关闭中...")
        logger.info("应用已关闭")

# ==================== 创建FastAPI应用 ====================
app = FastAPI(
    title="Isochrone API",
    description="根据路网位置与时间/距离预算计算可达范围（等时圈）",
    version="1.0.0",
    lifespan=lifespan,
)

# 配置CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 开启Gzip压缩
app.add_middleware(GZipMiddleware, minimum_size=500)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    logger.error(f"Validation Error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "message": "invalid request parameters",
            "detail": jsonable_errors(exc),
        },
    )

@app.exception_handler(BizError)
async def biz_exception_handler(request, exc: BizError):
    logger.error(f"BizError: {exc.message} | Payload: {exc.payload}")
    return JSONResponse(
        status_code=exc.code,
        content={
            "status": "error",
            "message": exc.message,
            "detail": exc.payload
        },
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]

# ==================== API路由 ====================

app.include_router(misc_router)
app.include_router(isochrone_router)

# ==================== 主入口 ====================

if __name__ == "__main__":
    import uvicorn

    logger.info("启动FastAPI应用...")
    logger.info(f"访问地址: http://localhost:{settings.app_port}")
    logger.info(f"API文档: http://localhost:{settings.app_port}/docs")

    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=True,
        log_level="info"
    )
