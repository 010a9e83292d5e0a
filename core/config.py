"""
配置管理模块
使用Pydantic Settings从环境变量加载配置
"""

from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    应用配置类
    从环境变量加载配置，支持类型转换和验证
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # 未声明的 env 变量忽略，不抛出校验错误
    )

    # 应用配置
    app_host: str = "0.0.0.0"  # 应用主机地址，默认0.0.0.0（允许外部访问）
    app_port: int = 8000  # 应用端口，默认8000
    app_base_url: str = "http://localhost:8000"  # 基础URL，用于生成完整的访问链接
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # CORS跨域配置
    cors_origins: List[str] = ["*"]  # 允许访问的域名列表

    # 路网图配置
    graph_file: Optional[str] = Field(
        str(Path(__file__).resolve().parent.parent / "data" / "graph.json"),
        validation_alias="GRAPH_FILE",
        description="路网 JSON 文件路径（nodes/edges），不存在时以空图启动",
    )

    # 等时圈（Isochrone）配置
    max_visited_nodes: int = Field(
        1_000_000,
        validation_alias="MAX_VISITED_NODES",
        description="单次搜索允许访问的最大节点数，等时圈多边形模式使用其 1/5 作为上限",
        gt=0,
    )
    max_snap_distance_m: float = Field(
        1000.0,
        validation_alias="MAX_SNAP_DISTANCE_M",
        description="查询点吸附到路网的最大距离（米），超出则返回 Point not found",
        gt=0,
    )
    copyrights: List[str] = Field(
        ["GraphHopper", "OpenStreetMap contributors"],
        validation_alias="COPYRIGHTS",
        description="响应 info.copyrights 中的署名",
    )
    isoline_fallback_buffer_deg: float = Field(
        0.0005,
        validation_alias="ISOLINE_FALLBACK_BUFFER_DEG",
        description="三角剖分退化时凸包外扩半径（度）",
        ge=0,
    )


settings = Settings()
