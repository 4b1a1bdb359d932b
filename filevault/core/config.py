from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用程序的配置设置，继承自Pydantic的BaseSettings。从.env或者环境变量中加载配置。"""

    # 项目基础配置
    env: str = "development"  # 应用环境，默认为'development'
    log_level: str = "INFO"  # 日志级别，默认为'INFO'
    host: str = "0.0.0.0"  # 服务监听地址
    port: int = 3003  # 服务监听端口

    # 数据库配置(未指定完整连接串时使用以下字段拼接)
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "123456"
    db_name: str = "filevault"
    sqlalchemy_database_url: Optional[str] = None

    # 数据库连接池配置
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: float = 30.0  # 获取连接的最长等待时间(秒)
    db_init_mode: Literal["migrate", "create_all", "none"] = "migrate"

    # 本地文件存储配置
    upload_dir: str = "uploads"
    max_upload_size: int = 50 * 1024 * 1024  # 单个文件最大50MB

    # 第三方鉴权服务配置
    identity_api_url: str = "https://api.zxkws.nyc.mn/api/v1/user"
    identity_timeout_seconds: float = 10.0

    # 跨域配置
    cors_allow_origins: List[str] = ["*"]

    # 文件/数据库一致性巡检配置
    reconcile_on_startup: bool = False
    orphan_blob_grace_seconds: int = 3600

    # 使用pydantic v2的写法来完成环境变量信息的告知
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """获取数据库连接串，优先使用完整的sqlalchemy_database_url"""
        if self.sqlalchemy_database_url:
            return self.sqlalchemy_database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache()
def get_settings() -> Settings:
    """获取应用程序的配置设置实例，使用lru_cache进行缓存以提高性能。

    Returns:
        Settings: 应用程序的配置设置实例。
    """
    return Settings()
