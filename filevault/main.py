import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from filevault.application.services.maintenance_service import MaintenanceService
from filevault.core.config import Settings, get_settings
from filevault.infrastructure.external.blob_store.local_blob_store import LocalBlobStore
from filevault.infrastructure.external.identity.http_identity_validator import (
    HttpIdentityValidator,
)
from filevault.infrastructure.logging import setup_logging
from filevault.infrastructure.storage.database import Database
from filevault.infrastructure.storage.migration import run_migrations
from filevault.interfaces.endpoints.routes import router as api_router
from filevault.interfaces.errors.exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)

# 定义FastApi路由tags标签
openapi_tags = [
    {"name": "文件模块", "description": "文件的上传、查询、重命名、下载与删除"},
    {"name": "文件夹模块", "description": "文件夹的创建、重命名、删除以及文件数量统计"},
    {"name": "状态模块", "description": "数据库与本地文件存储的健康检查"},
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """创建FastAPI应用，数据库连接池、文件存储、鉴权客户端均挂载在app.state上"""
    settings = settings or get_settings()
    setup_logging(settings)

    blob_store = LocalBlobStore(settings.upload_dir)
    identity_validator = HttpIdentityValidator(
        api_url=settings.identity_api_url,
        timeout=settings.identity_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期：启动时初始化各类客户端，关闭时释放"""
        logger.info("FileVault应用正在初始化")

        # 1.初始化本地文件存储目录
        blob_store.init()

        # 2.初始化数据库连接池并准备数据表
        database = Database(settings)
        await database.init()
        if settings.db_init_mode == "migrate":
            run_migrations(settings.database_url)
        elif settings.db_init_mode == "create_all":
            await database.create_all()
        app.state.database = database

        # 3.初始化鉴权服务客户端
        await identity_validator.init()

        # 4.按需执行一次存储一致性巡检
        if settings.reconcile_on_startup:
            await MaintenanceService(
                uow_factory=database.uow,
                blob_store=blob_store,
                orphan_grace_seconds=settings.orphan_blob_grace_seconds,
            ).reconcile()

        try:
            yield
        finally:
            # 5.应用关闭前的清理工作
            logger.info("FileVault应用正在关闭")
            await identity_validator.shutdown()
            await database.shutdown()
            logger.info("FileVault应用关闭成功")

    app = FastAPI(
        title="FileVault个人文件存储",
        description="文件上传、文件夹管理与文件预览服务，鉴权委托给第三方身份服务",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.blob_store = blob_store
    app.state.identity_validator = identity_validator

    # 配置CORS中间件，解决跨域问题
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册全局异常处理器
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    # 上传文件静态访问(无需认证)，目录在lifespan中创建
    app.mount(
        "/uploads",
        StaticFiles(directory=blob_store.root, check_dir=False),
        name="uploads",
    )

    logger.info("FastAPI应用程序实例已创建。")
    return app


app = create_app()
