import asyncio
import logging
from typing import Any, AsyncGenerator, Dict, Optional

from filevault.core.config import Settings
from filevault.domain.repositories.uow import IUnitOfWork
from filevault.infrastructure.models import Base
from filevault.infrastructure.repositories.db_uow import DBUnitOfWork
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


class Database:
    """数据库客户端封装类，持有连接池和会话工厂

    生命周期由应用显式管理：启动时调用init创建连接池，关闭时调用shutdown释放连接池。
    实例挂载在app.state.database上，不使用模块级单例。
    """

    def __init__(self, settings: Settings):
        """构造函数，只保存配置，不创建连接"""
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None
        self._settings = settings

    def _engine_options(self) -> Dict[str, Any]:
        """构建连接池参数，sqlite不支持连接池大小相关参数"""
        options: Dict[str, Any] = {
            "echo": self._settings.env == "development",
            "pool_pre_ping": True,  # 每次从连接池获取连接前先检测连接是否有效
        }
        if not self._settings.database_url.startswith("sqlite"):
            options.update(
                pool_size=self._settings.db_pool_size,
                max_overflow=self._settings.db_max_overflow,
                pool_timeout=self._settings.db_pool_timeout,
            )
        return options

    async def init(self) -> None:
        """初始化数据库连接池"""
        # 1. 判断是否已经初始化
        if self._engine is not None:
            logger.warning("数据库客户端已初始化，跳过重复初始化。")
            return

        # 2. 创建数据库引擎和会话工厂
        try:
            logger.info("正在初始化数据库客户端...")
            self._engine = create_async_engine(
                self._settings.database_url, **self._engine_options()
            )
            self._session_factory = async_sessionmaker(
                autocommit=False,  # 禁用自动提交
                autoflush=False,  # 禁用自动刷新
                expire_on_commit=False,
                bind=self._engine,
            )
            logger.info("数据库客户端初始化成功。")
        except Exception as e:
            logger.error(f"数据库客户端初始化失败: {e}")
            raise

    async def create_all(self) -> None:
        """根据ORM模型创建数据表(已存在的表会跳过)"""
        async with self.engine.begin() as async_conn:
            await async_conn.run_sync(Base.metadata.create_all)
        logger.info("数据表检查/创建完成。")

    async def shutdown(self) -> None:
        """关闭数据库连接池"""
        if self._engine:
            await self._engine.dispose()
            logger.info("数据库客户端连接已关闭.")
        else:
            logger.warning("数据库客户端未初始化，无法关闭连接.")
        self._engine = None
        self._session_factory = None

    @property
    def engine(self) -> AsyncEngine:
        """获取数据库引擎"""
        if not self._engine:
            raise RuntimeError("数据库客户端未初始化，请先调用init方法进行初始化。")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """获取数据库会话工厂

        Returns:
            async_sessionmaker[AsyncSession]: 数据库会话工厂
        """
        if not self._session_factory:
            raise RuntimeError("数据库客户端未初始化，请先调用init方法进行初始化。")
        return self._session_factory

    def uow(self) -> IUnitOfWork:
        """创建一个新的UoW实例"""
        return DBUnitOfWork(session_factory=self.session_factory)


def get_database(request: Request) -> Database:
    """从应用状态中获取数据库客户端，用于依赖注入"""
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话，用于依赖注入

    Yields:
        AsyncSession: 数据库会话
    """
    session = get_database(request).session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        try:
            await asyncio.shield(session.close())
        except Exception:
            logger.warning("关闭数据库会话失败", exc_info=True)
