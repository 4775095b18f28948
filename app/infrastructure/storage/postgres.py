import logging
from functools import lru_cache
from typing import Optional

from app.domain.repositories.uow import IUnitOfWork
from app.infrastructure.repositories.db_uow import DBUnitOfWork
from core.config import get_settings
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


class Postgres:
    """Postgres数据库客户端封装类，负责引擎与会话工厂的生命周期"""

    def __init__(self, database_url: Optional[str] = None):
        """构造函数，未传递连接地址时从配置中读取"""
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None
        self._settings = get_settings()
        self._database_url = database_url or self._settings.sqlalchemy_database_url

    async def init(self) -> None:
        """初始化Postgres数据库连接"""
        # 1. 判断是否已经初始化
        if self._engine is not None:
            logger.warning("Postgres数据库客户端已初始化，跳过重复初始化。")
            return

        # 2. 创建数据库引擎与会话工厂
        try:
            logger.info("正在初始化Postgres数据库客户端...")
            self._engine = create_async_engine(
                self._database_url,
                echo=False,
                pool_pre_ping=True,  # 从连接池获取连接前先检测连接是否有效
            )
            self._session_factory = async_sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,  # 提交后仍需读取ORM对象构建返回值
                bind=self._engine,
            )

            # 3. 执行一次查询确认数据库可达
            async with self._engine.connect() as async_conn:
                await async_conn.execute(text("SELECT 1"))
            logger.info("Postgres数据库客户端初始化成功。")
        except Exception as e:
            logger.error(f"Postgres数据库客户端初始化失败: {e}")
            raise

    async def shutdown(self) -> None:
        """关闭Postgres数据库连接"""
        if self._engine:
            await self._engine.dispose()
            logger.info("Postgres数据库客户端连接已关闭.")
        else:
            logger.warning("Postgres数据库客户端未初始化，无法关闭连接.")
        self._engine = None
        self._session_factory = None

        get_postgres.cache_clear()

    async def is_available(self) -> bool:
        """数据库是否可用，供/status使用"""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as async_conn:
                await async_conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Postgres可用性检查失败: {e}")
            return False

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """获取Postgres数据库会话工厂"""
        if not self._session_factory:
            raise RuntimeError(
                "Postgres数据库客户端未初始化，请先调用init方法进行初始化。"
            )
        return self._session_factory


@lru_cache()
def get_postgres() -> Postgres:
    """获取进程内的Postgres实例，只在依赖装配层使用"""
    return Postgres()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """获取数据库会话工厂"""
    return get_postgres().session_factory


def get_uow() -> IUnitOfWork:
    return DBUnitOfWork(session_factory=get_session_factory())
