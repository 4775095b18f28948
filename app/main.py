import logging
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from alembic import command
from alembic.config import Config
from app.infrastructure.logging import setup_logging
from app.infrastructure.storage.postgres import get_postgres
from app.infrastructure.storage.redis import get_redis
from app.interfaces.endpoints.routes import router as api_router
from app.interfaces.errors.exception_handlers import register_exception_handlers
from core.config import get_settings
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

# 加载配置信息
settings = get_settings()

# 初始化日志记录
setup_logging()
logger = logging.getLogger()

logger.info("应用程序启动中...")

# 定义FastApi路由tags标签
openapi_tags = [
    {"name": "状态模块", "description": "服务可用性与统计信息"},
    {"name": "认证模块", "description": "基于X-Token会话的登录与登出"},
    {"name": "用户模块", "description": "用户注册与当前用户信息"},
    {"name": "文件模块", "description": "文件上传、浏览、公开状态与内容读取"},
]


def _build_alembic_database_url() -> str:
    """构建 Alembic 使用的数据库连接串（同步驱动 + 连接超时）"""
    db_url = settings.sqlalchemy_database_url
    if db_url.startswith("postgresql+asyncpg://"):
        db_url = db_url.replace("postgresql+asyncpg://", "postgresql+psycopg2://", 1)

    parsed = urlparse(db_url)
    query = dict(parse_qsl(parsed.query))
    query.setdefault("connect_timeout", "5")
    return urlunparse(parsed._replace(query=urlencode(query)))


def _mask_database_url(url: str) -> str:
    """脱敏数据库连接串中的密码"""
    parsed = urlparse(url)
    if parsed.password is None:
        return url
    user = parsed.username or ""
    host = parsed.hostname or ""
    port = f":{parsed.port}" if parsed.port else ""
    netloc = f"{user}:***@{host}{port}"
    return urlunparse(parsed._replace(netloc=netloc))


def run_migrations() -> None:
    """将数据库结构升级到最新版本"""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.attributes["configure_logger"] = False
    alembic_db_url = _build_alembic_database_url()
    alembic_cfg.set_main_option("sqlalchemy.url", alembic_db_url)
    logger.info(f"数据库迁移开始，连接地址: {_mask_database_url(alembic_db_url)}")
    command.upgrade(alembic_cfg, "head")
    logger.info("数据库迁移完成")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """创建FastAPI应用生命周期上下文管理器"""
    logger.info("文件服务正在初始化")

    # 1.运行数据库迁移
    run_migrations()

    # 2.准备文件存储根目录
    Path(settings.folder_path).mkdir(parents=True, exist_ok=True)

    # 3.初始化Redis客户端
    logger.info("开始初始化 Redis 客户端")
    redis_client = get_redis()
    await redis_client.init()
    logger.info("Redis 客户端初始化完成")

    # 4.初始化Postgres数据库客户端
    logger.info("开始初始化 Postgres 客户端")
    postgres_client = get_postgres()
    await postgres_client.init()
    logger.info("Postgres 客户端初始化完成")

    try:
        # 5.lifespan分界点
        yield
    finally:
        # 6.应用关闭前的清理工作
        logger.info("文件服务正在关闭")
        await redis_client.shutdown()
        await postgres_client.shutdown()
        logger.info("文件服务关闭成功")


def create_app() -> FastAPI:
    """创建FastAPI应用实例"""
    application = FastAPI(
        title="Files Manager",
        description="文件存储API：用户上传文件/文件夹、浏览文件树、切换公开状态、读取内容与缩略图",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
        version="1.0.0",
    )

    # 配置CORS中间件，解决跨域问题
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册全局异常处理器
    register_exception_handlers(application)

    application.include_router(api_router)
    return application


app = create_app()

logger.info("FastAPI应用程序实例已创建。")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
