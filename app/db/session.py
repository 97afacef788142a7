"""异步数据库会话管理模块"""
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def create_engine_for(database_url: str, **kwargs) -> AsyncEngine:
    """
    按数据库类型创建异步引擎

    - PostgreSQL (asyncpg): 连接池参数，禁用 prepared statement 缓存以兼容 PgBouncer
    - SQLite (aiosqlite): 打开外键约束，使 idea_tags 的 ON DELETE CASCADE 生效
    """
    url = make_url(database_url)
    options = {"echo": settings.DEBUG, "future": True}

    if url.get_backend_name() == "postgresql":
        options.update(
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
        )
        if url.get_driver_name() == "asyncpg":
            options["connect_args"] = {"statement_cache_size": 0}

    options.update(kwargs)
    engine = create_async_engine(url, **options)

    if url.get_backend_name() == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_fk(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# 创建异步引擎
engine = create_engine_for(settings.DATABASE_URL)

# 创建异步会话工厂
AsyncSessionLocal = create_session_factory(engine)

# 兼容别名：给 scripts 使用
async_session_factory = AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    数据库会话依赖注入函数

    Yields:
        AsyncSession: 异步数据库会话
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
