import asyncio
from logging.config import fileConfig
import sys
from pathlib import Path
import os
from dotenv import load_dotenv

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

# 1. 路径设置
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# 2. 加载 .env
load_dotenv()

# 读取配置
config = context.config

# 3. 获取 URL
db_url = os.environ.get("DATABASE_URL")

if not db_url:
    raise ValueError("❌ Error: DATABASE_URL is missing in .env!")

# 4. 补全异步驱动 (postgres:// / postgresql:// -> postgresql+asyncpg://)
if db_url.startswith("postgres://"):
    db_url = db_url.replace("postgres://", "postgresql+asyncpg://", 1)
elif db_url.startswith("postgresql://"):
    db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
elif db_url.startswith("sqlite://"):
    db_url = db_url.replace("sqlite://", "sqlite+aiosqlite://", 1)

# 设置给 Alembic（ini 中 % 需要转义）
config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))

# 日志配置
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# -------------------- [ 模型导入 ] --------------------
# 只有导入了模型，Base.metadata 才能感知到表的存在
from app.db.base import Base
from app.models import Idea, IdeaTag, Tag  # noqa: F401

target_metadata = Base.metadata
# -------------------- [ 模型导入结束 ] --------------------

def _connect_args(url: str) -> dict:
    # Supabase/PgBouncer 需要关闭 prepared statement 缓存
    if "asyncpg" in url:
        return {"statement_cache_size": 0}
    return {}

def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()

def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()

async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args=_connect_args(db_url),
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()

def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
