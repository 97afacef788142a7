"""
Pytest Configuration and Fixtures

- 每个测试使用独立的内存 SQLite 数据库（aiosqlite + StaticPool）
- HTTP 测试通过 httpx.AsyncClient + ASGITransport 调用 FastAPI 应用
"""
import os

# 必须在导入 app 之前设置，避免连接真实数据库
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import create_engine_for, create_session_factory, get_db
from app.main import app


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """全新的内存数据库，测试结束后销毁"""
    engine = create_engine_for("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """直接调用 service 层时使用的会话"""
    async with create_session_factory(engine)() as session:
        yield session


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[httpx.AsyncClient, None]:
    """覆盖 get_db 依赖后的 HTTP 客户端"""
    session_factory = create_session_factory(engine)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# =============================================================================
# HELPERS
# =============================================================================

@pytest.fixture
def make_idea(client: httpx.AsyncClient):
    """通过 API 创建 idea，返回响应 JSON"""

    async def _make(title: str, platform: str = "twitter", tags=None, description=None) -> dict:
        body = {"title": title, "platform": platform}
        if tags is not None:
            body["tags"] = tags
        if description is not None:
            body["description"] = description
        response = await client.post("/api/ideas", json=body)
        assert response.status_code == 200, response.text
        return response.json()

    return _make
