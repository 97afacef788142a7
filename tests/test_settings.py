"""Tests for configuration and engine setup."""
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.session import create_engine_for


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.API_PREFIX == "/api"
        assert settings.LOG_LEVEL == "INFO"
        assert settings.SHARE_BASE_URL is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:5173"]')
        settings = Settings(_env_file=None)
        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.CORS_ORIGINS == ["http://localhost:5173"]


class TestEngine:

    async def test_sqlite_engine_enables_foreign_keys(self):
        engine = create_engine_for("sqlite+aiosqlite://", poolclass=StaticPool)
        try:
            async with engine.connect() as conn:
                result = await conn.exec_driver_sql("PRAGMA foreign_keys")
                assert result.scalar() == 1
        finally:
            await engine.dispose()
