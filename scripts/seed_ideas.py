"""
Demo 数据导入脚本
从 JSON 文件导入 idea（含标签）；不传文件时写入内置示例

Usage:
    python -m scripts.seed_ideas [json_path] [--reset]

JSON Format:
    [{"title": "...", "description": "...", "platform": "twitter", "tags": ["a", "b"]}]
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

# 确保项目根目录在 Python path 中
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from sqlalchemy import delete

from app.core.logging import setup_logging
from app.db.base import Base
from app.db.session import async_session_factory, engine
from app.models import Idea, idea_tags
from app.schemas.idea import IdeaCreate
from app.services.ideas import create_idea

logger = logging.getLogger("seed_ideas")

SAMPLE_IDEAS = [
    {
        "title": "Thread: 5 lessons from shipping a side project",
        "description": "Short takeaways, one per tweet.",
        "platform": "twitter",
        "tags": ["buildinpublic", "Lessons"],
    },
    {
        "title": "Ask r/python about async ORM patterns",
        "platform": "reddit",
        "tags": ["python", "sqlalchemy"],
    },
    {
        "title": "Post about hiring juniors",
        "description": "Why mentorship pays off for small teams.",
        "platform": "linkedin",
        "tags": ["career"],
    },
    {
        "title": "Carousel: desk setup before/after",
        "platform": "instagram",
        "tags": ["setup", "lessons"],
    },
]


def load_ideas(path: Path) -> list[IdeaCreate]:
    """读取并校验 JSON 文件"""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return [IdeaCreate(**item) for item in raw]


async def seed(items: list[IdeaCreate], reset: bool = False) -> int:
    # 表不存在时自动建表（本地 SQLite 场景）
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        if reset:
            await session.execute(delete(idea_tags))
            await session.execute(delete(Idea))
            await session.commit()
            logger.info("🧹 已清空现有 ideas")

        # 倒序插入，使列表第一项最终排在最上方
        for item in reversed(items):
            idea = await create_idea(
                session,
                title=item.title,
                description=item.description,
                platform=item.platform.value,
                tag_names=item.tags,
            )
            logger.info(f"   ✅ [{idea.order}] {idea.title}")

    await engine.dispose()
    return len(items)


def main(argv: list[str]) -> None:
    setup_logging()
    reset = "--reset" in argv
    paths = [a for a in argv if not a.startswith("--")]

    if paths:
        items = load_ideas(Path(paths[0]))
    else:
        items = [IdeaCreate(**item) for item in SAMPLE_IDEAS]

    total = asyncio.run(seed(items, reset=reset))
    logger.info(f"🎉 导入完成：{total} 条 idea")


if __name__ == "__main__":
    main(sys.argv[1:])
