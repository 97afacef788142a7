"""
Tag 归一化与 upsert

标签以小写形式作为唯一标识："Foo" 与 "foo" 视为同一个标签。
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import StorageError
from app.models import IdeaTag, Tag, idea_tags

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def normalize_tag_name(raw: Optional[str]) -> Optional[str]:
    """去除首尾空白并转小写；空标签返回 None"""
    if raw is None:
        return None
    name = raw.strip().lower()
    return name or None


def normalize_tag_names(raw_names: Iterable[Optional[str]]) -> List[str]:
    """批量归一化，去掉空值并按首次出现顺序去重"""
    names: List[str] = []
    for raw in raw_names:
        name = normalize_tag_name(raw)
        if name and name not in names:
            names.append(name)
    return names


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return _INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Tag upsert is not supported on {dialect}") from None


async def ensure_tag(db: AsyncSession, name: str) -> Tag:
    """
    查找或创建标签（原子操作）

    依赖 tags.name 的唯一约束：INSERT ... ON CONFLICT DO NOTHING 之后再查询，
    并发请求不会插入重复行。调用方负责提交事务。
    """
    normalized = normalize_tag_name(name)
    if normalized is None:
        raise ValueError("Tag name must not be blank")

    insert = _insert_for(db)
    await db.execute(
        insert(Tag).values(name=normalized).on_conflict_do_nothing(index_elements=["name"])
    )
    result = await db.execute(select(Tag).where(Tag.name == normalized))
    return result.scalar_one()


async def relink_tags(db: AsyncSession, idea_id: int, raw_names: Iterable[Optional[str]]) -> List[Tag]:
    """
    将 idea 的标签集合同步为 raw_names

    1. 删除该 idea 现有的全部关联
    2. 逐个 ensure_tag 并重新插入关联

    不会删除标签本身。整个过程在调用方的事务内完成。
    """
    names = normalize_tag_names(raw_names)
    await db.execute(delete(idea_tags).where(idea_tags.c.idea_id == idea_id))

    tags: List[Tag] = []
    for name in names:
        tags.append(await ensure_tag(db, name))

    if tags:
        insert = _insert_for(db)
        await db.execute(
            insert(IdeaTag)
            .values([{"idea_id": idea_id, "tag_id": tag.id} for tag in tags])
            .on_conflict_do_nothing()
        )

    logger.debug(f"🏷️ Idea {idea_id} relinked to tags: {names}")
    return tags


async def list_tags(db: AsyncSession) -> List[Tag]:
    """所有标签，按名称排序"""
    try:
        result = await db.execute(select(Tag).order_by(Tag.name))
    except SQLAlchemyError as e:
        logger.error(f"❌ 查询 tags 失败: {e}")
        raise StorageError("Failed to fetch tags") from e
    return list(result.scalars().all())
