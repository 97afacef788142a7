"""
Idea 仓储层：增删改查 + 标签关联 + 排序持久化

所有多语句写操作都在单个事务内完成，失败时整体回滚。
"""
import enum
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import IdeaBoardError, IdeaNotFoundError, StorageError
from app.models import Idea, idea_tags
from app.services.reorder import OrderUpdate, plan_move
from app.services.tags import relink_tags

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "platform", "order")


class ReorderStatus(str, enum.Enum):
    APPLIED = "applied"
    REJECTED = "rejected"


@dataclass
class ReorderResult:
    """批量排序结果：要么全部写入，要么一条都不写"""

    status: ReorderStatus
    applied: int = 0
    missing_ids: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is ReorderStatus.APPLIED


@asynccontextmanager
async def _transaction(db: AsyncSession, action: str):
    """提交事务；数据库错误包装为 StorageError，任何异常都会回滚"""
    try:
        yield
        await db.commit()
    except IdeaBoardError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ {action} 失败: {e}")
        raise StorageError(f"Failed to {action}") from e
    except Exception:
        await db.rollback()
        raise


def _ideas_query():
    return (
        select(Idea)
        .options(selectinload(Idea.tags))
        .order_by(desc(Idea.order), desc(Idea.id))
        # 关联表通过 Core 语句修改，必须刷新已加载的对象
        .execution_options(populate_existing=True)
    )


async def list_ideas(db: AsyncSession, platform: Optional[str] = None) -> List[Idea]:
    """按 order 降序返回所有 idea（含标签），可按平台过滤"""
    query = _ideas_query()
    if platform:
        query = query.where(Idea.platform == platform)
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"❌ 查询 ideas 失败: {e}")
        raise StorageError("Failed to fetch ideas") from e
    return list(result.scalars().all())


async def get_idea(db: AsyncSession, idea_id: int) -> Idea:
    try:
        result = await db.execute(_ideas_query().where(Idea.id == idea_id))
    except SQLAlchemyError as e:
        raise StorageError("Failed to fetch idea") from e
    idea = result.scalar_one_or_none()
    if idea is None:
        raise IdeaNotFoundError(idea_id)
    return idea


async def _next_order(db: AsyncSession) -> int:
    max_order = (await db.execute(select(func.max(Idea.order)))).scalar()
    return 0 if max_order is None else max_order + 1


async def create_idea(
    db: AsyncSession,
    title: str,
    platform: str,
    description: Optional[str] = None,
    tag_names: Iterable[str] = (),
) -> Idea:
    """新建 idea，排在最上方（order = 当前最大值 + 1，空表为 0）"""
    async with _transaction(db, "create idea"):
        idea = Idea(
            title=title,
            description=description,
            platform=platform,
            order=await _next_order(db),
        )
        db.add(idea)
        await db.flush()
        await relink_tags(db, idea.id, tag_names)
        idea_id = idea.id

    logger.info(f"💡 Created idea {idea_id} ({platform})")
    return await get_idea(db, idea_id)


async def update_idea(db: AsyncSession, idea_id: int, fields: Dict[str, Any]) -> Idea:
    """部分更新 title / description / platform / order"""
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")

    async with _transaction(db, "update idea"):
        idea = await db.get(Idea, idea_id)
        if idea is None:
            raise IdeaNotFoundError(idea_id)
        for name, value in fields.items():
            setattr(idea, name, value)

    return await get_idea(db, idea_id)


async def update_idea_tags(db: AsyncSession, idea_id: int, tag_names: Iterable[str]) -> Idea:
    """只替换标签集合，不修改其他字段"""
    async with _transaction(db, "update tags"):
        exists = (await db.execute(select(Idea.id).where(Idea.id == idea_id))).scalar()
        if exists is None:
            raise IdeaNotFoundError(idea_id)
        await relink_tags(db, idea_id, tag_names)

    return await get_idea(db, idea_id)


async def delete_idea(db: AsyncSession, idea_id: int) -> None:
    """删除 idea 及其标签关联；不存在时什么也不做"""
    async with _transaction(db, "delete idea"):
        await db.execute(delete(idea_tags).where(idea_tags.c.idea_id == idea_id))
        result = await db.execute(delete(Idea).where(Idea.id == idea_id))

    if result.rowcount:
        logger.info(f"🗑️ Deleted idea {idea_id}")


async def _apply_orders(db: AsyncSession, updates: List[OrderUpdate]) -> None:
    for idea_id, order in updates:
        await db.execute(update(Idea).where(Idea.id == idea_id).values(order=order))


async def reorder(db: AsyncSession, updates: Iterable[OrderUpdate]) -> ReorderResult:
    """
    批量写入 (id, order)

    任何一个 id 不存在则整批拒绝，不写入任何数据。
    """
    updates = list(updates)
    if not updates:
        return ReorderResult(ReorderStatus.APPLIED)

    async with _transaction(db, "update orders"):
        ids = {idea_id for idea_id, _ in updates}
        found = set((await db.execute(select(Idea.id).where(Idea.id.in_(sorted(ids))))).scalars())
        missing = sorted(ids - found)
        if missing:
            logger.warning(f"⚠️ Reorder rejected, unknown ideas: {missing}")
            return ReorderResult(ReorderStatus.REJECTED, missing_ids=missing)
        await _apply_orders(db, updates)

    logger.info(f"🔀 Reordered {len(updates)} ideas")
    return ReorderResult(ReorderStatus.APPLIED, applied=len(updates))


async def move_idea(
    db: AsyncSession,
    idea_id: int,
    target_index: int,
    platform: Optional[str] = None,
) -> List[Idea]:
    """
    服务端移动：在（可按平台过滤的）当前列表中把 idea 移到 target_index，
    对完整列表统一重新编号后返回过滤后的新列表。
    """
    full_list = await list_ideas(db)
    if idea_id not in {idea.id for idea in full_list}:
        raise IdeaNotFoundError(idea_id)

    visible_ids = None
    if platform:
        visible_ids = [idea.id for idea in full_list if idea.platform == platform]

    updates = plan_move(full_list, idea_id, target_index, visible_ids)
    async with _transaction(db, "move idea"):
        await _apply_orders(db, updates)

    return await list_ideas(db, platform)
