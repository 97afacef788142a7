"""Idea API 端点"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.decorators import profile_endpoint
from app.core.errors import http_failure
from app.db.session import get_db
from app.schemas.idea import (
    IdeaCreate,
    IdeaData,
    IdeaTagsUpdate,
    IdeaUpdate,
    MessageResponse,
    MoveRequest,
    Platform,
    ReorderRequest,
    ShareLinkResponse,
)
from app.services import ideas as idea_service
from app.services.share import share_url_for_idea

router = APIRouter()


@router.get("", response_model=List[IdeaData])
@profile_endpoint
async def list_ideas(
    platform: Optional[Platform] = Query(None, description="按平台过滤"),
    db: AsyncSession = Depends(get_db),
):
    """获取所有 idea，按 order 降序"""
    try:
        return await idea_service.list_ideas(db, platform.value if platform else None)
    except Exception as e:
        raise http_failure("Failed to fetch ideas", e)


@router.post("", response_model=IdeaData)
@profile_endpoint
async def create_idea(payload: IdeaCreate, db: AsyncSession = Depends(get_db)):
    """新建 idea（排在最上方）"""
    try:
        return await idea_service.create_idea(
            db,
            title=payload.title,
            description=payload.description,
            platform=payload.platform.value,
            tag_names=payload.tags,
        )
    except Exception as e:
        raise http_failure("Failed to create idea", e)


# 必须在 /{idea_id} 之前注册，否则 "reorder" 会被当作 id 解析
@router.put("/reorder", response_model=MessageResponse)
@profile_endpoint
async def reorder_ideas(payload: ReorderRequest, db: AsyncSession = Depends(get_db)):
    """
    批量更新排序

    - **updates**: [{id, order}, ...]，全部写入或全部拒绝
    """
    try:
        result = await idea_service.reorder(db, [(u.id, u.order) for u in payload.updates])
    except Exception as e:
        raise http_failure("Failed to update orders", e)
    if not result.ok:
        raise HTTPException(status_code=500, detail="Failed to update orders")
    return {"message": "Orders updated successfully"}


@router.get("/{idea_id}", response_model=IdeaData)
@profile_endpoint
async def get_idea(idea_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await idea_service.get_idea(db, idea_id)
    except Exception as e:
        raise http_failure("Failed to fetch idea", e)


@router.put("/{idea_id}", response_model=IdeaData)
@profile_endpoint
async def update_idea(idea_id: int, payload: IdeaUpdate, db: AsyncSession = Depends(get_db)):
    """部分更新 idea（只修改请求中出现的字段）"""
    try:
        return await idea_service.update_idea(db, idea_id, payload.changes())
    except Exception as e:
        raise http_failure("Failed to update idea", e)


@router.put("/{idea_id}/tags", response_model=IdeaData)
@profile_endpoint
async def update_idea_tags(idea_id: int, payload: IdeaTagsUpdate, db: AsyncSession = Depends(get_db)):
    """用给定的标签集合替换 idea 的标签"""
    try:
        return await idea_service.update_idea_tags(db, idea_id, payload.tags)
    except Exception as e:
        raise http_failure("Failed to update tags", e)


@router.delete("/{idea_id}", response_model=MessageResponse)
@profile_endpoint
async def delete_idea(idea_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await idea_service.delete_idea(db, idea_id)
    except Exception as e:
        raise http_failure("Failed to delete idea", e)
    return {"message": "Idea deleted successfully"}


@router.post("/{idea_id}/move", response_model=List[IdeaData])
@profile_endpoint
async def move_idea(idea_id: int, payload: MoveRequest, db: AsyncSession = Depends(get_db)):
    """
    服务端拖拽移动

    - **targetIndex**: 在当前（按 platform 过滤后的）列表中的新位置
    - **platform**: 可选，当前激活的平台过滤
    """
    try:
        return await idea_service.move_idea(
            db,
            idea_id,
            payload.target_index,
            payload.platform.value if payload.platform else None,
        )
    except Exception as e:
        raise http_failure("Failed to move idea", e)


@router.get("/{idea_id}/share", response_model=ShareLinkResponse)
@profile_endpoint
async def share_idea(
    idea_id: int,
    url: Optional[str] = Query(None, description="附带的链接，默认使用 SHARE_BASE_URL"),
    db: AsyncSession = Depends(get_db),
):
    """生成目标平台的预填充分享链接"""
    try:
        idea = await idea_service.get_idea(db, idea_id)
    except Exception as e:
        raise http_failure("Failed to build share link", e)
    share_url = share_url_for_idea(idea, url or settings.SHARE_BASE_URL)
    return ShareLinkResponse(platform=idea.platform, url=share_url or None)
