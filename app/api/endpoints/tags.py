"""Tag API 端点"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.decorators import profile_endpoint
from app.core.errors import http_failure
from app.db.session import get_db
from app.schemas.idea import TagItem
from app.services.tags import list_tags

router = APIRouter()


@router.get("", response_model=List[TagItem])
@profile_endpoint
async def get_tags(db: AsyncSession = Depends(get_db)):
    """获取所有标签（按名称排序）"""
    try:
        return await list_tags(db)
    except Exception as e:
        raise http_failure("Failed to fetch tags", e)
