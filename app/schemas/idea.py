"""Idea / Tag API 的 Pydantic 模式定义"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Platform(str, Enum):
    """支持的目标平台（仅在 API 边界校验，存储层为普通字符串）"""

    TWITTER = "twitter"
    REDDIT = "reddit"
    LINKEDIN = "linkedin"
    INSTAGRAM = "instagram"


class TagItem(BaseModel):
    """标签项"""

    id: int
    name: str

    class Config:
        populate_by_name = True
        from_attributes = True


class IdeaData(BaseModel):
    """Idea 数据（含标签）"""

    id: int
    title: str
    description: Optional[str] = None
    platform: str
    createdAt: datetime = Field(validation_alias="created_at")
    order: int
    tags: List[TagItem] = []

    class Config:
        populate_by_name = True
        from_attributes = True


def _strip_title(v: Optional[str]) -> Optional[str]:
    """去除首尾空白，拒绝空标题；None 原样返回（部分更新时表示不修改）"""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    return v


class IdeaCreate(BaseModel):
    """创建 Idea 的请求体"""

    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    platform: Platform
    tags: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)

    @field_validator("tags", mode="before")
    @classmethod
    def tags_default(cls, v):
        # 客户端可能把可选字段传成 null
        return [] if v is None else v


class IdeaUpdate(BaseModel):
    """部分更新 Idea：只修改请求中出现的字段"""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    platform: Optional[Platform] = None
    order: Optional[int] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)

    def changes(self) -> dict:
        """
        返回需要写入的字段

        description 显式传 null 表示清空；其余字段为 null 时忽略
        """
        data = self.model_dump(exclude_unset=True)
        changes = {k: v for k, v in data.items() if v is not None or k == "description"}
        if isinstance(changes.get("platform"), Platform):
            changes["platform"] = changes["platform"].value
        return changes


class IdeaTagsUpdate(BaseModel):
    """替换 Idea 的标签集合"""

    tags: List[str]


class ReorderItem(BaseModel):
    id: int
    order: int


class ReorderRequest(BaseModel):
    """批量写入排序值"""

    updates: List[ReorderItem]


class MoveRequest(BaseModel):
    """服务端移动：targetIndex 为当前（可能按平台过滤后的）列表中的新位置"""

    target_index: int = Field(..., ge=0, alias="targetIndex")
    platform: Optional[Platform] = None

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str


class ShareLinkResponse(BaseModel):
    """分享链接；平台不支持网页分享时 url 为 null"""

    platform: str
    url: Optional[str] = None
