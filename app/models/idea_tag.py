"""Idea <-> Tag 关联表"""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, Table
from sqlalchemy.orm import Mapped

from app.db.base import Base

idea_tags = Table(
    "idea_tags",
    Base.metadata,
    Column(
        "idea_id",
        BigInteger().with_variant(Integer(), "sqlite"),
        ForeignKey("ideas.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        BigInteger().with_variant(Integer(), "sqlite"),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class IdeaTag(Base):
    """idea_tags 的 ORM 映射（便于查询/插入）"""

    __table__ = idea_tags

    # typing only (列来自 __table__)
    idea_id: Mapped[int]
    tag_id: Mapped[int]
