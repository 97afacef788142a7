"""Idea 模型"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import BigInteger, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.idea_tag import idea_tags


class Idea(Base):
    __tablename__ = "ideas"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer(), "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # twitter / reddit / linkedin / instagram，存储层不做枚举约束
    platform: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # 数值越大越靠前
    order: Mapped[int] = mapped_column("order", Integer, nullable=False, index=True)

    # Relationships
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=idea_tags,
        lazy="selectin",
        order_by="Tag.name",
    )

    def __repr__(self) -> str:
        return f"<Idea {self.id} order={self.order} {self.title!r}>"
