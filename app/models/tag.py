"""Tag 模型"""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Tag(Base):
    __tablename__ = "tags"

    # SQLite 只有 INTEGER PRIMARY KEY 才会自增
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer(), "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    # 写入前统一转为小写，唯一约束保证 upsert 原子性
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    # 没有 Tag -> Idea 反向关系，反查走 idea_tags 关联表

    def __repr__(self) -> str:
        return f"<Tag {self.id} {self.name!r}>"
