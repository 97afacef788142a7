"""数据库模型模块"""

from app.models.idea import Idea
from app.models.idea_tag import IdeaTag, idea_tags
from app.models.tag import Tag

__all__ = [
    "Idea",
    "Tag",
    "IdeaTag",
    "idea_tags",
]
