"""领域错误定义，以及 API 边界的错误转换"""
import logging

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class IdeaBoardError(Exception):
    """所有领域错误的基类"""


class StorageError(IdeaBoardError):
    """数据库连接或查询失败"""


class IdeaNotFoundError(IdeaBoardError):
    """目标 idea 不存在"""

    def __init__(self, idea_id: int):
        super().__init__(f"Idea {idea_id} not found")
        self.idea_id = idea_id


class ReorderError(IdeaBoardError):
    """排序请求无效（被移动项不存在或目标位置越界）"""


def http_failure(message: str, error: Exception) -> HTTPException:
    """所有失败统一返回 500 + {message}；非领域错误记录完整堆栈"""
    if isinstance(error, IdeaBoardError):
        logger.warning(f"{message}: {error}")
    else:
        logger.exception(f"{message}: {error}")
    return HTTPException(status_code=500, detail=message)
