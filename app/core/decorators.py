"""性能分析装饰器"""
import logging
import time
from functools import wraps
from typing import Callable, Any

logger = logging.getLogger(__name__)


def profile_endpoint(func: Callable) -> Callable:
    """
    性能分析装饰器，用于测量 API 端点的执行时间

    记录（DEBUG 级别）：
    - SQL 执行和业务逻辑耗时
    """
    @wraps(func)
    async def wrapper(*args, **kwargs) -> Any:
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start_time
            logger.debug(f"⏱️ {func.__name__}: {elapsed * 1000:.2f}ms")
    return wrapper
