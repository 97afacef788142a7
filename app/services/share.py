"""社交平台分享链接生成"""
from typing import Iterable, Optional
from urllib.parse import quote

from app.models import Idea

# 与浏览器 encodeURIComponent 保留的字符一致
_SAFE_CHARS = "-_.!~*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_SAFE_CHARS)


def build_share_url(
    platform: str,
    text: str,
    url: Optional[str] = None,
    title: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
) -> str:
    """
    生成预填充的分享链接

    Instagram 不支持网页分享，未知平台同样返回空字符串。
    """
    text_q = _encode(text)
    url_q = _encode(url) if url else ""
    title_q = _encode(title) if title else ""
    hashtags = ",".join(_encode(tag) for tag in tags) if tags else ""

    if platform == "twitter":
        share = f"https://twitter.com/intent/tweet?text={text_q}"
        if url_q:
            share += f"&url={url_q}"
        if hashtags:
            share += f"&hashtags={hashtags}"
        return share
    if platform == "reddit":
        return f"https://reddit.com/submit?title={title_q or text_q}&url={url_q}"
    if platform == "linkedin":
        return f"https://www.linkedin.com/sharing/share-offsite/?url={url_q}&title={title_q or text_q}"
    return ""


def share_text(idea: Idea) -> str:
    """标题 + 空行 + 描述（如果有）"""
    if idea.description:
        return f"{idea.title}\n\n{idea.description}"
    return idea.title


def share_url_for_idea(idea: Idea, url: Optional[str] = None) -> str:
    return build_share_url(
        idea.platform,
        share_text(idea),
        url=url,
        title=idea.title,
        tags=[tag.name for tag in idea.tags],
    )
