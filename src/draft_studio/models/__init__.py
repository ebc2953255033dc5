"""
数据模型模块
"""
from .draft import Draft, DraftStatus, DEFAULT_DOCUMENT, utc_now
from .draft_version import DraftVersion

__all__ = [
    "Draft",
    "DraftStatus",
    "DraftVersion",
    "DEFAULT_DOCUMENT",
    "utc_now",
]
