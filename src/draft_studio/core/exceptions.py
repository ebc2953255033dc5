"""
业务异常定义

服务层只抛出这些异常，API 层负责映射为 HTTP 状态码:
    NotFoundError            -> 404
    ValidationError          -> 400
    InvalidStateError        -> 409
    ConcurrencyConflictError -> 503
"""


class DraftStudioError(Exception):
    """所有业务异常的基类"""


class NotFoundError(DraftStudioError, LookupError):
    """草稿或指定版本不存在"""


class ValidationError(DraftStudioError, ValueError):
    """输入不合法，例如标题为空"""


class InvalidStateError(DraftStudioError):
    """当前状态不允许该操作，例如没有可提交的工作副本"""


class ConcurrencyConflictError(DraftStudioError):
    """版本指针的乐观锁校验失败"""

    def __init__(self, draft_id: str, expected_version: int):
        self.draft_id = draft_id
        self.expected_version = expected_version
        super().__init__(
            f"草稿 {draft_id} 的版本指针已不是 {expected_version}，请重试保存"
        )
