"""
回滚服务 - 以历史版本内容追加新的最新版本
"""
from typing import Optional

from draft_studio.core import get_logger
from draft_studio.models import DraftVersion
from draft_studio.services.version_service import (
    RevisionPayload,
    VersionService,
    get_version_service,
)

logger = get_logger(__name__)

REVERT_SUMMARY_TEMPLATE = "Reverted to version {version}"


class RevertService:
    """
    回滚服务

    回滚从不截断历史：目标版本的内容（含已存的渲染结果）被复制为新版本，
    因此回滚本身也可以再被回滚
    """

    def __init__(self, version_service: Optional[VersionService] = None):
        if version_service is None:
            version_service = get_version_service()
        self.version_service = version_service

    def revert_to_version(
        self,
        draft_id: str,
        target_version: int,
        author_id: str,
    ) -> DraftVersion:
        """
        回滚到指定版本

        Raises:
            NotFoundError: 草稿或目标版本不存在
        """
        target = self.version_service.get_revision(draft_id, target_version)
        payload = RevisionPayload(
            content=target.content,
            change_summary=REVERT_SUMMARY_TEMPLATE.format(version=target_version),
            content_html=target.content_html,
            content_markdown=target.content_markdown,
        )

        revision = self.version_service.append_from(
            draft_id, author_id, lambda _draft: payload
        )
        logger.info(
            f"回滚草稿: draft_id={draft_id}, target={target_version}, "
            f"new_version={revision.version}"
        )
        return revision


# 全局单例
_revert_service: Optional[RevertService] = None


def get_revert_service() -> RevertService:
    """获取回滚服务单例"""
    global _revert_service
    if _revert_service is None:
        _revert_service = RevertService()
    return _revert_service
