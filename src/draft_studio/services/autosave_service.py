"""
自动保存服务 - 工作副本的覆盖写入、丢弃与提交
"""
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlmodel import Session

from draft_studio.core import get_logger
from draft_studio.core import database
from draft_studio.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from draft_studio.models import Draft, DraftVersion, utc_now
from draft_studio.services.version_service import (
    RevisionPayload,
    VersionService,
    get_version_service,
)

logger = get_logger(__name__)


class AutosaveService:
    """
    自动保存服务

    - save: 高频调用，只写工作副本两列，不加版本锁
    - discard: 清空工作副本，不影响版本链
    - commit: 读取工作副本 → 追加版本 → 清空工作副本，整体在一个事务内，
      且与同一草稿的其他 commit/discard 互斥
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        version_service: Optional[VersionService] = None,
    ):
        self.engine = engine if engine is not None else database.engine
        if version_service is None:
            version_service = get_version_service()
        self.version_service = version_service

    def save_working_copy(self, draft_id: str, content: Any) -> Draft:
        """
        覆盖写入工作副本

        重复写入相同内容无副作用，不会产生版本
        """
        if content is None:
            raise ValidationError("工作副本内容不能为空")

        now = utc_now()
        with Session(self.engine) as session:
            result = session.execute(
                update(Draft)
                .where(Draft.id == draft_id)
                .values(
                    working_copy=content,
                    working_copy_saved_at=now,
                    working_copy_seq=Draft.working_copy_seq + 1,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                session.rollback()
                raise NotFoundError(f"草稿不存在: {draft_id}")
            session.commit()

            logger.debug(f"自动保存工作副本: draft_id={draft_id}")
            return session.get(Draft, draft_id)

    def discard_working_copy(self, draft_id: str) -> Draft:
        """
        丢弃工作副本

        没有工作副本时直接返回，不视为错误
        """
        with self.version_service.locks.hold(draft_id):
            with Session(self.engine) as session:
                draft = session.get(Draft, draft_id)
                if not draft:
                    raise NotFoundError(f"草稿不存在: {draft_id}")
                if not draft.has_working_copy:
                    return draft

                draft.working_copy = None
                draft.working_copy_saved_at = None
                draft.working_copy_seq = draft.working_copy_seq + 1
                draft.updated_at = utc_now()
                session.add(draft)
                session.commit()
                session.refresh(draft)

                logger.info(f"丢弃工作副本: draft_id={draft_id}")
                return draft

    def commit_working_copy(
        self,
        draft_id: str,
        author_id: str,
        change_summary: Optional[str] = None,
    ) -> DraftVersion:
        """
        将工作副本提交为新版本

        Raises:
            NotFoundError: 草稿不存在
            InvalidStateError: 没有可提交的工作副本
        """

        def build(draft: Draft) -> RevisionPayload:
            if not draft.has_working_copy:
                raise InvalidStateError("没有可提交的工作副本")
            return RevisionPayload(content=draft.working_copy, change_summary=change_summary)

        revision = self.version_service.append_from(
            draft_id, author_id, build, clear_working_copy=True
        )
        logger.info(f"提交工作副本: draft_id={draft_id}, version={revision.version}")
        return revision


# 全局单例
_autosave_service: Optional[AutosaveService] = None


def get_autosave_service() -> AutosaveService:
    """获取自动保存服务单例"""
    global _autosave_service
    if _autosave_service is None:
        _autosave_service = AutosaveService()
    return _autosave_service
