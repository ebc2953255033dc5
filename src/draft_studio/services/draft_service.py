"""
草稿服务 - 草稿元数据的创建、查询、修改与删除
"""
import copy
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import delete, func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from draft_studio.core import get_settings, get_logger
from draft_studio.core import database
from draft_studio.core.exceptions import NotFoundError, ValidationError
from draft_studio.models import DEFAULT_DOCUMENT, Draft, DraftStatus, DraftVersion, utc_now

logger = get_logger(__name__)


@dataclass
class DraftDetail:
    """草稿详情：草稿本身 + 指针指向的最新版本"""
    draft: Draft
    latest_version: DraftVersion


@dataclass
class DraftSummary:
    """草稿列表项"""
    draft: Draft
    version_count: int


class DraftService:
    """
    草稿服务

    草稿创建时同一事务内写入第 1 版，不存在没有版本的草稿。
    修改元数据不会产生新版本，也不会触碰工作副本
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine if engine is not None else database.engine

    def _clean_title(self, title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise ValidationError("标题不能为空")
        return title.strip()

    def create_draft(
        self,
        workspace_id: str,
        created_by_id: str,
        title: str,
        content: Optional[Any] = None,
        change_summary: Optional[str] = None,
    ) -> DraftDetail:
        """
        创建草稿及其第 1 版

        Args:
            workspace_id: 所属工作空间ID
            created_by_id: 创建者ID
            title: 标题
            content: 初始内容，缺省为空文档
            change_summary: 第 1 版的变更说明

        Raises:
            ValidationError: 标题为空
        """
        title = self._clean_title(title)
        if content is None:
            content = copy.deepcopy(DEFAULT_DOCUMENT)
        if not change_summary:
            change_summary = get_settings().default_initial_summary

        now = utc_now()
        with Session(self.engine) as session:
            draft = Draft(
                workspace_id=workspace_id,
                created_by_id=created_by_id,
                title=title,
                current_version=1,
                created_at=now,
                updated_at=now,
            )
            session.add(draft)
            # 先落草稿行，满足版本表外键
            session.flush()

            first_version = DraftVersion(
                draft_id=draft.id,
                version=1,
                content=content,
                change_summary=change_summary,
                created_by_id=created_by_id,
                created_at=now,
            )
            session.add(first_version)
            session.commit()
            session.refresh(draft)
            session.refresh(first_version)

            logger.info(f"创建草稿: id={draft.id}, workspace={workspace_id}, title={title}")
            return DraftDetail(draft=draft, latest_version=first_version)

    def get_draft(self, draft_id: str) -> DraftDetail:
        """获取草稿及其最新版本"""
        with Session(self.engine) as session:
            draft = session.get(Draft, draft_id)
            if not draft:
                raise NotFoundError(f"草稿不存在: {draft_id}")
            return DraftDetail(draft=draft, latest_version=self._latest(session, draft))

    def _latest(self, session: Session, draft: Draft) -> DraftVersion:
        statement = select(DraftVersion).where(
            DraftVersion.draft_id == draft.id,
            DraftVersion.version == draft.current_version,
        )
        return session.exec(statement).one()

    def list_drafts(self, workspace_id: str) -> list[DraftSummary]:
        """获取工作空间内的草稿，按更新时间倒序"""
        with Session(self.engine) as session:
            drafts = session.exec(
                select(Draft)
                .where(Draft.workspace_id == workspace_id)
                .order_by(Draft.updated_at.desc())
            ).all()
            if not drafts:
                return []

            counts = dict(
                session.exec(
                    select(DraftVersion.draft_id, func.count(DraftVersion.id))
                    .where(DraftVersion.draft_id.in_([d.id for d in drafts]))
                    .group_by(DraftVersion.draft_id)
                ).all()
            )
            return [
                DraftSummary(draft=d, version_count=counts.get(d.id, 0))
                for d in drafts
            ]

    def update_metadata(
        self,
        draft_id: str,
        title: Optional[str] = None,
        status: Optional[str] = None,
    ) -> DraftDetail:
        """
        修改标题和状态

        Raises:
            NotFoundError: 草稿不存在
            ValidationError: 标题为空或状态不合法
        """
        new_title = self._clean_title(title) if title is not None else None
        new_status = None
        if status is not None:
            try:
                new_status = DraftStatus(status)
            except ValueError:
                allowed = ", ".join(s.value for s in DraftStatus)
                raise ValidationError(f"状态不合法: {status}，可选值: {allowed}")

        with Session(self.engine) as session:
            draft = session.get(Draft, draft_id)
            if not draft:
                raise NotFoundError(f"草稿不存在: {draft_id}")

            if new_title is not None:
                draft.title = new_title
            if new_status is not None:
                draft.status = new_status
            draft.updated_at = utc_now()
            session.add(draft)
            session.commit()
            session.refresh(draft)

            logger.info(f"修改草稿元数据: id={draft_id}")
            return DraftDetail(draft=draft, latest_version=self._latest(session, draft))

    def delete_draft(self, draft_id: str) -> None:
        """删除草稿及其全部版本，不可恢复"""
        with Session(self.engine) as session:
            draft = session.get(Draft, draft_id)
            if not draft:
                raise NotFoundError(f"草稿不存在: {draft_id}")

            # 外键已配置级联，这里显式删除以兼容未开启外键约束的库
            session.execute(delete(DraftVersion).where(DraftVersion.draft_id == draft_id))
            session.delete(draft)
            session.commit()

        logger.info(f"删除草稿: id={draft_id}")


# 全局单例
_draft_service: Optional[DraftService] = None


def get_draft_service() -> DraftService:
    """获取草稿服务单例"""
    global _draft_service
    if _draft_service is None:
        _draft_service = DraftService()
    return _draft_service
