"""
版本链服务 - 分配版本号并原子推进草稿的版本指针
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from draft_studio.core import get_settings, get_logger
from draft_studio.core import database
from draft_studio.core.exceptions import ConcurrencyConflictError, NotFoundError
from draft_studio.core.locks import KeyedLock, draft_locks
from draft_studio.models import Draft, DraftVersion, utc_now

logger = get_logger(__name__)


@dataclass
class RevisionPayload:
    """待写入新版本的内容"""
    content: Any
    change_summary: Optional[str] = None
    content_html: Optional[str] = None
    content_markdown: Optional[str] = None


# 根据本次事务读到的草稿构造新版本内容；可抛出业务异常终止追加
PayloadBuilder = Callable[[Draft], RevisionPayload]


class VersionService:
    """
    版本链服务

    所有新版本都经由 append 系列方法写入：
    1. 读取草稿当前版本号 V
    2. 插入版本 V+1
    3. 条件更新指针 (WHERE current_version = V)

    2、3 在同一事务内。同进程内按草稿加锁串行；跨进程依靠条件更新和
    (draft_id, version) 唯一约束发现冲突，冲突后重读 V 重试
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        max_retries: Optional[int] = None,
        locks: Optional[KeyedLock] = None,
    ):
        self.engine = engine if engine is not None else database.engine
        if max_retries is None:
            max_retries = get_settings().version_append_max_retries
        self.max_retries = max_retries
        # KeyedLock 定义了 __len__，空锁表为假值，不能用 or 取默认
        self.locks = locks if locks is not None else draft_locks

    def append_revision(
        self,
        draft_id: str,
        content: Any,
        author_id: str,
        change_summary: Optional[str] = None,
        content_html: Optional[str] = None,
        content_markdown: Optional[str] = None,
    ) -> DraftVersion:
        """
        追加新版本（手动保存）

        Raises:
            NotFoundError: 草稿不存在
            ConcurrencyConflictError: 重试耗尽
        """
        payload = RevisionPayload(
            content=content,
            change_summary=change_summary,
            content_html=content_html,
            content_markdown=content_markdown,
        )
        return self.append_from(draft_id, author_id, lambda _draft: payload)

    def append_from(
        self,
        draft_id: str,
        author_id: str,
        build: PayloadBuilder,
        clear_working_copy: bool = False,
    ) -> DraftVersion:
        """
        在草稿锁内追加新版本，内容由 build 根据最新读到的草稿生成

        clear_working_copy=True 时，指针推进与工作副本清空在同一条更新中完成，
        且要求工作副本修改序号与读取时一致
        """
        with self.locks.hold(draft_id):
            attempts = self.max_retries + 1
            for attempt in range(1, attempts + 1):
                with Session(self.engine) as session:
                    draft = session.get(Draft, draft_id)
                    if not draft:
                        raise NotFoundError(f"草稿不存在: {draft_id}")

                    payload = build(draft)
                    try:
                        revision = self._append_once(
                            session, draft, payload, author_id, clear_working_copy
                        )
                        session.commit()
                    except ConcurrencyConflictError as e:
                        session.rollback()
                        logger.warning(
                            f"版本追加冲突: draft_id={draft_id}, "
                            f"expected={e.expected_version}, attempt={attempt}/{attempts}"
                        )
                        continue

                    session.refresh(revision)
                    logger.info(
                        f"追加版本: draft_id={draft_id}, version={revision.version}, "
                        f"author={author_id}"
                    )
                    return revision

            raise ConcurrencyConflictError(draft_id, self._read_pointer(draft_id))

    def _append_once(
        self,
        session: Session,
        draft: Draft,
        payload: RevisionPayload,
        author_id: str,
        clear_working_copy: bool,
    ) -> DraftVersion:
        """单次尝试：插入 V+1 并条件推进指针，失败抛出 ConcurrencyConflictError"""
        # flush 失败后 draft 已过期，后续只用这里取出的值
        draft_id = draft.id
        expected = draft.current_version
        seq = draft.working_copy_seq
        next_version = expected + 1
        now = utc_now()

        revision = DraftVersion(
            draft_id=draft_id,
            version=next_version,
            content=payload.content,
            content_html=payload.content_html,
            content_markdown=payload.content_markdown,
            change_summary=payload.change_summary,
            created_by_id=author_id,
            created_at=now,
        )
        session.add(revision)
        try:
            session.flush()
        except IntegrityError as e:
            raise ConcurrencyConflictError(draft_id, expected) from e

        statement = update(Draft).where(
            Draft.id == draft_id,
            Draft.current_version == expected,
        )
        values = {"current_version": next_version, "updated_at": now}
        if clear_working_copy:
            statement = statement.where(Draft.working_copy_seq == seq)
            values.update(
                working_copy=None,
                working_copy_saved_at=None,
                working_copy_seq=seq + 1,
            )

        result = session.execute(
            statement.values(**values).execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(draft_id, expected)

        return revision

    def _read_pointer(self, draft_id: str) -> int:
        with Session(self.engine) as session:
            draft = session.get(Draft, draft_id)
            return draft.current_version if draft else 0

    def get_revision(self, draft_id: str, version: int) -> DraftVersion:
        """获取指定版本"""
        with Session(self.engine) as session:
            if not session.get(Draft, draft_id):
                raise NotFoundError(f"草稿不存在: {draft_id}")

            statement = select(DraftVersion).where(
                DraftVersion.draft_id == draft_id,
                DraftVersion.version == version,
            )
            revision = session.exec(statement).first()
            if not revision:
                raise NotFoundError(f"版本不存在: draft_id={draft_id}, version={version}")
            return revision

    def list_revisions(self, draft_id: str) -> list[DraftVersion]:
        """获取草稿的全部版本，最新的在前"""
        with Session(self.engine) as session:
            if not session.get(Draft, draft_id):
                raise NotFoundError(f"草稿不存在: {draft_id}")

            statement = select(DraftVersion).where(
                DraftVersion.draft_id == draft_id
            ).order_by(DraftVersion.version.desc())
            return list(session.exec(statement).all())


# 全局单例
_version_service: Optional[VersionService] = None


def get_version_service() -> VersionService:
    """获取版本链服务单例"""
    global _version_service
    if _version_service is None:
        _version_service = VersionService()
    return _version_service
