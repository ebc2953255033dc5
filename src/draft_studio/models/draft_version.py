"""
草稿版本数据模型
"""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlmodel import SQLModel, Field

from .draft import utc_now


class DraftVersion(SQLModel, table=True):
    """
    草稿版本模型

    不可变的内容快照，(draft_id, version) 唯一，版本号从 1 开始连续递增。
    只能通过 VersionService 创建，随草稿一起级联删除
    """
    __tablename__ = "draft_versions"
    __table_args__ = (
        UniqueConstraint("draft_id", "version", name="uq_draft_versions_draft_version"),
    )

    # 主键
    id: Optional[int] = Field(default=None, primary_key=True)

    # 关联草稿
    draft_id: str = Field(
        sa_column=Column(
            String(32),
            ForeignKey("drafts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="所属草稿ID",
    )

    version: int = Field(ge=1, description="版本号")

    # 内容（原样存储，不解析内部结构）
    content: Any = Field(sa_column=Column(JSON, nullable=False), description="结构化内容")
    content_html: Optional[str] = Field(default=None, description="HTML 渲染结果")
    content_markdown: Optional[str] = Field(default=None, description="Markdown 渲染结果")

    change_summary: Optional[str] = Field(default=None, description="变更说明")

    created_by_id: str = Field(description="作者ID")
    created_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), description="创建时间"
    )
