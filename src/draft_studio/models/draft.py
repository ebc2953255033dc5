"""
草稿数据模型
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import SQLModel, Field


# 未提供初始内容时使用的空文档
DEFAULT_DOCUMENT = {"type": "doc", "content": []}


def utc_now() -> datetime:
    """带时区的当前 UTC 时间"""
    return datetime.now(timezone.utc)


class DraftStatus(str, Enum):
    """草稿生命周期状态"""
    DRAFT = "DRAFT"
    REVIEW = "REVIEW"
    READY = "READY"
    PUBLISHED = "PUBLISHED"


class Draft(SQLModel, table=True):
    """
    草稿模型

    current_version 始终等于版本链中最大的版本号；
    working_copy 是自动保存的未提交内容，不属于版本链
    """
    __tablename__ = "drafts"

    # 主键（不透明字符串）
    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        primary_key=True,
        max_length=32,
    )

    # 外部引用，核心层不做校验
    workspace_id: str = Field(index=True, description="所属工作空间ID")
    created_by_id: str = Field(description="创建者ID")

    title: str = Field(max_length=255, description="标题")
    status: DraftStatus = Field(default=DraftStatus.DRAFT, description="状态")

    # 版本指针
    current_version: int = Field(default=1, ge=1, description="最新已提交版本号")

    # 工作副本（自动保存）
    working_copy: Optional[Any] = Field(
        default=None,
        sa_column=Column(JSON(none_as_null=True), nullable=True),
        description="自动保存的未提交内容",
    )
    working_copy_saved_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        description="工作副本保存时间",
    )
    # 每次写入或丢弃工作副本都递增，提交时据此判断工作副本是否被改动
    working_copy_seq: int = Field(default=0, description="工作副本修改序号")

    # 时间戳
    created_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), description="创建时间"
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), description="更新时间"
    )

    @property
    def has_working_copy(self) -> bool:
        return self.working_copy_saved_at is not None
