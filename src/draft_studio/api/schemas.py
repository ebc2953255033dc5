"""
公共响应模型及转换函数
"""
from typing import Any, Optional
from pydantic import BaseModel

from draft_studio.models import Draft, DraftStatus, DraftVersion


class VersionResponse(BaseModel):
    """版本响应"""
    id: int
    draft_id: str
    version: int
    content: Any
    content_html: Optional[str]
    content_markdown: Optional[str]
    change_summary: Optional[str]
    created_by_id: str
    created_at: str


class DraftResponse(BaseModel):
    """草稿响应"""
    id: str
    workspace_id: str
    created_by_id: str
    title: str
    status: str
    current_version: int
    working_copy: Optional[Any]
    working_copy_saved_at: Optional[str]
    created_at: str
    updated_at: str
    latest_version: Optional[VersionResponse] = None
    version_count: Optional[int] = None


class DraftListResponse(BaseModel):
    """草稿列表响应"""
    items: list[DraftResponse]
    total: int


def to_version_response(version: DraftVersion) -> VersionResponse:
    return VersionResponse(
        id=version.id,
        draft_id=version.draft_id,
        version=version.version,
        content=version.content,
        content_html=version.content_html,
        content_markdown=version.content_markdown,
        change_summary=version.change_summary,
        created_by_id=version.created_by_id,
        created_at=version.created_at.isoformat(),
    )


def to_draft_response(
    draft: Draft,
    latest_version: Optional[DraftVersion] = None,
    version_count: Optional[int] = None,
) -> DraftResponse:
    saved_at = draft.working_copy_saved_at
    return DraftResponse(
        id=draft.id,
        workspace_id=draft.workspace_id,
        created_by_id=draft.created_by_id,
        title=draft.title,
        status=DraftStatus(draft.status).value,
        current_version=draft.current_version,
        working_copy=draft.working_copy,
        working_copy_saved_at=saved_at.isoformat() if saved_at else None,
        created_at=draft.created_at.isoformat(),
        updated_at=draft.updated_at.isoformat(),
        latest_version=to_version_response(latest_version) if latest_version else None,
        version_count=version_count,
    )
