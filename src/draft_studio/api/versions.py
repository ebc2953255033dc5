"""
版本历史 API 路由
"""
from typing import Any, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from draft_studio.core import get_logger
from draft_studio.core.exceptions import ConcurrencyConflictError, NotFoundError
from draft_studio.services.revert_service import get_revert_service
from draft_studio.services.version_service import get_version_service
from .schemas import VersionResponse, to_version_response

logger = get_logger(__name__)

router = APIRouter(prefix="/drafts", tags=["版本历史"])

# 服务实例
version_service = get_version_service()
revert_service = get_revert_service()


# ============ 请求模型 ============

class CreateVersionRequest(BaseModel):
    """手动保存新版本请求"""
    content: Any
    created_by_id: str
    content_html: Optional[str] = None
    content_markdown: Optional[str] = None
    change_summary: Optional[str] = None


class RevertRequest(BaseModel):
    """回滚请求"""
    created_by_id: str


# ============ API 接口 ============

@router.get("/{draft_id}/versions", response_model=list[VersionResponse])
async def list_versions(draft_id: str):
    """获取版本历史，最新的在前"""
    try:
        revisions = version_service.list_revisions(draft_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [to_version_response(r) for r in revisions]


@router.get("/{draft_id}/versions/{version}", response_model=VersionResponse)
async def get_version(draft_id: str, version: int):
    """获取指定版本"""
    try:
        revision = version_service.get_revision(draft_id, version)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return to_version_response(revision)


@router.post("/{draft_id}/versions", response_model=VersionResponse)
async def create_version(draft_id: str, request: CreateVersionRequest):
    """手动保存：以提交的内容追加新版本"""
    if request.content is None:
        raise HTTPException(status_code=400, detail="版本内容不能为空")

    try:
        revision = version_service.append_revision(
            draft_id,
            content=request.content,
            author_id=request.created_by_id,
            change_summary=request.change_summary,
            content_html=request.content_html,
            content_markdown=request.content_markdown,
        )
        return to_version_response(revision)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{draft_id}/revert/{version}", response_model=VersionResponse)
async def revert_to_version(draft_id: str, version: int, request: RevertRequest):
    """回滚到指定版本（追加新版本，不改写历史）"""
    try:
        revision = revert_service.revert_to_version(
            draft_id,
            target_version=version,
            author_id=request.created_by_id,
        )
        return to_version_response(revision)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=503, detail=str(e))
