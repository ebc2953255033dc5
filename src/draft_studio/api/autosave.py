"""
工作副本（自动保存）API 路由
"""
from typing import Any, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from draft_studio.core import get_logger
from draft_studio.core.exceptions import (
    ConcurrencyConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from draft_studio.services.autosave_service import get_autosave_service
from .schemas import DraftResponse, VersionResponse, to_draft_response, to_version_response

logger = get_logger(__name__)

router = APIRouter(prefix="/drafts", tags=["自动保存"])

# 服务实例
autosave_service = get_autosave_service()


# ============ 请求模型 ============

class SaveWorkingCopyRequest(BaseModel):
    """自动保存请求"""
    content: Any


class CommitWorkingCopyRequest(BaseModel):
    """提交工作副本请求"""
    created_by_id: str
    change_summary: Optional[str] = None


# ============ API 接口 ============

@router.patch("/{draft_id}/temp", response_model=DraftResponse)
async def save_working_copy(draft_id: str, request: SaveWorkingCopyRequest):
    """覆盖写入工作副本"""
    try:
        draft = autosave_service.save_working_copy(draft_id, request.content)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return to_draft_response(draft)


@router.delete("/{draft_id}/temp", response_model=DraftResponse)
async def discard_working_copy(draft_id: str):
    """丢弃工作副本"""
    try:
        draft = autosave_service.discard_working_copy(draft_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return to_draft_response(draft)


@router.post("/{draft_id}/temp/commit", response_model=VersionResponse)
async def commit_working_copy(draft_id: str, request: CommitWorkingCopyRequest):
    """将工作副本提交为新版本"""
    try:
        revision = autosave_service.commit_working_copy(
            draft_id,
            author_id=request.created_by_id,
            change_summary=request.change_summary,
        )
        return to_version_response(revision)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ConcurrencyConflictError as e:
        logger.warning(f"提交工作副本冲突: {e}")
        raise HTTPException(status_code=503, detail=str(e))
