"""
草稿管理 API 路由
"""
from typing import Any, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from draft_studio.core import get_logger
from draft_studio.core.exceptions import NotFoundError, ValidationError
from draft_studio.services.draft_service import get_draft_service
from .schemas import DraftListResponse, DraftResponse, to_draft_response

logger = get_logger(__name__)

router = APIRouter(prefix="/drafts", tags=["草稿管理"])

# 服务实例
draft_service = get_draft_service()


# ============ 请求模型 ============

class CreateDraftRequest(BaseModel):
    """创建草稿请求"""
    title: str
    workspace_id: str
    created_by_id: str
    content: Optional[Any] = None
    change_summary: Optional[str] = None


class UpdateDraftRequest(BaseModel):
    """修改草稿元数据请求"""
    title: Optional[str] = None
    status: Optional[str] = None


# ============ API 接口 ============

@router.post("", response_model=DraftResponse)
async def create_draft(request: CreateDraftRequest):
    """创建草稿（同时生成第 1 版）"""
    try:
        detail = draft_service.create_draft(
            workspace_id=request.workspace_id,
            created_by_id=request.created_by_id,
            title=request.title,
            content=request.content,
            change_summary=request.change_summary,
        )
        return to_draft_response(detail.draft, detail.latest_version)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"创建草稿失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"创建草稿失败: {str(e)}")


@router.get("", response_model=DraftListResponse)
async def list_drafts(workspace_id: str):
    """获取工作空间内的草稿列表"""
    summaries = draft_service.list_drafts(workspace_id)
    return DraftListResponse(
        items=[to_draft_response(s.draft, version_count=s.version_count) for s in summaries],
        total=len(summaries),
    )


@router.get("/{draft_id}", response_model=DraftResponse)
async def get_draft(draft_id: str):
    """获取草稿详情（含最新版本）"""
    try:
        detail = draft_service.get_draft(draft_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return to_draft_response(detail.draft, detail.latest_version)


@router.patch("/{draft_id}", response_model=DraftResponse)
async def update_draft(draft_id: str, request: UpdateDraftRequest):
    """修改草稿标题或状态，不产生新版本"""
    try:
        detail = draft_service.update_metadata(
            draft_id,
            title=request.title,
            status=request.status,
        )
        return to_draft_response(detail.draft, detail.latest_version)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{draft_id}")
async def delete_draft(draft_id: str):
    """删除草稿及全部版本"""
    try:
        draft_service.delete_draft(draft_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"status": "ok", "message": "删除成功"}
