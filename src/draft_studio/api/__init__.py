"""
API 路由模块
"""
from fastapi import APIRouter
from .drafts import router as drafts_router
from .versions import router as versions_router
from .autosave import router as autosave_router

# 创建主路由
api_router = APIRouter(prefix="/api")

api_router.include_router(drafts_router)
api_router.include_router(versions_router)
api_router.include_router(autosave_router)

__all__ = ["api_router"]
