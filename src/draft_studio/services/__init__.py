"""
服务模块
"""
from .draft_service import DraftService, DraftDetail, DraftSummary, get_draft_service
from .version_service import VersionService, RevisionPayload, get_version_service
from .autosave_service import AutosaveService, get_autosave_service
from .revert_service import RevertService, get_revert_service

__all__ = [
    "DraftService",
    "DraftDetail",
    "DraftSummary",
    "get_draft_service",
    "VersionService",
    "RevisionPayload",
    "get_version_service",
    "AutosaveService",
    "get_autosave_service",
    "RevertService",
    "get_revert_service",
]
