"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from nowen_note.backend.api.v1.endpoints import (
    auth,
    export,
    me,
    notebooks,
    notes,
    search,
    settings,
    tags,
    tasks,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(me.router, prefix="/me", tags=["auth"])
router.include_router(notebooks.router, prefix="/notebooks", tags=["notebooks"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(search.router, prefix="/search", tags=["search"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(settings.router, prefix="/settings", tags=["settings"])
router.include_router(export.router, prefix="/export", tags=["export"])
