"""FastAPI API endpoints under /api.

Endpoint groups: settings, sessions (lifecycle, turn clock, export/import,
chronicle), features (details + lore history), tree (grouped view + search).
Each session's child resources are nested under /api/sessions/{slug}/.
"""

from fastapi import APIRouter

from .features import router as features_router
from .sessions import router as sessions_router
from .settings import router as settings_router
from .tree import router as tree_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(sessions_router)
router.include_router(features_router)
router.include_router(tree_router)
