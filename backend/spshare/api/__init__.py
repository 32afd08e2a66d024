from fastapi import APIRouter

from .auth import router as auth_router
from .groups import router as groups_router
from .items import router as items_router
from .limits import router as limits_router
from .requests import router as requests_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])
api_router.include_router(groups_router, prefix="/groups", tags=["groups"])
api_router.include_router(items_router, prefix="/items", tags=["items"])
api_router.include_router(limits_router, prefix="/limits", tags=["limits"])
api_router.include_router(requests_router, prefix="/requests", tags=["requests"])
