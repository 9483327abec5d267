"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, health, history

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(history.router, prefix="/history", tags=["history"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
