"""API router registration."""

from fastapi import APIRouter

from . import images, system

router = APIRouter(prefix="/api")

# Include all routers
router.include_router(images.router)
router.include_router(system.router)
