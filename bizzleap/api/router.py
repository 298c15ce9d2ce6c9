"""
API router.

Aggregates all endpoints.
"""

from fastapi import APIRouter

from bizzleap.api.endpoints import auth, health, users

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(
    auth.router, prefix="/auth", tags=["Authentication"]
)
api_router.include_router(
    users.router, prefix="/user", tags=["User profile"]
)
