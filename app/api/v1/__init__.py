"""API routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, google, users

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(google.router, prefix="/google", tags=["Google"])
api_router.include_router(users.router, prefix="/user", tags=["User Profile"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
