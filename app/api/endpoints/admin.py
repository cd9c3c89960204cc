"""Admin endpoints."""

from fastapi import APIRouter

from app.core.config import get_settings
from app.schemas.admin import AdminLoginRequest, AdminLoginResponse
from app.services.auth import AuthService

router = APIRouter()


@router.post("/login", response_model=AdminLoginResponse)
def admin_login(request: AdminLoginRequest):
    """Check admin credentials. 200 on match, 401 otherwise."""
    return AuthService(get_settings()).login(request)
