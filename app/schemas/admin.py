"""Admin login schemas."""

from app.schemas.common import BaseSchema


class AdminLoginRequest(BaseSchema):
    """Admin login request."""

    email: str
    password: str


class AdminLoginData(BaseSchema):
    """Payload of a successful login."""

    email: str


class AdminLoginResponse(BaseSchema):
    """Admin login response."""

    success: bool = True
    message: str = "Login successful"
    data: AdminLoginData
