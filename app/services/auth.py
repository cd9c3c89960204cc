"""Admin authentication service."""

import logging
import secrets

from app.core.config import Settings
from app.core.exceptions import AuthenticationError
from app.schemas.admin import AdminLoginData, AdminLoginRequest, AdminLoginResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Checks admin credentials against the configured pair."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def login(self, request: AdminLoginRequest) -> AdminLoginResponse:
        """Plain equality check against ADMIN_EMAIL / ADMIN_PASSWORD."""
        expected_email = self.settings.ADMIN_EMAIL
        expected_password = self.settings.ADMIN_PASSWORD
        if not expected_email or not expected_password:
            logger.warning("Admin login attempted but no admin credentials are configured")
            raise AuthenticationError()

        email_ok = secrets.compare_digest(request.email.encode(), expected_email.encode())
        password_ok = secrets.compare_digest(request.password.encode(), expected_password.encode())
        if not (email_ok and password_ok):
            logger.info("Rejected admin login for %s", request.email)
            raise AuthenticationError()

        return AdminLoginResponse(data=AdminLoginData(email=request.email))
