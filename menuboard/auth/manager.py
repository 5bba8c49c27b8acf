import logging
from typing import Optional

from fastapi import Request
from fastapi_users import BaseUserManager, IntegerIDMixin

from menuboard.core.config import settings
from menuboard.models.user import User
from menuboard.utils.email_service import send_password_reset_email

log = logging.getLogger(__name__)


class UserManager(IntegerIDMixin, BaseUserManager[User, int]):
    reset_password_token_secret = settings.auth_secret
    verification_token_secret = settings.auth_secret

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        log.info("User registered: %s", user.email)

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        result = send_password_reset_email(user.email, user.name, token)
        if not result["success"]:
            log.warning("Password reset email for %s not sent: %s", user.email, result["message"])
