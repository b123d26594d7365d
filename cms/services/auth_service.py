"""
Auth service — registration, credentials login and password reset.

Login fails closed: a missing user, a user without a password, an
inactive user and a wrong password all produce the same
``UnauthorizedError("Invalid credentials")``.

Reset tokens: at most one live token per email. Issuing a new one
deletes the old ones first (delete, then insert). The two statements are
not serialised across concurrent requests for the same email.
"""
import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from cms.config import settings
from cms.exceptions import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from cms.models import utcnow
from cms.repositories import password_reset_repository, user_repository
from cms.schemas import RegisterRequest, UserCreate
from cms.security import create_access_token, generate_reset_token, hash_password, verify_password
from cms.services import user_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def get_auth_config() -> dict:
    return {
        "allow_registration": settings.ALLOW_REGISTRATION,
        "allow_password_reset": settings.ALLOW_PASSWORD_RESET,
    }


async def register(db: AsyncSession, data: RegisterRequest) -> dict:
    if not settings.ALLOW_REGISTRATION:
        raise ForbiddenError("Registration is currently disabled")
    user = await user_service.create_user(
        db, UserCreate(name=data.name, email=data.email, password=data.password)
    )
    return {"id": user["id"], "name": user["name"], "email": user["email"]}


async def authenticate(db: AsyncSession, email: str, password: str) -> dict:
    """Verify credentials and return a bearer token plus the sanitised user."""
    user = await user_repository.find_by_email(db, email)
    if (
        user is None
        or not user.password
        or not user.is_active
        or not verify_password(password, user.password)
    ):
        logger.info("Failed login attempt for %s", email)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
        "user": await user_service.get_user_by_id(db, user.id),
    }


async def request_password_reset(db: AsyncSession, email: str) -> str | None:
    """
    Issue a reset token for *email* if such a user exists.

    Returns the token (so development builds can echo it) or None. The
    caller answers ``{"success": true}`` either way so account existence
    is not revealed.
    """
    if not settings.ALLOW_PASSWORD_RESET:
        raise ForbiddenError("Password reset is currently disabled")

    if await user_repository.find_by_email(db, email) is None:
        return None

    token = generate_reset_token()
    expires = utcnow() + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)
    await password_reset_repository.delete_for_email(db, email)
    await password_reset_repository.create(db, email=email, token=token, expires=expires)

    # Mail delivery is not wired up; the link is logged for the operator.
    logger.info("Password reset link for %s: %s/reset-password?token=%s", email, settings.APP_URL, token)
    return token


async def reset_password(db: AsyncSession, token: str, password: str) -> dict:
    row = await password_reset_repository.find_valid(db, token)
    if row is None:
        raise BadRequestError("Invalid or expired reset token")

    user = await user_repository.find_by_email(db, row.email)
    if user is None:
        raise NotFoundError("User not found")

    await user_repository.update_password(db, user, hash_password(password))
    await password_reset_repository.delete_token(db, token)
    logger.info("Password reset completed for user %s", user.id)
    return {"success": True}
