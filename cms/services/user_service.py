"""
User service — business rules for the User aggregate.

Password hashes never leave this module: every public function returns
the sanitised dict produced by ``_user_to_dict``.

Self-protection rules (no self delete, no self deactivation) take the
acting user's id explicitly and are checked before the target is even
looked up, so they hold whether or not the target exists.
"""
import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.exceptions import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from cms.models import User
from cms.repositories import user_repository
from cms.schemas import CurrentUserUpdate, UserCreate, UserUpdate
from cms.security import hash_password, verify_password
from cms.services.common import isoformat, page_envelope

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "is_active": user.is_active,
        "created_at": isoformat(user.created_at),
        "updated_at": isoformat(user.updated_at),
    }


async def _get_or_404(db: AsyncSession, user_id: str) -> User:
    user = await user_repository.find_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_user_by_id(db: AsyncSession, user_id: str) -> dict:
    return _user_to_dict(await _get_or_404(db, user_id))


async def get_users(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    status: str = "all",
    date_from: date | None = None,
    date_to: date | None = None,
) -> dict:
    users, total = await user_repository.find_all(
        db,
        page=page,
        page_size=page_size,
        search=search,
        status=status,
        date_from=date_from,
        date_to=date_to,
    )
    return page_envelope([_user_to_dict(u) for u in users], total, page, page_size)


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Create an active user with a bcrypt-hashed password.

    Raises ConflictError when the email (exact match) is taken. The
    unique constraint backs the pre-check up for concurrent inserts.
    """
    if await user_repository.find_by_email(db, data.email) is not None:
        raise ConflictError("User already exists")
    try:
        user = await user_repository.create(
            db,
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
        )
    except IntegrityError:
        raise ConflictError("User already exists")
    logger.info("User created: %s", user.id)
    return _user_to_dict(user)


async def update_user(db: AsyncSession, user_id: str, data: UserUpdate) -> dict:
    user = await _get_or_404(db, user_id)
    changes = {}
    if data.name:
        changes["name"] = data.name
    if data.password:
        changes["password"] = hash_password(data.password)
    user = await user_repository.update(db, user, changes)
    return _user_to_dict(user)


async def delete_user(db: AsyncSession, user_id: str, acting_user_id: str | None) -> dict:
    if acting_user_id is not None and acting_user_id == user_id:
        raise ForbiddenError("Cannot delete your own account")
    user = await _get_or_404(db, user_id)
    await user_repository.delete(db, user)
    logger.info("User %s deleted by %s", user_id, acting_user_id)
    return {"success": True}


async def toggle_user_status(
    db: AsyncSession,
    user_id: str,
    is_active: bool,
    acting_user_id: str | None,
) -> dict:
    if acting_user_id is not None and acting_user_id == user_id and not is_active:
        raise ForbiddenError("Cannot disable your own account")
    user = await _get_or_404(db, user_id)
    user = await user_repository.update_status(db, user, is_active)
    logger.info("User %s is_active=%s (by %s)", user_id, is_active, acting_user_id)
    return {"id": user.id, "is_active": user.is_active}


async def change_user_password(db: AsyncSession, user_id: str, password: str) -> dict:
    """Administrative password reset; no knowledge of the old password needed."""
    user = await _get_or_404(db, user_id)
    await user_repository.update_password(db, user, hash_password(password))
    logger.info("Password changed for user %s", user_id)
    return {"success": True}


async def update_current_user(db: AsyncSession, user_id: str, data: CurrentUserUpdate) -> dict:
    user = await _get_or_404(db, user_id)
    changes = {"name": data.name} if data.name else {}
    user = await user_repository.update(db, user, changes)
    return _user_to_dict(user)


async def change_current_user_password(
    db: AsyncSession,
    user_id: str,
    current_password: str,
    new_password: str,
) -> dict:
    user = await _get_or_404(db, user_id)
    if not verify_password(current_password, user.password):
        raise UnauthorizedError("Current password is incorrect")
    await user_repository.update_password(db, user, hash_password(new_password))
    logger.info("User %s changed their password", user_id)
    return {"success": True}
