from datetime import date, datetime, time, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.models import User, utcnow
from cms.repositories.base import apply_changes, get_by_id, paginate, search_condition

SEARCH_COLUMNS = (User.name, User.email)


async def find_by_id(db: AsyncSession, user_id: str) -> User | None:
    return await get_by_id(db, User, user_id)


async def find_by_email(db: AsyncSession, email: str) -> User | None:
    """Exact, case-sensitive email lookup."""
    result = await db.execute(select(User).where(User.email == email).limit(1))
    return result.scalar_one_or_none()


async def find_all(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    status: str = "all",
    date_from: date | None = None,
    date_to: date | None = None,
) -> tuple[list[User], int]:
    """
    Filtered page of users, newest first.

    *status* is ``"all"``, ``"active"`` or ``"inactive"``. The date range
    is inclusive on both ends: *date_to* covers its whole day.
    """
    conditions = [search_condition(SEARCH_COLUMNS, search)]
    if status in ("active", "inactive"):
        conditions.append(User.is_active.is_(status == "active"))
    if date_from is not None:
        conditions.append(User.created_at >= datetime.combine(date_from, time.min, tzinfo=timezone.utc))
    if date_to is not None:
        conditions.append(User.created_at <= datetime.combine(date_to, time.max, tzinfo=timezone.utc))
    return await paginate(db, User, conditions, page, page_size)


async def create(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    is_active: bool = True,
) -> User:
    user = User(name=name, email=email, password=password, is_active=is_active)
    db.add(user)
    await db.flush()
    return user


async def update(db: AsyncSession, user: User, changes: dict) -> User:
    apply_changes(user, changes)
    user.updated_at = utcnow()
    await db.flush()
    return user


async def update_status(db: AsyncSession, user: User, is_active: bool) -> User:
    return await update(db, user, {"is_active": is_active})


async def update_password(db: AsyncSession, user: User, hashed_password: str) -> None:
    await update(db, user, {"password": hashed_password})


async def delete(db: AsyncSession, user: User) -> None:
    await db.delete(user)
    await db.flush()
