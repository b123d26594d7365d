from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.models import PasswordResetToken, utcnow


async def delete_for_email(db: AsyncSession, email: str) -> None:
    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.email == email))


async def create(db: AsyncSession, email: str, token: str, expires: datetime) -> PasswordResetToken:
    row = PasswordResetToken(email=email, token=token, expires=expires)
    db.add(row)
    await db.flush()
    return row


async def find_valid(db: AsyncSession, token: str) -> PasswordResetToken | None:
    """The token row if it exists and has not expired yet."""
    q = (
        select(PasswordResetToken)
        .where(PasswordResetToken.token == token, PasswordResetToken.expires > utcnow())
        .limit(1)
    )
    result = await db.execute(q)
    return result.scalar_one_or_none()


async def delete_token(db: AsyncSession, token: str) -> None:
    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.token == token))
