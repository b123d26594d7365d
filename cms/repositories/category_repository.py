from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.models import ArticleCategory, utcnow
from cms.repositories.base import apply_changes, get_by_id, paginate, search_condition

SEARCH_COLUMNS = (ArticleCategory.name_zh, ArticleCategory.name_en, ArticleCategory.slug)


async def find_by_id(db: AsyncSession, category_id: str) -> ArticleCategory | None:
    return await get_by_id(db, ArticleCategory, category_id)


async def find_by_slug(db: AsyncSession, slug: str) -> ArticleCategory | None:
    result = await db.execute(select(ArticleCategory).where(ArticleCategory.slug == slug).limit(1))
    return result.scalar_one_or_none()


async def find_all(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
) -> tuple[list[ArticleCategory], int]:
    conditions = [search_condition(SEARCH_COLUMNS, search)]
    return await paginate(db, ArticleCategory, conditions, page, page_size)


async def create(db: AsyncSession, data: dict) -> ArticleCategory:
    category = ArticleCategory(
        name_zh=data["name_zh"],
        name_en=data["name_en"],
        slug=data["slug"],
        description_zh=data.get("description_zh") or None,
        description_en=data.get("description_en") or None,
        sort_order=data.get("sort_order") or "0",
    )
    db.add(category)
    await db.flush()
    return category


async def update(db: AsyncSession, category: ArticleCategory, changes: dict) -> ArticleCategory:
    apply_changes(category, changes)
    category.updated_at = utcnow()
    await db.flush()
    return category


async def delete(db: AsyncSession, category: ArticleCategory) -> None:
    await db.delete(category)
    await db.flush()
