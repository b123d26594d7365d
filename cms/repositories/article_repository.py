"""
Article repository.

Every read joins the category (``joinedload``) so callers can expose
``category_name_zh`` / ``category_name_en`` without a second query per row.
Reads use ``populate_existing`` because a row already in the identity map
may carry a stale ``category`` after its ``category_id`` changed.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from cms.models import Article, utcnow
from cms.repositories.base import apply_changes, paginate, search_condition

SEARCH_COLUMNS = (Article.title_zh, Article.title_en, Article.slug)

_WITH_CATEGORY = (joinedload(Article.category),)


async def _find_one(db: AsyncSession, condition) -> Article | None:
    q = (
        select(Article)
        .where(condition)
        .options(*_WITH_CATEGORY)
        .execution_options(populate_existing=True)
        .limit(1)
    )
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def find_by_id(db: AsyncSession, article_id: str) -> Article | None:
    return await _find_one(db, Article.id == article_id)


async def find_by_slug(db: AsyncSession, slug: str) -> Article | None:
    return await _find_one(db, Article.slug == slug)


async def find_all(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    category_id: str | None = None,
    is_published: bool | None = None,
) -> tuple[list[Article], int]:
    conditions = [search_condition(SEARCH_COLUMNS, search)]
    if category_id:
        conditions.append(Article.category_id == category_id)
    if is_published is not None:
        conditions.append(Article.is_published.is_(is_published))
    return await paginate(db, Article, conditions, page, page_size, options=_WITH_CATEGORY)


async def create(db: AsyncSession, data: dict) -> Article:
    article = Article(**data)
    db.add(article)
    await db.flush()
    return await find_by_id(db, article.id)


async def update(db: AsyncSession, article: Article, changes: dict) -> Article:
    """Apply *changes* in a single UPDATE and return the re-read row."""
    apply_changes(article, changes)
    article.updated_at = utcnow()
    await db.flush()
    return await find_by_id(db, article.id)


async def delete(db: AsyncSession, article: Article) -> None:
    await db.delete(article)
    await db.flush()
