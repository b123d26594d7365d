"""
Article service — business logic for the bilingual Article aggregate.

Design notes
------------
- Slugs are supplied by the editor, never derived: they must match
  ``^[a-z0-9-]+$`` and be unique across all articles.
- ``is_published`` and ``published_at`` always move together. Publishing
  stamps the timestamp, unpublishing clears it, and both land in the same
  UPDATE statement.
- Every read carries the joined category names so list and detail views
  look the same.
- Service functions flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency in the router layer.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from cms.exceptions import ConflictError, NotFoundError, ValidationError
from cms.models import Article, utcnow
from cms.repositories import article_repository, category_repository
from cms.schemas import ArticleCreate, ArticleUpdate
from cms.services.common import (
    blank_to_none,
    drop_blank,
    isoformat,
    page_envelope,
    validate_slug,
)

_REQUIRED_TEXT = ("title_zh", "title_en", "content_zh", "content_en", "slug")
_OPTIONAL_TEXT = (
    "category_id",
    "meta_title_zh",
    "meta_title_en",
    "meta_description_zh",
    "meta_description_en",
    "meta_keywords_zh",
    "meta_keywords_en",
    "og_image",
)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _article_to_dict(article: Article) -> dict:
    category = article.category
    return {
        "id": article.id,
        "title_zh": article.title_zh,
        "title_en": article.title_en,
        "content_zh": article.content_zh,
        "content_en": article.content_en,
        "slug": article.slug,
        "category_id": article.category_id,
        "category_name_zh": category.name_zh if category else None,
        "category_name_en": category.name_en if category else None,
        "author_id": article.author_id,
        "is_published": article.is_published,
        "published_at": isoformat(article.published_at),
        "meta_title_zh": article.meta_title_zh,
        "meta_title_en": article.meta_title_en,
        "meta_description_zh": article.meta_description_zh,
        "meta_description_en": article.meta_description_en,
        "meta_keywords_zh": article.meta_keywords_zh,
        "meta_keywords_en": article.meta_keywords_en,
        "og_image": article.og_image,
        "created_at": isoformat(article.created_at),
        "updated_at": isoformat(article.updated_at),
    }


# ---------------------------------------------------------------------------
# Rule helpers
# ---------------------------------------------------------------------------

async def _get_or_404(db: AsyncSession, article_id: str) -> Article:
    article = await article_repository.find_by_id(db, article_id)
    if article is None:
        raise NotFoundError("Article not found")
    return article


async def _ensure_slug_free(db: AsyncSession, slug: str, own_id: str | None = None) -> None:
    existing = await article_repository.find_by_slug(db, slug)
    if existing is not None and existing.id != own_id:
        raise ConflictError("Slug already in use")


async def _ensure_category_exists(db: AsyncSession, category_id: str | None) -> None:
    if category_id and await category_repository.find_by_id(db, category_id) is None:
        raise NotFoundError("Category not found")


def _publish_fields(is_published: bool, current: Article | None = None) -> dict:
    """``is_published`` plus the matching ``published_at`` value."""
    if not is_published:
        return {"is_published": False, "published_at": None}
    already = current.published_at if current is not None and current.is_published else None
    return {"is_published": True, "published_at": already or utcnow()}


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_article_by_id(db: AsyncSession, article_id: str) -> dict:
    return _article_to_dict(await _get_or_404(db, article_id))


async def get_article_by_slug(db: AsyncSession, slug: str, published_only: bool = False) -> dict:
    """Drafts are reported as missing when *published_only* is set."""
    article = await article_repository.find_by_slug(db, slug)
    if article is None or (published_only and not article.is_published):
        raise NotFoundError("Article not found")
    return _article_to_dict(article)


async def get_articles(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    category_id: str | None = None,
    is_published: bool | None = None,
) -> dict:
    """
    Paginated article list, newest first.

    Two SQL statements are issued: a COUNT over the filtered set and the
    page SELECT with the category joined in.
    """
    articles, total = await article_repository.find_all(
        db,
        page=page,
        page_size=page_size,
        search=search,
        category_id=category_id,
        is_published=is_published,
    )
    return page_envelope([_article_to_dict(a) for a in articles], total, page, page_size)


async def get_published_articles(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    category_id: str | None = None,
) -> dict:
    """Public feed: the published filter is not up to the caller."""
    return await get_articles(
        db,
        page=page,
        page_size=page_size,
        search=search,
        category_id=category_id,
        is_published=True,
    )


async def create_article(db: AsyncSession, data: ArticleCreate, author_id: str | None = None) -> dict:
    """
    Create a new article, a draft unless ``is_published`` is set.

    Raises ValidationError for missing text or a malformed slug and
    ConflictError when the slug is already used.
    """
    if not all(getattr(data, field) for field in _REQUIRED_TEXT):
        raise ValidationError("Title, content, and slug are required")
    validate_slug(data.slug)
    await _ensure_slug_free(db, data.slug)

    values = blank_to_none(data.model_dump(), _OPTIONAL_TEXT)
    await _ensure_category_exists(db, values["category_id"])
    values.update(_publish_fields(data.is_published))
    values["author_id"] = author_id

    article = await article_repository.create(db, values)
    return _article_to_dict(article)


async def update_article(db: AsyncSession, article_id: str, data: ArticleUpdate) -> dict:
    """
    Partially update an article. Only fields present in the payload are
    touched (``model_dump(exclude_unset=True)``); ``""`` clears the
    optional SEO fields and the category.
    """
    article = await _get_or_404(db, article_id)

    changes = drop_blank(data.model_dump(exclude_unset=True), _REQUIRED_TEXT)
    changes = blank_to_none(changes, _OPTIONAL_TEXT)

    if "slug" in changes:
        validate_slug(changes["slug"])
        await _ensure_slug_free(db, changes["slug"], own_id=article.id)
    if "category_id" in changes:
        await _ensure_category_exists(db, changes["category_id"])

    is_published = changes.pop("is_published", None)
    if is_published is not None:
        changes.update(_publish_fields(is_published, current=article))

    article = await article_repository.update(db, article, changes)
    return _article_to_dict(article)


async def delete_article(db: AsyncSession, article_id: str) -> dict:
    article = await _get_or_404(db, article_id)
    await article_repository.delete(db, article)
    return {"success": True}


async def toggle_publish_status(db: AsyncSession, article_id: str) -> dict:
    """Flip ``is_published``; ``published_at`` is set or cleared in the same UPDATE."""
    article = await _get_or_404(db, article_id)
    article = await article_repository.update(db, article, _publish_fields(not article.is_published))
    return _article_to_dict(article)
