"""
Category service — flat bilingual taxonomy for articles.

Deleting a category never deletes articles: the foreign key nulls
``articles.category_id`` instead.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from cms.exceptions import ConflictError, NotFoundError, ValidationError
from cms.models import ArticleCategory
from cms.repositories import category_repository
from cms.schemas import CategoryCreate, CategoryUpdate
from cms.services.common import (
    blank_to_none,
    drop_blank,
    isoformat,
    page_envelope,
    validate_slug,
)

_REQUIRED_TEXT = ("name_zh", "name_en", "slug", "sort_order")
_OPTIONAL_TEXT = ("description_zh", "description_en")


def _category_to_dict(category: ArticleCategory) -> dict:
    return {
        "id": category.id,
        "name_zh": category.name_zh,
        "name_en": category.name_en,
        "slug": category.slug,
        "description_zh": category.description_zh,
        "description_en": category.description_en,
        "sort_order": category.sort_order,
        "created_at": isoformat(category.created_at),
        "updated_at": isoformat(category.updated_at),
    }


async def _get_or_404(db: AsyncSession, category_id: str) -> ArticleCategory:
    category = await category_repository.find_by_id(db, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def _ensure_slug_free(db: AsyncSession, slug: str, own_id: str | None = None) -> None:
    existing = await category_repository.find_by_slug(db, slug)
    if existing is not None and existing.id != own_id:
        raise ConflictError("Slug already in use")


async def get_category_by_id(db: AsyncSession, category_id: str) -> dict:
    return _category_to_dict(await _get_or_404(db, category_id))


async def get_categories(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
) -> dict:
    categories, total = await category_repository.find_all(
        db, page=page, page_size=page_size, search=search
    )
    return page_envelope([_category_to_dict(c) for c in categories], total, page, page_size)


async def create_category(db: AsyncSession, data: CategoryCreate) -> dict:
    if not data.name_zh or not data.name_en or not data.slug:
        raise ValidationError("Name and slug are required")
    validate_slug(data.slug)
    await _ensure_slug_free(db, data.slug)
    category = await category_repository.create(db, data.model_dump())
    return _category_to_dict(category)


async def update_category(db: AsyncSession, category_id: str, data: CategoryUpdate) -> dict:
    category = await _get_or_404(db, category_id)
    changes = drop_blank(data.model_dump(exclude_unset=True), _REQUIRED_TEXT)
    changes = blank_to_none(changes, _OPTIONAL_TEXT)
    if "slug" in changes:
        validate_slug(changes["slug"])
        await _ensure_slug_free(db, changes["slug"], own_id=category.id)
    category = await category_repository.update(db, category, changes)
    return _category_to_dict(category)


async def delete_category(db: AsyncSession, category_id: str) -> dict:
    category = await _get_or_404(db, category_id)
    await category_repository.delete(db, category)
    return {"success": True}
