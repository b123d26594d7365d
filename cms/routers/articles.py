from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import CurrentUserId, PaginationParams, get_current_user_id
from cms.schemas import ArticleCreate, ArticlePage, ArticleResponse, ArticleUpdate, SuccessResponse
from cms.services import article_service

router = APIRouter(
    prefix="/api/v1/articles",
    tags=["articles"],
    dependencies=[Depends(get_current_user_id)],
)

# Anonymous readers: published articles only.
public_router = APIRouter(prefix="/api/v1/public/articles", tags=["public"])


@router.get("", response_model=ArticlePage)
async def get_articles(
    pagination: PaginationParams = Depends(),
    category_id: str | None = Query(None),
    is_published: bool | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        search=pagination.search,
        category_id=category_id,
        is_published=is_published,
    )


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article_by_id(article_id: str, db: AsyncSession = Depends(get_db)):
    return await article_service.get_article_by_id(db, article_id)


@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(data: ArticleCreate, author_id: CurrentUserId, db: AsyncSession = Depends(get_db)):
    return await article_service.create_article(db, data, author_id=author_id)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(article_id: str, data: ArticleUpdate, db: AsyncSession = Depends(get_db)):
    return await article_service.update_article(db, article_id, data)


@router.delete("/{article_id}", response_model=SuccessResponse)
async def delete_article(article_id: str, db: AsyncSession = Depends(get_db)):
    return await article_service.delete_article(db, article_id)


@router.post("/{article_id}/publish", response_model=ArticleResponse)
async def toggle_article_publish_status(article_id: str, db: AsyncSession = Depends(get_db)):
    return await article_service.toggle_publish_status(db, article_id)


@public_router.get("", response_model=ArticlePage)
async def get_published_articles(
    pagination: PaginationParams = Depends(),
    category_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_published_articles(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        search=pagination.search,
        category_id=category_id,
    )


@public_router.get("/{slug}", response_model=ArticleResponse)
async def get_article_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    return await article_service.get_article_by_slug(db, slug, published_only=True)
