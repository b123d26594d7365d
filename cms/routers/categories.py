from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import PaginationParams, get_current_user_id
from cms.schemas import CategoryCreate, CategoryPage, CategoryResponse, CategoryUpdate, SuccessResponse
from cms.services import category_service

router = APIRouter(
    prefix="/api/v1/categories",
    tags=["categories"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("", response_model=CategoryPage)
async def get_categories(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await category_service.get_categories(
        db, pagination.page, pagination.page_size, pagination.search
    )


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category_by_id(category_id: str, db: AsyncSession = Depends(get_db)):
    return await category_service.get_category_by_id(db, category_id)


@router.post("", status_code=201, response_model=CategoryResponse)
async def create_category(data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await category_service.create_category(db, data)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: str, data: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    return await category_service.update_category(db, category_id, data)


@router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(category_id: str, db: AsyncSession = Depends(get_db)):
    return await category_service.delete_category(db, category_id)
