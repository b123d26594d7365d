from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import CurrentUserId, PaginationParams, get_current_user_id
from cms.schemas import (
    PasswordSet,
    SuccessResponse,
    UserCreate,
    UserPage,
    UserResponse,
    UserStatusFilter,
    UserStatusResponse,
    UserStatusUpdate,
    UserUpdate,
)
from cms.services import user_service

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("", response_model=UserPage)
async def get_users(
    pagination: PaginationParams = Depends(),
    status: UserStatusFilter = Query("all"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_users(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        search=pagination.search,
        status=status,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_by_id(user_id: str, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user_by_id(db, user_id)


@router.post("", status_code=201, response_model=UserResponse)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.create_user(db, data)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await user_service.update_user(db, user_id, data)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(user_id: str, acting_user_id: CurrentUserId, db: AsyncSession = Depends(get_db)):
    return await user_service.delete_user(db, user_id, acting_user_id)


@router.post("/{user_id}/status", response_model=UserStatusResponse)
async def toggle_user_status(
    user_id: str,
    data: UserStatusUpdate,
    acting_user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
):
    return await user_service.toggle_user_status(db, user_id, data.is_active, acting_user_id)


@router.post("/{user_id}/password", response_model=SuccessResponse)
async def change_user_password(user_id: str, data: PasswordSet, db: AsyncSession = Depends(get_db)):
    return await user_service.change_user_password(db, user_id, data.password)
