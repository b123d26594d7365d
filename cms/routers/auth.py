from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cms.config import settings
from cms.database import get_db
from cms.dependencies import CurrentUserId
from cms.schemas import (
    AuthConfigResponse,
    CurrentUserUpdate,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    PasswordChange,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    SuccessResponse,
    UserResponse,
)
from cms.services import auth_service, user_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.get("/config", response_model=AuthConfigResponse)
async def get_auth_config():
    return auth_service.get_auth_config()


@router.post("/register", status_code=201, response_model=RegisterResponse)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    return await auth_service.register(db, data)


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await auth_service.authenticate(db, data.email, data.password)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(data: ForgotPasswordRequest, db: AsyncSession = Depends(get_db)):
    token = await auth_service.request_password_reset(db, data.email)
    if settings.APP_ENV == "development":
        return {"success": True, "reset_token": token}
    return {"success": True}


@router.post("/reset-password", response_model=SuccessResponse)
async def reset_password(data: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    return await auth_service.reset_password(db, data.token, data.password)


@router.get("/me", response_model=UserResponse)
async def get_current_user(user_id: CurrentUserId, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user_by_id(db, user_id)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    data: CurrentUserUpdate,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_current_user(db, user_id, data)


@router.post("/me/password", response_model=SuccessResponse)
async def change_current_user_password(
    data: PasswordChange,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
):
    return await user_service.change_current_user_password(
        db, user_id, data.current_password, data.new_password
    )
