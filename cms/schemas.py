from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Directory = Literal["root", "upload"]
DirectoryFilter = Literal["root", "upload", "all"]
UserStatusFilter = Literal["all", "active", "inactive"]

# Integers that travel as strings (category sort order, file size).
_INT_STRING = r"^-?\d+$"


# --- Shared ---

class SuccessResponse(BaseModel):
    success: bool = True


class PaginatedResponse(BaseModel):
    items: list  # Narrowed per entity below
    total: int
    page: int
    page_size: int
    total_pages: int


# --- Auth ---

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)


class RegisterResponse(BaseModel):
    id: str
    name: str
    email: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ForgotPasswordResponse(SuccessResponse):
    # Only echoed back when APP_ENV == "development"
    reset_token: str | None = None


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6)


class AuthConfigResponse(BaseModel):
    allow_registration: bool
    allow_password_reset: bool


# --- User ---

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    image: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserPage(PaginatedResponse):
    items: list[UserResponse]


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)


class UserUpdate(BaseModel):
    # Email is immutable once the account exists.
    name: str | None = Field(None, min_length=1, max_length=255)
    password: str | None = Field(None, min_length=6)


class CurrentUserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)


class UserStatusUpdate(BaseModel):
    is_active: bool


class UserStatusResponse(BaseModel):
    id: str
    is_active: bool


class PasswordSet(BaseModel):
    password: str = Field(min_length=6)


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


# --- Category ---

class CategoryCreate(BaseModel):
    name_zh: str = Field(max_length=255)
    name_en: str = Field(max_length=255)
    slug: str = Field(max_length=255)
    description_zh: str | None = None
    description_en: str | None = None
    sort_order: str | None = Field(None, pattern=_INT_STRING)


class CategoryUpdate(BaseModel):
    name_zh: str | None = Field(None, max_length=255)
    name_en: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description_zh: str | None = None
    description_en: str | None = None
    sort_order: str | None = Field(None, pattern=_INT_STRING)


class CategoryResponse(BaseModel):
    id: str
    name_zh: str
    name_en: str
    slug: str
    description_zh: str | None
    description_en: str | None
    sort_order: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CategoryPage(PaginatedResponse):
    items: list[CategoryResponse]


# --- Article ---

class ArticleSEO(BaseModel):
    meta_title_zh: str | None = None
    meta_title_en: str | None = None
    meta_description_zh: str | None = None
    meta_description_en: str | None = None
    meta_keywords_zh: str | None = None
    meta_keywords_en: str | None = None
    og_image: str | None = None


class ArticleCreate(ArticleSEO):
    title_zh: str = Field(max_length=500)
    title_en: str = Field(max_length=500)
    content_zh: str
    content_en: str
    slug: str = Field(max_length=255)
    category_id: str | None = None
    is_published: bool = False


class ArticleUpdate(ArticleSEO):
    title_zh: str | None = Field(None, max_length=500)
    title_en: str | None = Field(None, max_length=500)
    content_zh: str | None = None
    content_en: str | None = None
    slug: str | None = Field(None, max_length=255)
    category_id: str | None = None
    is_published: bool | None = None


class ArticleResponse(ArticleSEO):
    id: str
    title_zh: str
    title_en: str
    content_zh: str
    content_en: str
    slug: str
    category_id: str | None
    category_name_zh: str | None = None
    category_name_en: str | None = None
    author_id: str | None
    is_published: bool
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ArticlePage(PaginatedResponse):
    items: list[ArticleResponse]


# --- Resource ---

class ResourceCreate(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    file_path: str = Field(min_length=1, max_length=500)
    file_size: str = Field(min_length=1, pattern=_INT_STRING)
    mime_type: str = Field(min_length=1, max_length=255)
    directory: Directory


class ResourceUpdate(BaseModel):
    directory: Directory | None = None


class ResourceResponse(BaseModel):
    id: str
    file_name: str
    file_path: str
    file_size: str
    mime_type: str
    directory: Directory
    uploaded_by: str | None
    url: str
    created_at: datetime
    updated_at: datetime


class ResourcePage(PaginatedResponse):
    items: list[ResourceResponse]


class UploadResponse(BaseModel):
    file_name: str
    file_path: str
    file_size: str
    mime_type: str
    directory: Directory
