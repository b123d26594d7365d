from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import CurrentUserId, PaginationParams, get_current_user_id
from cms.schemas import (
    Directory,
    DirectoryFilter,
    ResourceCreate,
    ResourcePage,
    ResourceResponse,
    ResourceUpdate,
    SuccessResponse,
    UploadResponse,
)
from cms.services import resource_service

router = APIRouter(
    prefix="/api/v1/resources",
    tags=["resources"],
    dependencies=[Depends(get_current_user_id)],
)


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    directory: Directory = Form("upload"),
):
    return await resource_service.store_upload(file, directory)


@router.get("", response_model=ResourcePage)
async def get_resources(
    pagination: PaginationParams = Depends(),
    directory: DirectoryFilter = Query("all"),
    db: AsyncSession = Depends(get_db),
):
    return await resource_service.get_resources(
        db,
        page=pagination.page,
        page_size=pagination.page_size,
        search=pagination.search,
        directory=directory,
    )


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource_by_id(resource_id: str, db: AsyncSession = Depends(get_db)):
    return await resource_service.get_resource_by_id(db, resource_id)


@router.post("", status_code=201, response_model=ResourceResponse)
async def create_resource(data: ResourceCreate, uploaded_by: CurrentUserId, db: AsyncSession = Depends(get_db)):
    return await resource_service.create_resource(db, data, uploaded_by=uploaded_by)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(resource_id: str, data: ResourceUpdate, db: AsyncSession = Depends(get_db)):
    return await resource_service.update_resource(db, resource_id, data)


@router.delete("/{resource_id}", response_model=SuccessResponse)
async def delete_resource(resource_id: str, db: AsyncSession = Depends(get_db)):
    return await resource_service.delete_resource(db, resource_id)
