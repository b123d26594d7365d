"""
Resource service — metadata for files that live under ``settings.PUBLIC_DIR``.

Layout on disk::

    PUBLIC_DIR/<file_name>          directory == "root",   file_path == "<file_name>"
    PUBLIC_DIR/upload/<file_name>   directory == "upload", file_path == "upload/<file_name>"

Moving a resource between directories is filesystem first, database
second: if the rename fails the row is never touched, and if the row
update or its commit fails after the rename the file is moved back
before the error propagates. Deleting is database first, filesystem
second. Both operations commit themselves so the file is only touched
against a durable row. Concurrent moves of the same resource are not
serialised.
"""
import logging
import secrets
from pathlib import Path, PurePosixPath

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from cms.config import settings
from cms.exceptions import InternalError, NotFoundError, ValidationError
from cms.models import DIRECTORY_ROOT, DIRECTORY_UPLOAD, Resource
from cms.repositories import resource_repository
from cms.schemas import ResourceCreate, ResourceUpdate
from cms.services.common import isoformat, page_envelope

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def public_root() -> Path:
    return Path(settings.PUBLIC_DIR).resolve()


def relative_path_for(directory: str, file_name: str) -> str:
    """Public-relative, forward-slash path of *file_name* in *directory*."""
    if directory == DIRECTORY_ROOT:
        return file_name
    return str(PurePosixPath(DIRECTORY_UPLOAD, file_name))


def absolute_path(relative_path: str) -> Path:
    """Resolve *relative_path* under the public root, refusing anything outside it."""
    root = public_root()
    candidate = (root / relative_path.lstrip("/")).resolve()
    if candidate != root and root not in candidate.parents:
        raise ValidationError("File path must stay inside the public directory")
    return candidate


def get_resource_url(resource: Resource) -> str:
    return f"/{resource.file_path}"


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _resource_to_dict(resource: Resource) -> dict:
    return {
        "id": resource.id,
        "file_name": resource.file_name,
        "file_path": resource.file_path,
        "file_size": resource.file_size,
        "mime_type": resource.mime_type,
        "directory": resource.directory,
        "uploaded_by": resource.uploaded_by,
        "url": get_resource_url(resource),
        "created_at": isoformat(resource.created_at),
        "updated_at": isoformat(resource.updated_at),
    }


async def _get_or_404(db: AsyncSession, resource_id: str) -> Resource:
    resource = await resource_repository.find_by_id(db, resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    return resource


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_resource_by_id(db: AsyncSession, resource_id: str) -> dict:
    return _resource_to_dict(await _get_or_404(db, resource_id))


async def get_resources(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    directory: str = "all",
) -> dict:
    resources, total = await resource_repository.find_all(
        db, page=page, page_size=page_size, search=search, directory=directory
    )
    return page_envelope([_resource_to_dict(r) for r in resources], total, page, page_size)


async def create_resource(db: AsyncSession, data: ResourceCreate, uploaded_by: str | None = None) -> dict:
    """
    Record metadata for a file the upload step already wrote.

    Raises NotFoundError when nothing exists at ``data.file_path``.
    """
    if not absolute_path(data.file_path).is_file():
        raise NotFoundError("File not found")
    values = data.model_dump()
    values["uploaded_by"] = uploaded_by
    resource = await resource_repository.create(db, values)
    return _resource_to_dict(resource)


async def update_resource(db: AsyncSession, resource_id: str, data: ResourceUpdate) -> dict:
    resource = await _get_or_404(db, resource_id)
    if data.directory is None or data.directory == resource.directory:
        resource = await resource_repository.update(db, resource, {})
        return _resource_to_dict(resource)

    old_path = absolute_path(resource.file_path)
    new_file_path = relative_path_for(data.directory, resource.file_name)
    new_path = absolute_path(new_file_path)

    try:
        new_path.parent.mkdir(parents=True, exist_ok=True)
        old_path.rename(new_path)
    except OSError:
        logger.exception("Failed to move resource %s from %s to %s", resource.id, old_path, new_path)
        raise InternalError("Failed to move file")

    try:
        resource = await resource_repository.update(
            db, resource, {"directory": data.directory, "file_path": new_file_path}
        )
        await db.commit()
    except Exception:
        try:
            new_path.rename(old_path)
        except OSError:
            logger.exception("Failed to move resource %s back to %s", resource_id, old_path)
        raise

    logger.info("Moved resource %s to %s", resource.id, new_file_path)
    return _resource_to_dict(resource)


async def delete_resource(db: AsyncSession, resource_id: str) -> dict:
    resource = await _get_or_404(db, resource_id)
    path = absolute_path(resource.file_path)
    await resource_repository.delete(db, resource)
    await db.commit()
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("File not found when deleting resource %s: %s", resource_id, path)
    return {"success": True}


async def store_upload(upload: UploadFile, directory: str) -> dict:
    """
    Write an uploaded file under a random name (extension kept) and
    return its metadata. No database row is created here.
    """
    extension = PurePosixPath(upload.filename or "").suffix
    file_name = secrets.token_hex(16) + extension
    file_path = relative_path_for(directory, file_name)
    target = absolute_path(file_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    content = await upload.read()
    target.write_bytes(content)
    logger.info("Stored upload %s (%d bytes)", file_path, len(content))

    return {
        "file_name": file_name,
        "file_path": file_path,
        "file_size": str(len(content)),
        "mime_type": upload.content_type or "application/octet-stream",
        "directory": directory,
    }
