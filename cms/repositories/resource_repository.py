from sqlalchemy.ext.asyncio import AsyncSession

from cms.models import Resource, utcnow
from cms.repositories.base import apply_changes, get_by_id, paginate, search_condition

SEARCH_COLUMNS = (Resource.file_name,)


async def find_by_id(db: AsyncSession, resource_id: str) -> Resource | None:
    return await get_by_id(db, Resource, resource_id)


async def find_all(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    directory: str = "all",
) -> tuple[list[Resource], int]:
    conditions = [search_condition(SEARCH_COLUMNS, search)]
    if directory in ("root", "upload"):
        conditions.append(Resource.directory == directory)
    return await paginate(db, Resource, conditions, page, page_size)


async def create(db: AsyncSession, data: dict) -> Resource:
    resource = Resource(**data)
    db.add(resource)
    await db.flush()
    return resource


async def update(db: AsyncSession, resource: Resource, changes: dict) -> Resource:
    apply_changes(resource, changes)
    resource.updated_at = utcnow()
    await db.flush()
    return resource


async def delete(db: AsyncSession, resource: Resource) -> None:
    await db.delete(resource)
    await db.flush()
