"""
Shared list/pagination query helper for every entity repository.

A repository describes *what* to filter (a list of SQL conditions) and
this module turns that into the two statements every list page needs:

1. COUNT over the filtered table, before pagination.
2. SELECT of one page, newest first.

An empty condition list produces no WHERE clause at all.
"""
from typing import Any, Sequence

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

_LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def search_condition(columns: Sequence[Any], term: str | None) -> ColumnElement[bool] | None:
    """
    Case-insensitive substring match of *term* across *columns*, OR-ed.

    Returns None for a blank term so callers can skip it.
    """
    term = (term or "").strip()
    if not term:
        return None
    pattern = f"%{_escape_like(term)}%"
    return or_(*(column.ilike(pattern, escape=_LIKE_ESCAPE) for column in columns))


def where_all(conditions: Sequence[ColumnElement[bool] | None]) -> ColumnElement[bool] | None:
    present = [c for c in conditions if c is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return and_(*present)


async def paginate(
    db: AsyncSession,
    model,
    conditions: Sequence[ColumnElement[bool] | None],
    page: int,
    page_size: int,
    options: Sequence[Any] = (),
) -> tuple[list, int]:
    """Return ``(items, total)`` for one page of *model* rows, newest first."""
    where = where_all(conditions)

    count_q = select(func.count()).select_from(model)
    if where is not None:
        count_q = count_q.where(where)
    total: int = (await db.execute(count_q)).scalar_one()

    rows_q = select(model).options(*options)
    if where is not None:
        rows_q = rows_q.where(where)
    rows_q = (
        rows_q.order_by(model.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(rows_q)
    return list(result.unique().scalars().all()), total


async def get_by_id(db: AsyncSession, model, entity_id: str, options: Sequence[Any] = ()):
    result = await db.execute(select(model).where(model.id == entity_id).options(*options))
    return result.unique().scalar_one_or_none()


def apply_changes(entity, changes: dict) -> None:
    """Copy *changes* onto *entity*; callers decide which keys are present."""
    for field, value in changes.items():
        setattr(entity, field, value)
