from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cms.config import settings
from cms.exceptions import UnauthorizedError
from cms.security import decode_token

http_bearer = HTTPBearer(auto_error=False)


class PaginationParams:
    """
    Reusable FastAPI dependency that parses and validates pagination
    query parameters.

    Usage in a router::

        @router.get("/articles")
        async def get_articles(pagination: PaginationParams = Depends()):
            ...

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    page_size:
        Number of items per page, clamped to ``settings.MAX_PAGE_SIZE``
        regardless of the value supplied by the caller.
    search:
        Optional free-text filter, stripped; blank means "no search".
    """

    def __init__(
        self,
        page: int = Query(
            1,
            ge=1,
            description="Page number (1-based).",
        ),
        page_size: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=100,
            description="Number of items returned per page (max 100).",
        ),
        search: str | None = Query(
            None,
            description="Substring matched against the entity's text columns.",
        ),
    ) -> None:
        self.page = page
        self.page_size = min(page_size, settings.MAX_PAGE_SIZE)
        self.search = search.strip() if search and search.strip() else None


def _user_id_from(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if not credentials:
        return None
    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        return None
    subject = payload.get("sub")
    return str(subject) if subject else None


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(http_bearer)] = None,
) -> str:
    """Protected-tier guard: the caller must present a valid bearer token."""
    user_id = _user_id_from(credentials)
    if user_id is None:
        raise UnauthorizedError("Not authenticated")
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
