import math
import re
from datetime import datetime

from cms.exceptions import ValidationError

SLUG_RE = re.compile(r"[a-z0-9-]+")
SLUG_MESSAGE = "Slug must contain only lowercase letters, numbers, and hyphens"


def validate_slug(slug: str) -> None:
    if not SLUG_RE.fullmatch(slug):
        raise ValidationError(SLUG_MESSAGE)


def isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def page_envelope(items: list, total: int, page: int, page_size: int) -> dict:
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size),
    }


def blank_to_none(changes: dict, fields: tuple[str, ...]) -> dict:
    """Store ``""`` as NULL for the optional text *fields* present in *changes*."""
    for field in fields:
        if field in changes and not changes[field]:
            changes[field] = None
    return changes


def drop_blank(changes: dict, fields: tuple[str, ...]) -> dict:
    """Ignore ``""``/None for required *fields*; the stored value stays as is."""
    for field in fields:
        if field in changes and not changes[field]:
            del changes[field]
    return changes
