"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``cms.main`` registers a
single handler that renders any ``CMSError`` as ``{"detail": message}``.
Services never return None for "not there"; they raise ``NotFoundError``.
"""


class CMSError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(CMSError):
    status_code = 400
    default_message = "Bad request"


class ValidationError(CMSError):
    status_code = 400
    default_message = "Validation failed"


class UnauthorizedError(CMSError):
    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(CMSError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(CMSError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CMSError):
    status_code = 409
    default_message = "Conflict"


class InternalError(CMSError):
    status_code = 500
    default_message = "Internal server error"
