"""Errors raised by use cases and translated to HTTP responses by the routers."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(ApplicationError):
    """Malformed input that reached a use case."""

    status_code = 400
    default_detail = "Bad request"


class UnauthorizedError(ApplicationError):
    status_code = 401
    default_detail = "Authentication required"


class ForbiddenError(ApplicationError):
    """The caller is authenticated but lacks the required relationship."""

    status_code = 403
    default_detail = "Forbidden"


class NotFoundError(ApplicationError):
    """The referenced resource does not exist or is not visible to the caller."""

    status_code = 404
    default_detail = "Resource not found"


__all__ = [
    "ApplicationError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "UnauthorizedError",
]
