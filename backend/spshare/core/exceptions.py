"""
Domain exceptions raised by the service layer.

The API layer maps each class to an HTTP status in ``main.py``; services never
raise ``HTTPException`` themselves.
"""

from typing import Any, Optional


class ShareError(Exception):
    """Base class for all application errors."""

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "detail": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class NotFoundError(ShareError):
    """Unknown user, group, item or membership."""

    default_error_code = "NOT_FOUND"
    status_code = 404


class UnauthorizedError(ShareError):
    """The caller is not allowed to perform the action."""

    default_error_code = "UNAUTHORIZED"
    status_code = 403


class ConflictError(ShareError):
    """Unique-constraint collision or a workflow request already processed."""

    default_error_code = "CONFLICT"
    status_code = 409


class ValidationFailedError(ShareError):
    """Input rejected by the core (e.g. unsupported file type)."""

    default_error_code = "VALIDATION_FAILED"
    status_code = 400


class StoreError(ShareError):
    """Database or byte-storage failure; the message is kept generic."""

    default_error_code = "STORE_ERROR"
    status_code = 500


class QuotaExceededError(ShareError):
    """An upload would break a user, group or item-type limit.

    ``scope`` is one of ``user``, ``group`` or ``item_type``; ``kind`` is
    ``count`` or ``space``. ``limit`` and ``attempted`` are in items or MB.
    """

    default_error_code = "QUOTA_EXCEEDED"
    status_code = 400

    def __init__(self, message: str, scope: str, kind: str, limit, attempted):
        self.scope = scope
        self.kind = kind
        self.limit = limit
        self.attempted = attempted
        super().__init__(
            message,
            details={
                "scope": scope,
                "kind": kind,
                "limit": limit,
                "attempted": attempted,
            },
        )
