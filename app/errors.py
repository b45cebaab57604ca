"""Domain errors raised by the services and the store.

Every error derives from :class:`AppError`, carries a stable snake-case
``code`` and the HTTP status the boundary renders it with.  Routes never
raise ``HTTPException`` for domain outcomes; the handler registered in
:mod:`app.main` does the translation.

Hierarchy::

    AppError
    ├── ValidationError
    ├── NotFound
    │   └── TargetUserNotFound
    ├── AuthorizationError
    │   ├── NotAMember
    │   ├── InsufficientRole
    │   └── OwnerOnly
    ├── OwnerProtected
    ├── AlreadyMember
    ├── InvalidAssignee
    ├── EmailInUse
    ├── InvalidCredentials
    ├── Unauthenticated
    ├── RateLimited
    └── Transient
"""

from __future__ import annotations

from typing import Any

class AppError(Exception):
    """Base exception for all domain errors."""

    code = "app_error"
    status_code = 500
    default_message = "application error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details: dict[str, Any] = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"

class ValidationError(AppError):
    code = "validation_error"
    status_code = 400
    default_message = "invalid input"

class NotFound(AppError):
    code = "not_found"
    status_code = 404
    default_message = "not found"

class TargetUserNotFound(NotFound):
    code = "target_user_not_found"
    default_message = "user not found"

class AuthorizationError(AppError):
    """Actor is known but the operation is not permitted."""

    code = "forbidden"
    status_code = 403
    default_message = "forbidden"

class NotAMember(AuthorizationError):
    code = "not_a_member"
    default_message = "not a member of this project"

class InsufficientRole(AuthorizationError):
    code = "insufficient_role"
    default_message = "role does not permit this operation"

class OwnerOnly(AuthorizationError):
    code = "owner_only"
    default_message = "only the project owner can do this"

class OwnerProtected(AppError):
    code = "owner_protected"
    status_code = 400
    default_message = "the project owner cannot be removed or reassigned"

class AlreadyMember(AppError):
    code = "already_member"
    status_code = 409
    default_message = "user is already a member of this project"

class InvalidAssignee(AppError):
    code = "invalid_assignee"
    status_code = 400
    default_message = "assignee must be a member of the project"

class EmailInUse(AppError):
    code = "email_in_use"
    status_code = 409
    default_message = "email already registered"

class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "invalid credentials"

class Unauthenticated(AppError):
    code = "unauthenticated"
    status_code = 401
    default_message = "authentication required"

class Transient(AppError):
    """Store or deadline failure. Safe for the caller to retry."""

    code = "transient"
    status_code = 503
    default_message = "temporary failure, retry the request"

class RateLimited(AppError):
    code = "rate_limited"
    status_code = 429
    default_message = "too many requests"
