"""Domain error taxonomy shared by services and route handlers."""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for failures a caller can act on."""

    status_code: int = 500


class UnauthorizedError(ServiceError):
    """Raised when a request carries no usable session."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Raised when the caller's role or ownership is insufficient."""

    status_code = 403


class ValidationError(ServiceError):
    """Raised for malformed or invalid input."""

    status_code = 400


class NotFoundError(ServiceError):
    """Raised when a referenced record does not exist or was soft-deleted."""

    status_code = 404


class ConflictError(ServiceError):
    """Raised when a write would break a uniqueness or activity invariant."""

    status_code = 409
