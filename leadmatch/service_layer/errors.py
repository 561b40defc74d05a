# leadmatch/service_layer/errors.py
from __future__ import annotations


class ServiceError(ValueError):
    """Base for expected, user-facing failures raised by the service layer."""


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class AuthError(ServiceError):
    pass


class NoMatchError(ServiceError):
    def __init__(self, reasons: tuple[str, ...] | list[str]):
        self.reasons = tuple(reasons)
        super().__init__(
            f"This property doesn't match your preferences: {', '.join(self.reasons)}"
        )
