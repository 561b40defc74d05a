# leadmatch/service_layer/context.py
from __future__ import annotations

from dataclasses import dataclass

from ..models import UserType
from .errors import PermissionDeniedError


@dataclass(frozen=True)
class SessionContext:
    """
    Who is calling. Resolved per request from the bearer token and handed to
    every service function that needs it.
    """

    user_type: UserType
    user_id: int

    @property
    def is_buyer(self) -> bool:
        return self.user_type == UserType.buyer

    @property
    def is_marketer(self) -> bool:
        return self.user_type == UserType.marketer

    def require_buyer(self, message: str = "Only buyers can do this") -> int:
        if not self.is_buyer:
            raise PermissionDeniedError(message)
        return self.user_id

    def require_marketer(self, message: str = "Only marketers can do this") -> int:
        if not self.is_marketer:
            raise PermissionDeniedError(message)
        return self.user_id
