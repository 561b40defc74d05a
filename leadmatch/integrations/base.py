from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class SinkDeliveryResult:
    ok: bool
    status_code: int | None = None
    error: str | None = None

    @classmethod
    def accepted(cls, status_code: int | None = None) -> "SinkDeliveryResult":
        return cls(ok=True, status_code=status_code)

    @classmethod
    def rejected(cls, error: str, status_code: int | None = None) -> "SinkDeliveryResult":
        return cls(ok=False, status_code=status_code, error=error)


class LeadEventSink(Protocol):
    """Anything that can receive lead.created / lead.status_changed notifications."""

    async def deliver(self, event_type: str, payload: dict[str, Any]) -> SinkDeliveryResult:
        ...
