from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from ..deps import require_api_key
from ....config import settings
from ....domain.policies import BUDGET_TOLERANCE, CURRENCY, KNOWN_LOCATIONS, TIER_THRESHOLDS

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config", dependencies=[Depends(require_api_key)])
def debug_config() -> dict[str, Any]:
    """Effective runtime settings plus the fixed qualification constants. No secrets."""
    low, high = BUDGET_TOLERANCE
    return {
        "env": settings.ENV,
        "db_url": settings.LEADMATCH_DB_URL,
        "api_key_required": bool(settings.API_KEY),
        "session_ttl_minutes": settings.SESSION_TTL_MINUTES,
        "outbox": {
            "batch_size": settings.OUTBOX_BATCH_SIZE,
            "max_attempts": settings.OUTBOX_MAX_ATTEMPTS,
            "webhook_rps": settings.OUTBOX_WEBHOOK_RPS,
            "dispatch_every_minutes": settings.SCHED_DISPATCH_INTERVAL_MINUTES,
        },
        "qualification": {
            "budget_band": [str(low), str(high)],
            "tiers": {tier.value: cutoff for tier, cutoff in TIER_THRESHOLDS.items()},
            "currency": CURRENCY,
            "known_locations": list(KNOWN_LOCATIONS),
        },
    }


@router.get("/debug/routes", dependencies=[Depends(require_api_key)])
def debug_routes(request: Request) -> list[str]:
    """Every documented "METHOD /path", read from the OpenAPI schema so nested routers are included."""
    paths = request.app.openapi().get("paths", {})
    return sorted(f"{method.upper()} {path}" for path, ops in paths.items() for method in ops)
