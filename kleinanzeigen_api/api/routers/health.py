from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..core.config import settings
from ..deps import get_fetcher
from ...scraper.errors import FetchError
from ...scraper.fetcher import ResilientFetcher

VERSION = "2.0.0"
STARTED_AT = time.time()

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "uptime": round(time.time() - STARTED_AT, 3),
        "version": f"{VERSION} - eBay Kleinanzeigen API",
    }


@router.get("/ready")
async def readiness(fetcher: ResilientFetcher = Depends(get_fetcher)):
    """Checks that the marketplace answers at all. Any HTTP status below 500 counts."""
    checks: dict = {}
    start = time.time()
    try:
        resp = await fetcher.fetch(
            settings.base_url,
            settings.fetch_max_attempts,
            settings.fetch_timeout_seconds,
        )
        if resp.status_code < 500:
            checks["marketplace"] = "ok"
        else:
            checks["marketplace"] = "error"
            checks["marketplace_status"] = resp.status_code
    except FetchError as e:
        checks["marketplace"] = "error"
        checks["marketplace_error"] = str(e)
    timings = {"marketplace_ms": int((time.time() - start) * 1000)}
    return {
        "status": "ready" if checks["marketplace"] == "ok" else "not_ready",
        "checks": checks,
        "timings": timings,
    }


@router.get("/metrics")
def metrics():
    return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
