from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from prometheus_client import Counter

from ..core.config import settings
from ..schemas import ErrorResponse, SearchResponse
from ..services import listing_service
from ...scraper.utils import build_search_url

logger = logging.getLogger("kleinanzeigen-api")

SEARCH_REQUESTS = Counter("search_requests_total", "Search requests served")

router = APIRouter(tags=["search"])


@router.get("/search", response_model=SearchResponse)
def search(
    request: Request,
    q: str = Query(listing_service.DEFAULT_QUERY),
    locationName: str = Query("Berlin"),
    distance: str = Query("50"),
    priceMax: Optional[int] = Query(None),
    sortBy: str = Query("CREATION_DATE_DESC"),
):
    """Mock search: realistic electronics offers filtered by price and title."""
    SEARCH_REQUESTS.inc()
    logger.info("Search parameters: %s", dict(request.query_params))
    try:
        url = build_search_url(settings.base_url, q, locationName, distance, sortBy, priceMax)
        logger.info("Searching URL: %s", url)
        results = listing_service.search(settings.base_url, q=q, price_max=priceMax)
    except Exception as e:
        logger.exception("Search error")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Fehler beim Laden der Suchergebnisse", details=str(e)).model_dump(),
        )
    return {
        "success": True,
        "count": len(results),
        "results": results,
        "query": dict(request.query_params),
        "note": "Mock-Daten - zeigt realistische Technik-Angebote",
    }
