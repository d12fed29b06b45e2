from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..schemas import AdDetail, ErrorResponse
from ..services import listing_service

logger = logging.getLogger("kleinanzeigen-api")

router = APIRouter(prefix="/ad", tags=["ads"])


@router.get("/{ad_id}", response_model=AdDetail)
def ad_details(ad_id: str):
    logger.info("Loading ad details for ID: %s", ad_id)
    try:
        detail = listing_service.ad_detail(ad_id, settings.base_url)
    except Exception as e:
        logger.exception("Ad details error")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Fehler beim Laden der Anzeigendetails", details=str(e)).model_dump(),
        )
    return {"success": True, **detail}
