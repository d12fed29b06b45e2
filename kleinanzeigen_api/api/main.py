from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.logging import setup_logging
from .routers import ads, health, search
from .schemas import ErrorResponse
from ..scraper.fetcher import ResilientFetcher

setup_logging(settings.log_level)
logger = logging.getLogger("kleinanzeigen-api")

app = FastAPI(title="eBay Kleinanzeigen Technik API", version=health.VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.state.fetcher = ResilientFetcher.from_settings(settings)

app.include_router(health.router)
app.include_router(search.router)
app.include_router(ads.router)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Interner Serverfehler",
            details=str(exc) if settings.env == "development" else None,
        ).model_dump(),
    )


@app.get("/")
def root():
    return {
        "message": "eBay Kleinanzeigen Technik API - Erweiterte Version",
        "version": health.VERSION,
        "endpoints": {
            "search": "/search?q=iphone&locationName=Berlin&priceMax=500",
            "ad": "/ad/:id",
            "health": "/health",
            "ready": "/ready",
            "metrics": "/metrics",
        },
        "examples": {
            "search_iphone": "/search?q=iphone",
            "search_gaming": "/search?q=gaming&priceMax=1000",
            "search_berlin": "/search?locationName=Berlin&distance=20",
        },
    }


def run() -> None:
    import uvicorn

    logger.info("Starting eBay Kleinanzeigen API on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
