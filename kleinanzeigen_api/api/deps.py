from __future__ import annotations

from fastapi import Request

from ..scraper.fetcher import ResilientFetcher


def get_fetcher(request: Request) -> ResilientFetcher:
    return request.app.state.fetcher
