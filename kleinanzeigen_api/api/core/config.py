from __future__ import annotations

import os
from typing import List

from pydantic import BaseModel


def _csv(name: str, default: str) -> List[str]:
    return [x.strip() for x in os.getenv(name, default).split(",") if x.strip()]


class Settings(BaseModel):
    env: str = os.getenv("ENV", "dev")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    base_url: str = os.getenv("KLEINANZEIGEN_BASE_URL", "https://www.ebay-kleinanzeigen.de")
    cors_origins: List[str] = _csv("CORS_ORIGINS", "*")
    fetch_max_attempts: int = int(os.getenv("FETCH_MAX_ATTEMPTS", "2"))
    fetch_timeout_seconds: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "10"))
    fetch_base_delay_seconds: float = float(os.getenv("FETCH_BASE_DELAY_SECONDS", "1.0"))
    fetch_max_redirects: int = int(os.getenv("FETCH_MAX_REDIRECTS", "5"))
    user_agent: str = os.getenv(
        "FETCH_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    )


settings = Settings()
