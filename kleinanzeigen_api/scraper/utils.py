from __future__ import annotations

import ipaddress
import re
from typing import Dict, Optional
from urllib.parse import urlencode, urlparse

import httpx

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

ELECTRONICS_CATEGORY_ID = "161"

# letters (IDN included), digits, hyphens and dots
_HOSTNAME_RE = re.compile(r"[^\W_](?:[\w.-]*[^\W_])?")


def browser_headers(user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "de-DE,de;q=0.9,en;q=0.8",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }


def _valid_host(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    return bool(_HOSTNAME_RE.fullmatch(host)) and not host.startswith(".") and ".." not in host


def is_absolute_http_url(url: object) -> bool:
    if not isinstance(url, str) or not url.strip() or url != url.strip():
        return False
    try:
        pr = urlparse(url)
        pr.port  # out-of-range ports raise ValueError
        httpx.URL(url)
    except (ValueError, httpx.InvalidURL):
        return False
    return pr.scheme in ("http", "https") and bool(pr.hostname) and _valid_host(pr.hostname)


def build_search_url(
    base_url: str,
    q: str,
    location: str,
    distance: str,
    sort_by: str,
    price_max: Optional[int] = None,
) -> str:
    """Search URL for the electronics category, in the marketplace's own parameter names."""
    params = [
        ("keywords", q),
        ("locationStr", location),
        ("radius", distance),
        ("sortingField", "PRICE" if sort_by == "PRICE_ASC" else "SORTING_DATE"),
        ("adType", "OFFERED"),
        ("pageNum", "1"),
    ]
    if price_max is not None:
        params.append(("priceMax", str(price_max)))
    params.append(("categoryId", ELECTRONICS_CATEGORY_ID))
    return f"{base_url.rstrip('/')}/s-elektronik/{urlencode(params)}"
