from __future__ import annotations

import random
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

DEFAULT_QUERY = "technik"

_PLACEHOLDER_IMG = "https://i.ebayimg.com/images/g/placeholder{n}.jpg"

# (id, title, price, district, slug)
_MOCK_LISTINGS = [
    ("1", "iPhone 13 Pro 128GB Space Gray", "€ 650", "Berlin Mitte", "iphone-13-pro"),
    ("2", "Samsung Galaxy S23 Ultra 256GB", "€ 800", "Berlin Charlottenburg", "samsung-galaxy"),
    ("3", 'MacBook Air M2 13" 256GB', "€ 1.200", "Berlin Prenzlauer Berg", "macbook-air"),
    ("4", "Nintendo Switch OLED + Spiele", "€ 280", "Berlin Kreuzberg", "nintendo-switch"),
    ("5", "Gaming PC RTX 4070 + AMD Ryzen 7", "€ 1.500", "Berlin Wedding", "gaming-pc"),
]

AD_FEATURES = ["Sehr guter Zustand", "Originalverpackung", "Garantie", "Versand möglich"]


def _iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def parse_price(text: str) -> Optional[int]:
    """'€ 1.200' -> 1200. Returns None when the text has no digits."""
    digits = re.sub(r"[^\d]", "", text or "")
    return int(digits) if digits else None


def mock_listings(base_url: str, now: Optional[datetime] = None) -> List[Dict]:
    now = now or datetime.now(tz=timezone.utc)
    out: List[Dict] = []
    for ad_id, title, price, location, slug in _MOCK_LISTINGS:
        n = int(ad_id)
        out.append(
            {
                "id": ad_id,
                "title": title,
                "price": price,
                "location": location,
                "url": f"{base_url}/s-anzeige/{slug}/{123455 + n}",
                "postedDate": _iso(now - timedelta(days=n - 1)),
                "images": [_PLACEHOLDER_IMG.format(n="" if n == 1 else n)],
            }
        )
    return out


def filter_listings(items: List[Dict], q: Optional[str] = None, price_max: Optional[int] = None) -> List[Dict]:
    out = items
    if price_max is not None:
        out = [it for it in out if (parse_price(it["price"]) or 0) <= price_max]
    if q and q != DEFAULT_QUERY:
        needle = q.lower()
        out = [it for it in out if needle in it["title"].lower()]
    return out


def search(base_url: str, q: str = DEFAULT_QUERY, price_max: Optional[int] = None) -> List[Dict]:
    return filter_listings(mock_listings(base_url), q=q, price_max=price_max)


def ad_detail(ad_id: str, base_url: str, rng: Optional[random.Random] = None) -> Dict:
    rng = rng or random
    return {
        "id": ad_id,
        "title": f"Detailansicht für Anzeige #{ad_id}",
        "description": (
            "Dies ist eine Beispiel-Beschreibung für die Anzeige. In der echten Version würden hier "
            "die tatsächlichen Details der eBay Kleinanzeigen stehen. Das Gerät ist in sehr gutem "
            "Zustand und wurde wenig genutzt."
        ),
        "price": f"€ {rng.randint(100, 1099)}",
        "location": "Berlin",
        "postedDate": _iso(datetime.now(tz=timezone.utc)),
        "images": [_PLACEHOLDER_IMG.format(n="")],
        "features": list(AD_FEATURES),
        "seller": {"name": "TechnikVerkäufer123", "type": "Privatperson"},
        "url": f"{base_url}/s-anzeige/detail/{ad_id}",
    }
