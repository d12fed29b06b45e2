import random
import re

from fastapi.testclient import TestClient

from kleinanzeigen_api.api.main import app
from kleinanzeigen_api.api.services import listing_service
from kleinanzeigen_api.scraper.utils import build_search_url

BASE = "https://www.ebay-kleinanzeigen.de"


def test_search_defaults_return_all_mock_listings():
    r = TestClient(app).get("/search")
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["count"] == 5
    assert [it["id"] for it in data["results"]] == ["1", "2", "3", "4", "5"]
    assert data["query"] == {}


def test_search_filters_by_price_and_title():
    c = TestClient(app)
    cheap = c.get("/search", params={"priceMax": 700}).json()
    assert [it["id"] for it in cheap["results"]] == ["1", "4"]

    iphone = c.get("/search", params={"q": "IPHONE"}).json()
    assert iphone["count"] == 1
    assert iphone["results"][0]["title"].startswith("iPhone")
    assert iphone["query"] == {"q": "IPHONE"}

    assert c.get("/search", params={"q": "gaming", "priceMax": 1000}).json()["count"] == 0


def test_search_rejects_non_numeric_price():
    assert TestClient(app).get("/search", params={"priceMax": "viel"}).status_code == 422


def test_price_parsing_strips_currency_and_separators():
    assert listing_service.parse_price("€ 1.200") == 1200
    assert listing_service.parse_price("€ 650") == 650
    assert listing_service.parse_price("VB") is None


def test_posted_dates_go_back_one_day_per_listing():
    items = listing_service.mock_listings(BASE)
    dates = [it["postedDate"] for it in items]
    assert dates == sorted(dates, reverse=True)


def test_build_search_url():
    url = build_search_url(BASE, "iphone", "Berlin", "50", "PRICE_ASC", 500)
    assert url == (
        BASE + "/s-elektronik/keywords=iphone&locationStr=Berlin&radius=50&sortingField=PRICE"
        "&adType=OFFERED&pageNum=1&priceMax=500&categoryId=161"
    )
    assert "sortingField=SORTING_DATE" in build_search_url(BASE, "x", "Köln", "10", "CREATION_DATE_DESC")
    assert "priceMax" not in build_search_url(BASE, "x", "Köln", "10", "CREATION_DATE_DESC")


def test_ad_details():
    r = TestClient(app).get("/ad/42")
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["id"] == "42"
    assert data["url"].endswith("/s-anzeige/detail/42")
    m = re.fullmatch(r"€ (\d+)", data["price"])
    assert m and 100 <= int(m.group(1)) <= 1099
    assert data["seller"]["type"] == "Privatperson"


def test_ad_detail_price_uses_given_rng():
    a = listing_service.ad_detail("7", BASE, rng=random.Random(1))
    b = listing_service.ad_detail("7", BASE, rng=random.Random(1))
    assert a["price"] == b["price"]


def test_ad_details_error_payload(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("no data")

    monkeypatch.setattr(listing_service, "ad_detail", boom)
    r = TestClient(app).get("/ad/1")
    assert r.status_code == 500
    assert r.json() == {
        "success": False,
        "error": "Fehler beim Laden der Anzeigendetails",
        "details": "no data",
    }
