from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class Listing(BaseModel):
    id: str
    title: str
    price: str
    location: str
    url: str
    postedDate: str
    images: List[str]


class SearchResponse(BaseModel):
    success: bool = True
    count: int
    results: List[Listing]
    query: Dict[str, Any]
    note: str


class Seller(BaseModel):
    name: str
    type: str


class AdDetail(BaseModel):
    success: bool = True
    id: str
    title: str
    description: str
    price: str
    location: str
    postedDate: str
    images: List[str]
    features: List[str]
    seller: Seller
    url: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
