from typing import Literal

from pydantic import Field

from automate.schemas.common import CamelModel


class Listing(CamelModel):
    id: str
    vin: str = ""
    heading: str = ""
    price: int = 0
    msrp: int | None = None
    miles: int = 0
    exterior_color: str = ""
    interior_color: str = ""
    seller_name: str = ""
    seller_city: str = ""
    seller_state: str = ""
    seller_phone: str = ""
    vdp_url: str = ""
    photo_urls: list[str] = []
    make: str = ""
    model: str = ""
    year: int = 0
    trim: str = ""
    body_type: str = ""
    fuel_type: str = ""
    transmission: str = ""
    drivetrain: str = ""
    engine_size: str = ""
    doors: int = 0
    is_new: bool = False
    is_certified: bool = False
    days_on_market: int = 0


class ListingSearchResult(CamelModel):
    listings: list[Listing] = []
    total: int = 0


class MoreListingsResponse(ListingSearchResult):
    has_more: bool


class ListingsSearchParams(CamelModel):
    make: str | None = None
    model: str | None = None
    year: int | None = None
    year_min: int | None = None
    year_max: int | None = None
    price_min: int | None = None
    price_max: int | None = None
    miles_max: int | None = None
    body_type: str | None = None
    fuel_type: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    radius: int | None = Field(default=None, gt=0)
    rows: int | None = Field(default=None, gt=0)
    start: int | None = Field(default=None, ge=0)
    sort_by: Literal["price", "miles", "dom", "year"] | None = None
    sort_order: Literal["asc", "desc"] | None = None


class MarketStats(CamelModel):
    average_price: float = 0
    median_price: float = 0
    min_price: float = 0
    max_price: float = 0
    total_listings: int = 0
    average_miles: float = 0
    average_days_on_market: float = 0
