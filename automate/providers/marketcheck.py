import logging
from urllib.parse import quote

from automate.providers.base import BaseProvider, ProviderError
from automate.schemas.listing import (
    Listing,
    ListingSearchResult,
    ListingsSearchParams,
    MarketStats,
)

logger = logging.getLogger(__name__)

# ListingsSearchParams field -> Marketcheck query parameter
QUERY_PARAM_NAMES = {
    "make": "make",
    "model": "model",
    "year": "year",
    "year_min": "year_gte",
    "year_max": "year_lte",
    "price_min": "price_gte",
    "price_max": "price_lte",
    "miles_max": "miles_lte",
    "body_type": "body_type",
    "fuel_type": "fuel_type",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "radius": "radius",
    "rows": "rows",
    "start": "start",
    "sort_by": "sort_by",
    "sort_order": "sort_order",
}


def _to_int(value) -> int:
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return 0


def parse_listing(raw: dict) -> Listing:
    """Reshape a raw Marketcheck listing into a Listing."""
    dealer = raw.get("dealer") or {}
    build = raw.get("build") or {}
    media = raw.get("media") or {}
    msrp = raw.get("msrp")

    return Listing(
        id=str(raw.get("id") or ""),
        vin=raw.get("vin") or "",
        heading=raw.get("heading") or "",
        price=_to_int(raw.get("price")),
        msrp=_to_int(msrp) if msrp else None,
        miles=_to_int(raw.get("miles")),
        exterior_color=raw.get("exterior_color") or "",
        interior_color=raw.get("interior_color") or "",
        seller_name=dealer.get("name") or "",
        seller_city=dealer.get("city") or "",
        seller_state=dealer.get("state") or "",
        seller_phone=dealer.get("phone") or "",
        vdp_url=raw.get("vdp_url") or "",
        photo_urls=media.get("photo_links") or [],
        make=build.get("make") or "",
        model=build.get("model") or "",
        year=_to_int(build.get("year")),
        trim=build.get("trim") or "",
        body_type=build.get("body_type") or "",
        fuel_type=build.get("fuel_type") or "",
        transmission=build.get("transmission") or "",
        drivetrain=build.get("drivetrain") or "",
        engine_size=str(build.get("engine_size") or ""),
        doors=_to_int(build.get("doors")),
        is_new=raw.get("inventory_type") == "new",
        is_certified=bool(raw.get("is_certified")),
        days_on_market=_to_int(raw.get("dom")),
    )


class MarketcheckProvider(BaseProvider):
    """Live dealer listings and market statistics from the Marketcheck API."""

    PROVIDER_NAME = "Marketcheck"

    def _require_key(self) -> str:
        if not self.settings.MARKETCHECK_API_KEY:
            logger.error("[Marketcheck] API key not configured")
            raise ProviderError(self.PROVIDER_NAME, "API key not configured")
        return self.settings.MARKETCHECK_API_KEY

    def build_query(self, params: ListingsSearchParams) -> dict:
        """Translate search params into Marketcheck query parameters.

        Unset filters are left out, so a search without zip is nationwide.
        """
        query = {"api_key": self._require_key()}
        for field, name in QUERY_PARAM_NAMES.items():
            value = getattr(params, field)
            if value:
                query[name] = value
        return query

    async def search_listings(self, params: ListingsSearchParams) -> ListingSearchResult:
        query = self.build_query(params)
        data = await self._get_json(
            f"{self.settings.MARKETCHECK_BASE_URL}/search/car/active", params=query
        )

        with self._parsing("listings search"):
            listings = [parse_listing(l) for l in data.get("listings") or []]
            result = ListingSearchResult(listings=listings, total=data.get("num_found") or len(listings))
        logger.debug(
            f"[Marketcheck] {params.make} {params.model} {params.year or ''} "
            f"zip={params.zip} radius={params.radius}: {result.total} found"
        )
        return result

    async def get_listing_by_id(self, listing_id: str) -> Listing | None:
        data = await self._get_json(
            f"{self.settings.MARKETCHECK_BASE_URL}/listing/{quote(listing_id)}",
            params={"api_key": self._require_key()},
            not_found_ok=True,
        )
        if not data:
            return None
        with self._parsing("listing"):
            return parse_listing(data)

    async def get_market_stats(self, make: str, model: str, year: int | None = None) -> MarketStats | None:
        query = {"api_key": self._require_key(), "make": make, "model": model}
        if year:
            query["year"] = year

        data = await self._get_json(
            f"{self.settings.MARKETCHECK_BASE_URL}/stats/car", params=query, not_found_ok=True
        )
        if not data:
            return None

        with self._parsing("market stats"):
            return MarketStats(
                average_price=data.get("mean_price") or 0,
                median_price=data.get("median_price") or 0,
                min_price=data.get("min_price") or 0,
                max_price=data.get("max_price") or 0,
                total_listings=data.get("num_found") or 0,
                average_miles=data.get("mean_miles") or 0,
                average_days_on_market=data.get("mean_dom") or 0,
            )
