import logging
from typing import Literal

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from automate.api.deps import (
    get_geocoder,
    get_insights,
    get_marketcheck,
    get_nhtsa,
    get_profile_aggregator,
)
from automate.providers.base import ProviderError
from automate.providers.geocode import GeocodeProvider
from automate.providers.insights import InsightsProvider
from automate.providers.marketcheck import MarketcheckProvider
from automate.providers.nhtsa import NHTSAProvider
from automate.schemas.common import ErrorResponse
from automate.schemas.financing import FinancingRequest, FinancingResponse
from automate.schemas.geocode import GeocodeResult
from automate.schemas.insights import (
    CarInsights,
    CompareRequest,
    DealScore,
    QueryRequest,
    RecommendationResponse,
    ScoreRequest,
    VehicleComparison,
)
from automate.schemas.listing import (
    Listing,
    ListingSearchResult,
    ListingsSearchParams,
    MarketStats,
    MoreListingsResponse,
)
from automate.schemas.profile import ProfileResponse
from automate.schemas.safety import SafetyData
from automate.schemas.vehicle import LocationFilter, VehicleIdentity, VehicleSpecs
from automate.services.financing import compute_loan
from automate.services.profile_aggregator import ProfileAggregator, ProfileUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/car", tags=["car"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post("/recommendations", response_model=RecommendationResponse)
async def get_recommendations(
    request: QueryRequest,
    insights: InsightsProvider = Depends(get_insights),
):
    if not request.query:
        return _error(400, "Query is required")
    return await insights.get_car_recommendations(request.query)


@router.get("/makes")
async def get_makes(nhtsa: NHTSAProvider = Depends(get_nhtsa)):
    try:
        return {"makes": await nhtsa.get_all_makes()}
    except ProviderError as e:
        logger.error(f"Error getting makes: {e}")
        return _error(500, "Failed to get makes")


@router.get("/models/{make}")
async def get_models(make: str, nhtsa: NHTSAProvider = Depends(get_nhtsa)):
    try:
        return {"models": await nhtsa.get_models_for_make(make)}
    except ProviderError as e:
        logger.error(f"Error getting models: {e}")
        return _error(500, "Failed to get models")


@router.get("/vin/{vin}", response_model=VehicleSpecs)
async def decode_vin(vin: str, nhtsa: NHTSAProvider = Depends(get_nhtsa)):
    try:
        specs = await nhtsa.decode_vin(vin)
    except ProviderError as e:
        logger.error(f"Error decoding VIN: {e}")
        return _error(500, "Failed to decode VIN")
    if not specs:
        return _error(404, "VIN not found or invalid")
    return specs


@router.get("/safety/{make}/{model}/{year}", response_model=SafetyData)
async def get_safety(
    make: str,
    model: str,
    year: int = Path(gt=0),
    nhtsa: NHTSAProvider = Depends(get_nhtsa),
):
    try:
        return await nhtsa.get_vehicle_data(make, model, year)
    except ProviderError as e:
        logger.error(f"Error getting safety data: {e}")
        return _error(500, "Failed to get safety data")


async def _insights_response(insights: InsightsProvider, make: str, model: str, year: int | None):
    try:
        return await insights.get_car_insights(make, model, year)
    except ProviderError as e:
        logger.error(f"Error getting insights: {e}")
        return _error(500, "Failed to generate insights")


@router.get("/insights/{make}/{model}", response_model=CarInsights)
async def get_insights_any_year(
    make: str,
    model: str,
    insights: InsightsProvider = Depends(get_insights),
):
    return await _insights_response(insights, make, model, None)


@router.get("/insights/{make}/{model}/{year}", response_model=CarInsights)
async def get_insights_for_year(
    make: str,
    model: str,
    year: int = Path(gt=0),
    insights: InsightsProvider = Depends(get_insights),
):
    return await _insights_response(insights, make, model, year)


@router.post("/compare", response_model=VehicleComparison)
async def compare_vehicles(
    request: CompareRequest,
    insights: InsightsProvider = Depends(get_insights),
):
    if not request.vehicles or len(request.vehicles) < 2:
        return _error(400, "Need at least 2 vehicles to compare")
    try:
        return await insights.compare_vehicles(request.vehicles)
    except ProviderError as e:
        logger.error(f"Error comparing vehicles: {e}")
        return _error(500, "Failed to compare vehicles")


@router.get("/listings", response_model=ListingSearchResult)
async def search_listings(
    make: str | None = None,
    model: str | None = None,
    year: int | None = Query(default=None, gt=0),
    year_min: int | None = Query(default=None, alias="yearMin"),
    year_max: int | None = Query(default=None, alias="yearMax"),
    price_min: int | None = Query(default=None, alias="priceMin"),
    price_max: int | None = Query(default=None, alias="priceMax"),
    miles_max: int | None = Query(default=None, alias="milesMax"),
    body_type: str | None = Query(default=None, alias="bodyType"),
    fuel_type: str | None = Query(default=None, alias="fuelType"),
    zip_code: str | None = Query(default=None, alias="zip"),
    radius: int = Query(default=50, gt=0),
    rows: int = Query(default=20, gt=0),
    sort_by: Literal["price", "miles", "dom", "year"] | None = Query(default=None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] | None = Query(default=None, alias="sortOrder"),
    marketcheck: MarketcheckProvider = Depends(get_marketcheck),
):
    params = ListingsSearchParams(
        make=make,
        model=model,
        year=year,
        year_min=year_min,
        year_max=year_max,
        price_min=price_min,
        price_max=price_max,
        miles_max=miles_max,
        body_type=body_type,
        fuel_type=fuel_type,
        zip=zip_code,
        radius=radius,
        rows=rows,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    try:
        return await marketcheck.search_listings(params)
    except ProviderError as e:
        logger.error(f"Error searching listings: {e}")
        return _error(500, "Failed to search listings")


@router.get("/listing/{listing_id}", response_model=Listing)
async def get_listing(listing_id: str, marketcheck: MarketcheckProvider = Depends(get_marketcheck)):
    try:
        listing = await marketcheck.get_listing_by_id(listing_id)
    except ProviderError as e:
        logger.error(f"Error getting listing: {e}")
        return _error(500, "Failed to get listing")
    if not listing:
        return _error(404, "Listing not found")
    return listing


async def _market_stats_response(marketcheck: MarketcheckProvider, make: str, model: str, year: int | None):
    try:
        stats = await marketcheck.get_market_stats(make, model, year)
    except ProviderError as e:
        logger.error(f"Error getting market stats: {e}")
        return _error(500, "Failed to get market stats")
    if not stats:
        return _error(404, "No market data found")
    return stats


@router.get("/market-stats/{make}/{model}", response_model=MarketStats)
async def get_market_stats_any_year(
    make: str,
    model: str,
    marketcheck: MarketcheckProvider = Depends(get_marketcheck),
):
    return await _market_stats_response(marketcheck, make, model, None)


@router.get("/market-stats/{make}/{model}/{year}", response_model=MarketStats)
async def get_market_stats_for_year(
    make: str,
    model: str,
    year: int = Path(gt=0),
    marketcheck: MarketcheckProvider = Depends(get_marketcheck),
):
    return await _market_stats_response(marketcheck, make, model, year)


@router.get("/places/geocode", response_model=GeocodeResult)
async def geocode(
    query: str | None = None,
    geocoder: GeocodeProvider = Depends(get_geocoder),
):
    if not query:
        return _error(400, "query is required")
    if not geocoder.configured:
        return _error(500, "GOOGLE_PLACES_API_KEY is not configured on the backend.")
    try:
        result = await geocoder.geocode(query)
    except ProviderError as e:
        logger.error(f"Error geocoding: {e}")
        return _error(500, "Failed to geocode")
    if not result:
        return _error(404, "No results found")
    return result


@router.post("/listing/score", response_model=DealScore)
async def score_listing(
    request: ScoreRequest,
    insights: InsightsProvider = Depends(get_insights),
):
    if not request.listing:
        return _error(400, "listing is required")
    try:
        return await insights.score_listing(request.listing)
    except ProviderError as e:
        logger.error(f"Error scoring listing: {e}")
        fallback = DealScore(
            score=50,
            verdict="Unable to score right now",
            reasons=["Fallback score used", "Try again later"],
        )
        return JSONResponse(status_code=500, content=fallback.model_dump(by_alias=True))


@router.get("/more-listings/{make}/{model}/{year}", response_model=MoreListingsResponse)
async def get_more_listings(
    make: str,
    model: str,
    year: int = Path(gt=0),
    zip_code: str | None = Query(default=None, alias="zip"),
    radius: int = Query(default=50, gt=0),
    start: int = Query(default=0, ge=0),
    rows: int = Query(default=10, gt=0),
    marketcheck: MarketcheckProvider = Depends(get_marketcheck),
):
    logger.info(f"[MoreListings] Fetching listings for {make} {model} {year}, start={start}, rows={rows}")
    params = ListingsSearchParams(
        make=make,
        model=model,
        year=year,
        rows=rows,
        start=start,
        zip=zip_code or None,
        radius=radius if zip_code else None,
    )
    try:
        result = await marketcheck.search_listings(params)
    except ProviderError as e:
        logger.error(f"Error getting more listings: {e}")
        return _error(500, "Failed to get more listings")

    return MoreListingsResponse(
        listings=result.listings,
        total=result.total,
        has_more=start + rows < result.total,
    )


@router.get("/profile/{make}/{model}/{year}", response_model=ProfileResponse)
async def get_car_profile(
    make: str,
    model: str,
    year: int = Path(gt=0),
    zip_code: str | None = Query(default=None, alias="zip"),
    radius: int | None = Query(default=None, gt=0),
    aggregator: ProfileAggregator = Depends(get_profile_aggregator),
):
    vehicle = VehicleIdentity(make=make, model=model, year=year)
    location = LocationFilter(
        postal_code=zip_code or None,
        radius_miles=radius or aggregator.default_radius,
    )
    try:
        return await aggregator.get_profile(vehicle, location)
    except ProfileUnavailableError as e:
        logger.error(f"Error getting car profile: {e}")
        return _error(500, "Failed to get car profile")


@router.post("/financing", response_model=FinancingResponse)
async def calculate_financing(request: FinancingRequest):
    return compute_loan(request)
