"""Car profile assembly.

Safety data, owner insights, market stats and a sample of live listings are
fetched concurrently and merged into one ProfileResponse. When a location
scoped listings search comes back empty, the search radius is widened step by
step and, as a last resort, the search goes nationwide.
"""
import asyncio
import logging
from typing import Awaitable, TypeVar

from automate.config import Settings
from automate.providers.base import ProviderError
from automate.providers.insights import InsightsProvider
from automate.providers.marketcheck import MarketcheckProvider
from automate.providers.nhtsa import NHTSAProvider
from automate.schemas.listing import ListingSearchResult, ListingsSearchParams
from automate.schemas.profile import ProfileResponse
from automate.schemas.safety import SafetyData
from automate.schemas.vehicle import LocationFilter, VehicleIdentity

logger = logging.getLogger(__name__)

T = TypeVar("T")

NATIONWIDE_NOTE = "No listings near your location. Showing nationwide results."


def radius_note(radius: int) -> str:
    return f"Showing listings within {radius} miles"


class ProfileUnavailableError(Exception):
    """Raised when every upstream provider failed for one profile request."""


class ProfileAggregator:
    def __init__(
        self,
        safety: NHTSAProvider,
        insights: InsightsProvider,
        listings: MarketcheckProvider,
        settings: Settings,
    ):
        self.safety = safety
        self.insights = insights
        self.listings = listings
        self.rows = settings.PROFILE_SAMPLE_ROWS
        self.default_radius = settings.DEFAULT_RADIUS_MILES
        self.radius_steps = sorted(set(settings.LISTINGS_RADIUS_STEPS))

    async def _degrade(self, label: str, call: Awaitable[T], placeholder: T) -> tuple[T, bool]:
        """Await one provider call; on failure return (placeholder, True)."""
        try:
            return await call, False
        except ProviderError as e:
            logger.warning(f"[CarProfile] {label} unavailable, using placeholder: {e}")
            return placeholder, True

    async def _search(
        self,
        vehicle: VehicleIdentity,
        postal_code: str | None = None,
        radius: int | None = None,
    ) -> ListingSearchResult:
        params = ListingsSearchParams(
            make=vehicle.make,
            model=vehicle.model,
            year=vehicle.year,
            rows=self.rows,
            zip=postal_code,
            radius=radius if postal_code else None,
        )
        return await self.listings.search_listings(params)

    async def _search_or_empty(
        self,
        vehicle: VehicleIdentity,
        postal_code: str | None = None,
        radius: int | None = None,
    ) -> ListingSearchResult:
        result, _ = await self._degrade(
            "listings", self._search(vehicle, postal_code, radius), ListingSearchResult()
        )
        return result

    async def _widen_search(
        self,
        vehicle: VehicleIdentity,
        postal_code: str,
        initial_radius: int,
        initial: ListingSearchResult,
    ) -> tuple[ListingSearchResult, str | None]:
        """Walk the radius ladder, then fall back to a nationwide search.

        Steps are tried one at a time in ascending order; radii already
        covered by the initial search are skipped.
        """
        logger.info(
            f"[CarProfile] No listings for {vehicle.describe()} at ZIP {postal_code} "
            f"within {initial_radius} miles. Widening search..."
        )
        for radius in self.radius_steps:
            if radius <= initial_radius:
                continue
            widened = await self._search_or_empty(vehicle, postal_code, radius)
            logger.info(f"[CarProfile] Widened to {radius} miles: found {widened.total} listings")
            if widened.total > 0:
                return widened, radius_note(radius)

        logger.info(f"[CarProfile] Nothing near ZIP {postal_code}. Falling back to nationwide search...")
        nationwide = await self._search_or_empty(vehicle)
        logger.info(f"[CarProfile] Nationwide search found {nationwide.total} listings")
        if nationwide.total > 0:
            return nationwide, NATIONWIDE_NOTE
        return initial, None

    async def get_profile(
        self,
        vehicle: VehicleIdentity,
        location: LocationFilter | None = None,
    ) -> ProfileResponse:
        postal_code = location.postal_code if location else None
        radius = location.radius_miles if location else self.default_radius
        make, model, year = vehicle.make, vehicle.model, vehicle.year

        results = await asyncio.gather(
            self._degrade(
                "safety",
                self.safety.get_vehicle_data(make, model, year),
                SafetyData(make=make, model=model, year=year),
            ),
            self._degrade("insights", self.insights.get_car_insights(make, model, year), None),
            self._degrade("market stats", self.listings.get_market_stats(make, model, year), None),
            self._degrade(
                "listings",
                self._search(vehicle, postal_code, radius),
                ListingSearchResult(),
            ),
        )
        if all(failed for _, failed in results):
            raise ProfileUnavailableError(f"All providers failed for {vehicle.describe()}")

        (safety, _), (insights, _), (market_stats, _), (listing_result, _) = results

        search_note = None
        if listing_result.total == 0 and postal_code:
            listing_result, search_note = await self._widen_search(
                vehicle, postal_code, radius, listing_result
            )

        return ProfileResponse(
            make=make,
            model=model,
            year=year,
            safety=safety,
            insights=insights,
            market_stats=market_stats,
            sample_listings=listing_result.listings[: self.rows],
            total_listings=listing_result.total,
            search_note=search_note,
        )
