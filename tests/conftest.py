"""Shared fixtures: settings with test keys and in-memory provider doubles."""
import asyncio

import httpx
import pytest

from automate.config import Settings
from automate.providers.base import ProviderError
from automate.schemas.insights import CarInsights
from automate.schemas.listing import Listing, ListingSearchResult, MarketStats
from automate.schemas.safety import SafetyData, SafetyRating


def make_listing(n: int) -> Listing:
    return Listing(
        id=f"listing-{n}",
        vin=f"VIN{n:014d}",
        heading=f"2024 Toyota RAV4 XLE #{n}",
        price=30000 + n * 100,
        miles=n * 1000,
        photo_urls=[f"https://img.example.com/{n}.jpg"],
        seller_city="Los Angeles",
        seller_state="CA",
        make="Toyota",
        model="RAV4",
        year=2024,
    )


class FakeSafety:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []
        self.gate: asyncio.Event | None = None

    async def get_vehicle_data(self, make, model, year):
        self.calls.append((make, model, year))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise ProviderError("NHTSA", "connection refused")
        return SafetyData(
            make=make,
            model=model,
            year=year,
            safety=SafetyRating(overall_rating="5"),
            recall_count=0,
            complaint_count=0,
        )


class FakeInsights:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def get_car_insights(self, make, model, year=None):
        self.calls.append((make, model, year))
        if self.fail:
            raise ProviderError("OpenAI", "rate limited")
        return CarInsights(summary=f"Owners like the {year} {make} {model}.", pros=["Reliable"])


class FakeListings:
    """Listings double keyed by search radius.

    `totals` maps a radius to the number of matches at that radius; the key
    None stands for the nationwide (no zip) search.
    """

    def __init__(
        self,
        totals: dict | None = None,
        fail: bool = False,
        stats_fail: bool = False,
        page_overflow: bool = False,
    ):
        self.totals = totals or {}
        self.fail = fail
        self.stats_fail = stats_fail
        self.page_overflow = page_overflow
        self.searches = []
        self.safety: FakeSafety | None = None

    async def search_listings(self, params):
        self.searches.append((params.zip, params.radius))
        if self.safety is not None and self.safety.gate is not None:
            self.safety.gate.set()
        if self.fail:
            raise ProviderError("Marketcheck", "HTTP 503")

        key = params.radius if params.zip else None
        total = self.totals.get(key, 0)
        count = total if self.page_overflow else min(total, params.rows or total)
        return ListingSearchResult(listings=[make_listing(i) for i in range(count)], total=total)

    async def get_market_stats(self, make, model, year=None):
        if self.fail or self.stats_fail:
            raise ProviderError("Marketcheck", "HTTP 503")
        return MarketStats(average_price=31000, median_price=30500, total_listings=42)


def routing_transport(routes: dict, seen: list | None = None) -> httpx.MockTransport:
    """Answer by URL path; values are JSON bodies, status codes or exceptions."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        answer = routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, json={"message": "not found"})
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, int):
            return httpx.Response(answer, text="upstream error")
        return httpx.Response(200, json=answer)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        MARKETCHECK_API_KEY="mc-test-key",
        OPENAI_API_KEY="",
        GOOGLE_PLACES_API_KEY="gp-test-key",
        YOUTUBE_API_KEY="yt-test-key",
    )
