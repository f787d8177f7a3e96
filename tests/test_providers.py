"""
Tests for the HTTP data providers against canned upstream responses:
- NHTSA safety ratings, recalls, complaints and VIN decoding
- Marketcheck listing search, single listing and market stats
- Google geocoding
- YouTube review videos
"""
from datetime import datetime, timezone

import httpx
import pytest

from automate.providers.base import ProviderError
from automate.providers.geocode import GeocodeProvider
from automate.providers.marketcheck import MarketcheckProvider
from automate.providers.nhtsa import NHTSAProvider
from automate.providers.youtube import YouTubeProvider, format_time_ago, format_view_count, parse_video
from automate.schemas.listing import ListingsSearchParams
from conftest import routing_transport

SAFETY_SEARCH_PATH = "/SafetyRatings/modelyear/2024/make/Toyota/model/RAV4"
SAFETY_RATINGS_PATH = "/SafetyRatings/VehicleId/19876"
RECALLS_PATH = "/recalls/recallsByVehicle"
COMPLAINTS_PATH = "/complaints/complaintsByVehicle"

RAW_COMPLAINT = {
    "odiNumber": 11500001,
    "dateOfIncident": "03/14/2024",
    "components": "ELECTRICAL SYSTEM",
    "summary": "Infotainment screen reboots while driving.",
    "crash": False,
    "fire": False,
    "numberOfInjuries": 0,
    "numberOfDeaths": 0,
}

NHTSA_ROUTES = {
    SAFETY_SEARCH_PATH: {"Results": [{"VehicleId": 19876, "VehicleDescription": "2024 Toyota RAV4 SUV AWD"}]},
    SAFETY_RATINGS_PATH: {
        "Results": [
            {
                "OverallRating": "5",
                "OverallFrontCrashRating": "4",
                "OverallSideCrashRating": "5",
                "RolloverRating": "4",
                "ComplaintsCount": 31,
                "RecallsCount": 2,
            }
        ]
    },
    RECALLS_PATH: {
        "results": [
            {
                "NHTSACampaignNumber": "24V123000",
                "ReportReceivedDate": "12/01/2024",
                "Component": "STEERING",
                "Summary": "Steering column bolt may loosen.",
                "Consequence": "Loss of steering control.",
                "Remedy": "Dealers will tighten the bolt.",
                "Manufacturer": "Toyota Motor Engineering & Manufacturing",
            }
        ]
    },
    COMPLAINTS_PATH: {"results": [RAW_COMPLAINT] * 25},
}


class TestNHTSAProvider:
    """NHTSA safety data"""

    @pytest.mark.asyncio
    async def test_vehicle_data_combines_all_sources(self, settings):
        provider = NHTSAProvider(settings, transport=routing_transport(NHTSA_ROUTES))
        data = await provider.get_vehicle_data("Toyota", "RAV4", 2024)

        assert data.safety.overall_rating == "5"
        assert data.safety.frontal_crash_rating == "4"
        assert data.safety.recalls == 2
        assert data.recall_count == 1
        assert data.recalls[0].campaign_number == "24V123000"
        assert data.complaint_count == 20
        assert data.complaints[0].odi_number == "11500001"
        assert data.complaints[0].component == "ELECTRICAL SYSTEM"

    @pytest.mark.asyncio
    async def test_no_rated_variant_gives_null_ratings(self, settings):
        routes = dict(NHTSA_ROUTES)
        routes[SAFETY_SEARCH_PATH] = {"Count": 0, "Results": []}
        provider = NHTSAProvider(settings, transport=routing_transport(routes))

        data = await provider.get_vehicle_data("Toyota", "RAV4", 2024)
        assert data.safety is None
        assert data.recall_count == 1

    @pytest.mark.asyncio
    async def test_one_failing_source_is_tolerated(self, settings):
        routes = dict(NHTSA_ROUTES)
        routes[COMPLAINTS_PATH] = 500
        provider = NHTSAProvider(settings, transport=routing_transport(routes))

        data = await provider.get_vehicle_data("Toyota", "RAV4", 2024)
        assert data.complaints == []
        assert data.complaint_count == 0
        assert data.safety is not None

    @pytest.mark.asyncio
    async def test_all_sources_failing_raises(self, settings):
        timeout = httpx.ConnectTimeout("timed out")
        routes = {SAFETY_SEARCH_PATH: timeout, RECALLS_PATH: timeout, COMPLAINTS_PATH: timeout}
        provider = NHTSAProvider(settings, transport=routing_transport(routes))

        with pytest.raises(ProviderError):
            await provider.get_vehicle_data("Toyota", "RAV4", 2024)

    @pytest.mark.asyncio
    async def test_decode_vin(self, settings):
        routes = {
            "/api/vehicles/DecodeVinValuesExtended/2T3P1RFV8RC000001": {
                "Results": [
                    {
                        "Make": "TOYOTA",
                        "Model": "RAV4",
                        "ModelYear": "2024",
                        "Trim": "XLE",
                        "EngineHP": "203",
                        "DriveType": "AWD/All-Wheel Drive",
                    }
                ]
            }
        }
        provider = NHTSAProvider(settings, transport=routing_transport(routes))
        specs = await provider.decode_vin("2T3P1RFV8RC000001")

        assert specs.year == 2024
        assert specs.trim == "XLE"
        assert specs.model_dump(by_alias=True)["engineHP"] == "203"

    @pytest.mark.asyncio
    async def test_makes_are_sorted(self, settings):
        routes = {
            "/api/vehicles/GetAllMakes": {
                "Results": [{"Make_Name": "TOYOTA"}, {"Make_Name": "ACURA"}, {"Make_Name": "MAZDA"}]
            }
        }
        provider = NHTSAProvider(settings, transport=routing_transport(routes))
        assert await provider.get_all_makes() == ["ACURA", "MAZDA", "TOYOTA"]


RAW_LISTING = {
    "id": "abc-123",
    "vin": "2T3P1RFV8RC000001",
    "heading": "2024 Toyota RAV4 XLE AWD",
    "price": 32995,
    "msrp": 35120,
    "miles": 8421,
    "exterior_color": "Blueprint",
    "interior_color": "Black",
    "vdp_url": "https://dealer.example.com/rav4",
    "inventory_type": "used",
    "is_certified": True,
    "dom": 17,
    "dealer": {"name": "Sunset Toyota", "city": "Los Angeles", "state": "CA", "phone": "555-0100"},
    "media": {"photo_links": ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"]},
    "build": {
        "make": "Toyota",
        "model": "RAV4",
        "year": 2024,
        "trim": "XLE",
        "body_type": "SUV",
        "fuel_type": "Unleaded",
        "transmission": "Automatic",
        "drivetrain": "4WD",
        "engine_size": 2.5,
        "doors": 4,
    },
}


class TestMarketcheckProvider:
    """Marketcheck listings and statistics"""

    @pytest.mark.asyncio
    async def test_search_sends_location_filter(self, settings):
        seen = []
        routes = {"/v2/search/car/active": {"num_found": 57, "listings": [RAW_LISTING]}}
        provider = MarketcheckProvider(settings, transport=routing_transport(routes, seen))

        result = await provider.search_listings(
            ListingsSearchParams(make="Toyota", model="RAV4", year=2024, zip="90210", radius=100, rows=10)
        )

        query = seen[0].url.params
        assert query["api_key"] == "mc-test-key"
        assert query["zip"] == "90210"
        assert query["radius"] == "100"
        assert query["rows"] == "10"
        assert result.total == 57

        listing = result.listings[0]
        assert listing.price == 32995
        assert listing.miles == 8421
        assert listing.seller_city == "Los Angeles"
        assert listing.photo_urls == RAW_LISTING["media"]["photo_links"]
        assert listing.is_new is False
        assert listing.is_certified is True
        assert listing.engine_size == "2.5"
        assert listing.days_on_market == 17

    @pytest.mark.asyncio
    async def test_nationwide_search_has_no_location(self, settings):
        seen = []
        routes = {"/v2/search/car/active": {"num_found": 0, "listings": []}}
        provider = MarketcheckProvider(settings, transport=routing_transport(routes, seen))

        result = await provider.search_listings(ListingsSearchParams(make="Toyota", model="RAV4", rows=10))

        assert "zip" not in seen[0].url.params
        assert "radius" not in seen[0].url.params
        assert result.total == 0
        assert result.listings == []

    @pytest.mark.asyncio
    async def test_paging_parameters(self, settings):
        seen = []
        routes = {"/v2/search/car/active": {"num_found": 40, "listings": []}}
        provider = MarketcheckProvider(settings, transport=routing_transport(routes, seen))

        await provider.search_listings(
            ListingsSearchParams(make="Honda", model="CR-V", rows=10, start=20, sort_by="price", sort_order="asc")
        )
        params = seen[0].url.params
        assert params["start"] == "20"
        assert params["sort_by"] == "price"
        assert params["sort_order"] == "asc"

    @pytest.mark.asyncio
    async def test_upstream_error_raises(self, settings):
        routes = {"/v2/search/car/active": 503}
        provider = MarketcheckProvider(settings, transport=routing_transport(routes))

        with pytest.raises(ProviderError):
            await provider.search_listings(ListingsSearchParams(make="Toyota", model="RAV4"))

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self, settings):
        settings.MARKETCHECK_API_KEY = ""
        provider = MarketcheckProvider(settings, transport=routing_transport({}))

        with pytest.raises(ProviderError):
            await provider.search_listings(ListingsSearchParams(make="Toyota", model="RAV4"))

    @pytest.mark.asyncio
    async def test_listing_by_id(self, settings):
        routes = {"/v2/listing/abc-123": RAW_LISTING}
        provider = MarketcheckProvider(settings, transport=routing_transport(routes))

        listing = await provider.get_listing_by_id("abc-123")
        assert listing.id == "abc-123"
        assert listing.msrp == 35120
        assert await provider.get_listing_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_market_stats(self, settings):
        routes = {
            "/v2/stats/car": {
                "mean_price": 31250.5,
                "median_price": 30900,
                "min_price": 24000,
                "max_price": 41000,
                "num_found": 812,
                "mean_miles": 15400,
                "mean_dom": 36.2,
            }
        }
        provider = MarketcheckProvider(settings, transport=routing_transport(routes))

        stats = await provider.get_market_stats("Toyota", "RAV4", 2024)
        assert stats.average_price == 31250.5
        assert stats.total_listings == 812
        assert stats.average_days_on_market == 36.2


class TestGeocodeProvider:
    """Location lookup"""

    @pytest.mark.asyncio
    async def test_geocode_extracts_components(self, settings):
        routes = {
            "/maps/api/geocode/json": {
                "results": [
                    {
                        "formatted_address": "Beverly Hills, CA 90210, USA",
                        "address_components": [
                            {"long_name": "90210", "short_name": "90210", "types": ["postal_code"]},
                            {"long_name": "Beverly Hills", "short_name": "Beverly Hills", "types": ["locality", "political"]},
                            {"long_name": "California", "short_name": "CA", "types": ["administrative_area_level_1", "political"]},
                        ],
                        "geometry": {"location": {"lat": 34.09, "lng": -118.41}},
                    }
                ]
            }
        }
        provider = GeocodeProvider(settings, transport=routing_transport(routes))

        result = await provider.geocode("Beverly Hills")
        assert result.postal_code == "90210"
        assert result.city == "Beverly Hills"
        assert result.state == "CA"
        assert result.lat == 34.09

    @pytest.mark.asyncio
    async def test_geocode_no_results(self, settings):
        routes = {"/maps/api/geocode/json": {"results": [], "status": "ZERO_RESULTS"}}
        provider = GeocodeProvider(settings, transport=routing_transport(routes))

        assert await provider.geocode("nowhere at all") is None


class TestMalformedPayloads:
    """Well-formed HTTP answers whose bodies have the wrong shape"""

    @pytest.mark.asyncio
    async def test_array_body_raises_provider_error(self, settings):
        routes = {SAFETY_SEARCH_PATH: ["unexpected"]}
        provider = NHTSAProvider(settings, transport=routing_transport(routes))

        with pytest.raises(ProviderError):
            await provider.get_safety_ratings("Toyota", "RAV4", 2024)

    @pytest.mark.asyncio
    async def test_malformed_records_raise_provider_error(self, settings):
        routes = {RECALLS_PATH: {"results": ["not a recall"]}, COMPLAINTS_PATH: {"results": 7}}
        provider = NHTSAProvider(settings, transport=routing_transport(routes))

        with pytest.raises(ProviderError):
            await provider.get_recalls("Toyota", "RAV4", 2024)
        with pytest.raises(ProviderError):
            await provider.get_complaints("Toyota", "RAV4", 2024)

    @pytest.mark.asyncio
    async def test_vehicle_data_degrades_malformed_part(self, settings):
        routes = dict(NHTSA_ROUTES)
        routes[SAFETY_SEARCH_PATH] = ["unexpected"]
        provider = NHTSAProvider(settings, transport=routing_transport(routes))

        data = await provider.get_vehicle_data("Toyota", "RAV4", 2024)
        assert data.safety is None
        assert data.recall_count == 1
        assert data.complaint_count == 20

    @pytest.mark.asyncio
    async def test_listing_with_wrong_field_type(self, settings):
        bad = {"num_found": 2, "listings": [{"id": "a", "media": {"photo_links": "x.jpg"}}]}
        provider = MarketcheckProvider(settings, transport=routing_transport({"/v2/search/car/active": bad}))

        with pytest.raises(ProviderError):
            await provider.search_listings(ListingsSearchParams(make="Toyota", model="RAV4"))

    @pytest.mark.asyncio
    async def test_market_stats_with_wrong_field_type(self, settings):
        routes = {"/v2/stats/car": {"mean_price": {"value": 1}}}
        provider = MarketcheckProvider(settings, transport=routing_transport(routes))

        with pytest.raises(ProviderError):
            await provider.get_market_stats("Toyota", "RAV4", 2024)

    @pytest.mark.asyncio
    async def test_geocode_with_list_results_entry(self, settings):
        routes = {"/maps/api/geocode/json": {"results": ["Beverly Hills"]}}
        provider = GeocodeProvider(settings, transport=routing_transport(routes))

        with pytest.raises(ProviderError):
            await provider.geocode("Beverly Hills")


YOUTUBE_SEARCH_PATH = "/youtube/v3/search"
YOUTUBE_VIDEOS_PATH = "/youtube/v3/videos"

RAW_VIDEO = {
    "id": "vid-1",
    "snippet": {
        "title": "2024 Toyota RAV4 Review",
        "channelTitle": "Alex on Autos",
        "publishedAt": "2024-01-01T12:00:00Z",
        "thumbnails": {
            "default": {"url": "https://i.ytimg.com/vi/vid-1/default.jpg"},
            "medium": {"url": "https://i.ytimg.com/vi/vid-1/mqdefault.jpg"},
        },
    },
    "statistics": {"viewCount": "1234567"},
}


class TestYouTubeProvider:
    """Review video search"""

    @pytest.mark.asyncio
    async def test_search_then_details(self, settings):
        seen = []
        routes = {
            YOUTUBE_SEARCH_PATH: {"items": [{"id": {"videoId": "vid-1"}}, {"id": {"kind": "youtube#channel"}}]},
            YOUTUBE_VIDEOS_PATH: {"items": [RAW_VIDEO]},
        }
        provider = YouTubeProvider(settings, transport=routing_transport(routes, seen))

        videos = await provider.search_reviews("Toyota", "RAV4", 2024)

        assert seen[0].url.params["q"] == "2024 Toyota RAV4 review"
        assert seen[0].url.params["maxResults"] == "6"
        assert seen[1].url.params["id"] == "vid-1"
        assert videos[0].channel_name == "Alex on Autos"
        assert videos[0].thumbnail.endswith("mqdefault.jpg")
        assert videos[0].view_count == "1,234,567 views"

    @pytest.mark.asyncio
    async def test_no_search_hits_skips_details(self, settings):
        seen = []
        routes = {YOUTUBE_SEARCH_PATH: {"items": []}}
        provider = YouTubeProvider(settings, transport=routing_transport(routes, seen))

        assert await provider.search_reviews("Toyota", "RAV4", 2024) == []
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_upstream_error_raises(self, settings):
        provider = YouTubeProvider(settings, transport=routing_transport({YOUTUBE_SEARCH_PATH: 403}))

        with pytest.raises(ProviderError):
            await provider.search_reviews("Toyota", "RAV4", 2024)

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self, settings):
        settings.YOUTUBE_API_KEY = ""
        provider = YouTubeProvider(settings, transport=routing_transport({}))

        assert provider.configured is False
        with pytest.raises(ProviderError):
            await provider.search_reviews("Toyota", "RAV4", 2024)

    def test_video_formatting(self):
        now = datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)
        video = parse_video({**RAW_VIDEO, "statistics": {}}, now=now)

        assert video.published_at == "3 months ago"
        assert video.view_count == "N/A"

    @pytest.mark.parametrize("days,expected", [
        (3, "3 days ago"),
        (15, "2 weeks ago"),
        (95, "3 months ago"),
        (800, "2 years ago"),
    ])
    def test_time_ago_buckets(self, days, expected):
        now = datetime(2025, 6, 1, tzinfo=timezone.utc)
        published = datetime.fromtimestamp(now.timestamp() - days * 86400, tz=timezone.utc)

        assert format_time_ago(published, now) == expected

    def test_view_count(self):
        assert format_view_count("987") == "987 views"
        assert format_view_count(None) == "N/A"
