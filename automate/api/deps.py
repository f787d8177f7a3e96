from functools import lru_cache

from fastapi import Depends

from automate.config import settings
from automate.providers.geocode import GeocodeProvider
from automate.providers.insights import InsightsProvider
from automate.providers.marketcheck import MarketcheckProvider
from automate.providers.nhtsa import NHTSAProvider
from automate.providers.youtube import YouTubeProvider
from automate.services.profile_aggregator import ProfileAggregator


def get_nhtsa() -> NHTSAProvider:
    return NHTSAProvider(settings)


def get_marketcheck() -> MarketcheckProvider:
    return MarketcheckProvider(settings)


def get_geocoder() -> GeocodeProvider:
    return GeocodeProvider(settings)


def get_youtube() -> YouTubeProvider:
    return YouTubeProvider(settings)


@lru_cache
def get_insights() -> InsightsProvider:
    # One OpenAI client (and its connection pool) per process
    return InsightsProvider(settings)


def get_profile_aggregator(
    nhtsa: NHTSAProvider = Depends(get_nhtsa),
    insights: InsightsProvider = Depends(get_insights),
    marketcheck: MarketcheckProvider = Depends(get_marketcheck),
) -> ProfileAggregator:
    return ProfileAggregator(nhtsa, insights, marketcheck, settings)
