from automate.schemas.common import CamelModel
from automate.schemas.insights import CarInsights
from automate.schemas.listing import Listing, MarketStats
from automate.schemas.safety import SafetyData


class ProfileResponse(CamelModel):
    make: str
    model: str
    year: int
    safety: SafetyData
    insights: CarInsights | None = None
    market_stats: MarketStats | None = None
    sample_listings: list[Listing] = []
    total_listings: int = 0
    search_note: str | None = None  # set only when the listings search was widened
